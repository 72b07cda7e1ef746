"""Unit tests for solution_architect.framework: oracle frameworks and the default fallback."""

import json

import pytest

from solution_architect.context import normalize_context
from solution_architect.framework import default_framework, generate_framework, parse_dimensions
from solution_architect.oracle import OracleResponseError, ScriptedOracle
from solution_architect.prompts import FRAMEWORK_GENERATION_PROMPT
from tests.conftest import _decision_context
from tests.unit.conftest import _dimensions, _framework_json


def _ids(framework):
    return [d["id"] for d in framework["dimensions"]]


# ===================================================================
# default_framework
# ===================================================================


class TestDefaultFramework:
    def test_ux_with_constraints_and_goals(self):
        ctx = normalize_context(_decision_context(
            domain="ux_design",
            user_context={"primary_goals": ["Finish setup in one sitting"]},
            technical_context={"constraints": ["Must work on tablets"]},
        ))
        framework = default_framework(ctx)
        assert _ids(framework) == ["user_efficiency", "cognitive_load", "constraint_satisfaction", "goal_alignment"]
        assert framework["source"] == "fallback"
        assert framework["context_hash"] == "default"
        assert framework["framework_rationale"] == "Generated based on domain and context signals (fallback mode)"

    def test_general_padded_to_minimum(self):
        ctx = normalize_context(_decision_context(domain="general"))
        assert _ids(default_framework(ctx)) == ["fit_for_purpose", "risk_level", "delivery_effort", "long_term_fit"]

    def test_architecture_with_constraints(self):
        ctx = normalize_context(_decision_context(technical_context={"constraints": ["Public API"]}))
        assert _ids(default_framework(ctx)) == [
            "implementation_effort", "system_evolution", "constraint_satisfaction", "fit_for_purpose",
        ]

    @pytest.mark.parametrize("domain", [
        "product_management", "software_architecture", "ux_design",
        "data_modeling", "workflow_design", "general",
    ])
    def test_size_in_range_for_every_domain(self, domain):
        ctx = normalize_context(_decision_context(domain=domain))
        assert 4 <= len(default_framework(ctx)["dimensions"]) <= 6

    def test_weights_in_range(self, normalized_context):
        for dim in default_framework(normalized_context)["dimensions"]:
            assert 1 <= dim["weight"] <= 10

    def test_returns_copies(self, normalized_context):
        first = default_framework(normalized_context)
        first["dimensions"][0]["weight"] = 1
        assert default_framework(normalized_context)["dimensions"][0]["weight"] == 8


# ===================================================================
# parse_dimensions
# ===================================================================


class TestParseDimensions:
    def test_caps_at_six(self):
        assert len(parse_dimensions(_dimensions(8))) == 6

    def test_drops_nameless_and_duplicates(self):
        raw = _dimensions(3) + [{"id": "dim_1", "name": "Again"}, {"id": "x"}, "junk"]
        assert [d["id"] for d in parse_dimensions(raw)] == ["dim_1", "dim_2", "dim_3"]

    def test_id_from_name_and_weight_clamped(self):
        (dim,) = parse_dimensions([{"name": "Time to Market", "weight": 15}])
        assert dim["id"] == "time_to_market"
        assert dim["weight"] == 10

    def test_non_numeric_weight(self):
        (dim,) = parse_dimensions([{"name": "Risk", "weight": "high"}])
        assert dim["weight"] == 5

    def test_not_a_list(self):
        with pytest.raises(OracleResponseError):
            parse_dimensions({"id": "x"})


# ===================================================================
# generate_framework
# ===================================================================


class TestGenerateFramework:
    def test_oracle_framework(self, normalized_context):
        oracle = ScriptedOracle([_framework_json(5)])
        framework = generate_framework(normalized_context, oracle)
        assert framework["source"] == "oracle"
        assert _ids(framework) == ["dim_1", "dim_2", "dim_3", "dim_4", "dim_5"]
        assert framework["framework_rationale"] == "Chosen for API consumers"
        assert len(framework["context_hash"]) == 8
        assert oracle.calls[0][0] == FRAMEWORK_GENERATION_PROMPT

    def test_context_hash_stable_for_same_context(self, normalized_context):
        a = generate_framework(normalized_context, ScriptedOracle([_framework_json()]))
        b = generate_framework(normalized_context, ScriptedOracle([_framework_json()]))
        assert a["context_hash"] == b["context_hash"]

    def test_too_many_trimmed(self, normalized_context):
        framework = generate_framework(normalized_context, ScriptedOracle([_framework_json(9)]))
        assert len(framework["dimensions"]) == 6

    def test_too_few_falls_back(self, normalized_context):
        framework = generate_framework(normalized_context, ScriptedOracle([_framework_json(3)]))
        assert framework["source"] == "fallback"

    def test_missing_dimensions_falls_back(self, normalized_context):
        payload = json.dumps({"framework_rationale": "none"})
        assert generate_framework(normalized_context, ScriptedOracle([payload]))["source"] == "fallback"

    def test_oracle_failure_ux_fallback(self, failing_oracle):
        ctx = normalize_context(_decision_context(
            domain="ux_design",
            user_context={"primary_goals": ["Reduce support tickets"]},
            technical_context={"constraints": ["WCAG AA"]},
        ))
        framework = generate_framework(ctx, failing_oracle)
        ids = _ids(framework)
        assert 4 <= len(ids) <= 6
        assert {"user_efficiency", "cognitive_load"} & set(ids)
        assert "constraint_satisfaction" in ids
