"""Unit tests for solution_architect.fingerprint."""

import hashlib

from solution_architect.context import normalize_context
from solution_architect.fingerprint import (
    compute_fingerprint_hash,
    extract_keywords,
    generate_fingerprint,
    identify_trade_off_types,
)
from tests.conftest import _decision_context


def _neutral_context(summary, **overrides):
    """Context whose options and summary trigger no trade-off probe."""
    return normalize_context(_decision_context(
        decision_summary=summary,
        domain="general",
        options=[
            {"id": "a", "name": "Option A", "description": "first candidate"},
            {"id": "b", "name": "Option B", "description": "second candidate"},
        ],
        **overrides,
    ))


# ===================================================================
# Keywords
# ===================================================================


class TestExtractKeywords:
    def test_frequency_then_first_appearance(self):
        assert extract_keywords("zeta alpha zeta beta alpha gamma") == ["zeta", "alpha", "beta", "gamma"]

    def test_drops_short_words_and_stop_words(self):
        text = "The database should have been faster than this cache"
        assert extract_keywords(text) == ["database", "faster", "cache"]

    def test_punctuation_splits_words(self):
        assert extract_keywords("Real-time API's!") == ["real", "time"]

    def test_limit(self):
        text = " ".join(f"word{i:02d}" for i in range(12))
        assert len(extract_keywords(text)) == 10
        assert extract_keywords(text, limit=3) == ["word00", "word01", "word02"]

    def test_empty(self):
        assert extract_keywords("") == []


# ===================================================================
# Trade-off types
# ===================================================================


class TestTradeOffTypes:
    def test_no_signal_is_general(self):
        assert identify_trade_off_types(_neutral_context("choose reporting engine")) == ["general"]

    def test_field_names_do_not_match(self):
        # Keys like user_context and budget_constraint exist but carry no values
        ctx = _neutral_context("choose reporting engine")
        assert "user_context" in ctx and "budget_constraint" in ctx["business_context"]
        assert identify_trade_off_types(ctx) == ["general"]

    def test_categories_in_rule_order(self):
        ctx = _neutral_context(
            "choose reporting engine",
            additional_context="Must be secure, fast and low cost",
        )
        assert identify_trade_off_types(ctx) == ["speed_vs_quality", "cost_vs_capability", "security"]

    def test_case_insensitive(self):
        ctx = _neutral_context("LATENCY matters for the reporting engine")
        assert identify_trade_off_types(ctx) == ["performance"]

    def test_option_text_is_probed(self):
        ctx = normalize_context(_decision_context(
            decision_summary="choose reporting engine",
            domain="general",
            options=[
                {"id": "a", "name": "Option A", "pros": ["Easy to integrate"]},
                {"id": "b", "name": "Option B"},
            ],
        ))
        assert identify_trade_off_types(ctx) == ["simplicity_vs_power", "integration"]


# ===================================================================
# Fingerprint
# ===================================================================


class TestGenerateFingerprint:
    def test_fields(self):
        ctx = normalize_context(_decision_context(
            user_context={"personas": ["Partner developer", "Mobile team"]},
            technical_context={"constraints": ["Public API"], "scale": "large"},
        ))
        fp = generate_fingerprint(ctx)
        assert fp["domain"] == "software_architecture"
        assert fp["scale"] == "large"
        assert fp["stakeholder_count"] == 2
        assert fp["constraint_count"] == 1
        assert fp["option_count"] == 2
        assert fp["keywords"] == ["rest", "graphql"]
        assert len(fp["fingerprint_hash"]) == 12
        assert fp["created_at"].endswith("+00:00")

    def test_hash_matches_documented_formula(self):
        fp = generate_fingerprint(_neutral_context("choose database engine for reporting service"))
        expected = hashlib.md5(
            b"general|medium|0|0|2|choose,database,engine,reporting,service|general"
        ).hexdigest()[:12]
        assert fp["fingerprint_hash"] == expected

    def test_same_shape_same_hash(self):
        fp_a = generate_fingerprint(_neutral_context("choose database engine for reporting service"))
        fp_b = generate_fingerprint(_neutral_context("reporting service: database engine, choose"))
        assert fp_a["keywords"] != fp_b["keywords"]
        assert fp_a["fingerprint_hash"] == fp_b["fingerprint_hash"]

    def test_repeatable(self, normalized_context):
        first = generate_fingerprint(normalized_context)
        second = generate_fingerprint(normalized_context)
        assert first["fingerprint_hash"] == second["fingerprint_hash"]

    def test_option_count_changes_hash(self):
        two = _neutral_context("choose reporting engine")
        three = _neutral_context("choose reporting engine")
        three["options"].append({
            "id": "c", "name": "Option C", "description": "", "pros": [], "cons": [],
            "implementation_notes": "",
        })
        assert generate_fingerprint(two)["fingerprint_hash"] != generate_fingerprint(three)["fingerprint_hash"]

    def test_only_top_five_keywords_hashed(self):
        base = compute_fingerprint_hash("general", "medium", 0, 0, 2, ["a1", "b2", "c3", "d4", "e5"], ["general"])
        extra = compute_fingerprint_hash(
            "general", "medium", 0, 0, 2, ["e5", "d4", "c3", "b2", "a1", "f6"], ["general"],
        )
        assert base == extra
