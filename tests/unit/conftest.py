"""Unit-level conftest: Anthropic mocks, oracle response builders, repositories."""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from solution_architect.oracle import ScriptedOracle
from solution_architect.persistence import InMemoryDecisionRepository


# ---------------------------------------------------------------------------
# Anthropic mock helpers
# ---------------------------------------------------------------------------


def _make_anthropic_response(text=""):
    """Factory for Anthropic API message responses."""
    content = []
    if text:
        content.append(SimpleNamespace(type="text", text=text))
    return SimpleNamespace(
        content=content,
        usage=SimpleNamespace(input_tokens=100, output_tokens=50),
        stop_reason="end_turn",
    )


@pytest.fixture
def mock_anthropic_client():
    """Mock Anthropic client with configurable responses."""
    client = MagicMock()
    client.messages.create.return_value = _make_anthropic_response('{"ok": true}')
    return client


# ---------------------------------------------------------------------------
# Oracle response builders
# ---------------------------------------------------------------------------


def _quick_scan_json(overrides=None) -> str:
    """Quick-scan payload with a clear REST win unless overridden."""
    payload = {
        "dominant_option": {
            "id": "rest",
            "name": "REST",
            "confidence": 92,
            "margin_over_second": 25,
            "quick_rationale": "The team already runs REST services",
        },
        "needs_deep_analysis": False,
        "analysis_depth_recommended": "quick",
        "quick_signals": ["Existing REST tooling"],
        "estimated_complexity": "straightforward",
    }
    if overrides:
        payload.update(overrides)
    return json.dumps(payload)


def _needs_deep_json(depth="standard") -> str:
    return _quick_scan_json({
        "dominant_option": None,
        "needs_deep_analysis": True,
        "analysis_depth_recommended": depth,
        "estimated_complexity": "complex",
    })


def _dimensions(count: int) -> list[dict]:
    return [
        {
            "id": f"dim_{i}",
            "name": f"Dimension {i}",
            "description": f"Measures aspect {i}",
            "weight": 5 + (i % 5),
            "measurement_criteria": "1-10 scale",
            "why_relevant": "Differentiates the options",
        }
        for i in range(1, count + 1)
    ]


def _framework_json(count: int = 5) -> str:
    return json.dumps({
        "dimensions": _dimensions(count),
        "framework_rationale": "Chosen for API consumers",
    })


def _analysis_json(recommended="graphql", dimension_ids=None, overrides=None) -> str:
    """Deep-analysis payload scoring both REST vs GraphQL options."""
    dimension_ids = dimension_ids or [f"dim_{i}" for i in range(1, 6)]
    payload = {
        "recommendation": {
            "recommended_option_id": recommended,
            "recommended_option_name": "GraphQL" if recommended == "graphql" else "REST",
            "confidence": 78,
            "recommendation_rationale": "Clients have diverse data needs",
            "key_factors": [
                {"factor": "Client flexibility", "weight": "critical", "how_option_addresses": "Typed queries"},
            ],
            "next_steps": ["Prototype the schema"],
            "caveats": ["Plan for query cost limits"],
        },
        "contextual_evaluations": [
            {
                "option_id": option_id,
                "option_name": name,
                "dimension_scores": [
                    {"dimension_id": d, "dimension_name": d, "score": score, "rationale": "Because"}
                    for d in dimension_ids
                ],
                "overall_score": score * 10,
                "strengths": ["Strength"],
                "weaknesses": ["Weakness"],
            }
            for option_id, name, score in (("rest", "REST", 6), ("graphql", "GraphQL", 8))
        ],
    }
    if overrides:
        payload.update(overrides)
    return json.dumps(payload)


# ---------------------------------------------------------------------------
# Oracle and repository fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def failing_oracle():
    """Scripted oracle with an empty script: every call raises OracleError."""
    return ScriptedOracle([])


@pytest.fixture
def memory_repository():
    return InMemoryDecisionRepository()
