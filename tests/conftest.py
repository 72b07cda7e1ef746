"""Root conftest: decision-context builders and shared fixtures."""

import copy

import pytest

from solution_architect.context import normalize_context


_BASE_CONTEXT = {
    "decision_summary": "REST vs GraphQL for new API",
    "options": [
        {
            "id": "rest",
            "name": "REST",
            "description": "Resource-oriented HTTP endpoints",
            "pros": ["Widely understood", "HTTP caching"],
            "cons": ["Over-fetching"],
        },
        {
            "id": "graphql",
            "name": "GraphQL",
            "description": "Single endpoint with a typed query language",
            "pros": ["Clients request exactly what they need"],
            "cons": ["Caching is harder"],
        },
    ],
    "domain": "software_architecture",
}


def _decision_context(**overrides) -> dict:
    """Build a raw decision context (REST vs GraphQL) with top-level overrides."""
    context = copy.deepcopy(_BASE_CONTEXT)
    context.update(overrides)
    return context


def _fingerprint(**overrides) -> dict:
    """A hand-built fingerprint for similarity tests."""
    fp = {
        "domain": "software_architecture",
        "scale": "medium",
        "stakeholder_count": 0,
        "constraint_count": 0,
        "option_count": 2,
        "keywords": ["rest", "graphql", "public"],
        "trade_off_types": ["performance"],
        "fingerprint_hash": "abcdef123456",
        "created_at": "2026-01-01T00:00:00+00:00",
    }
    fp.update(overrides)
    return fp


def _past_record(fingerprint: dict | None = None, **overrides) -> dict:
    """A corpus record as written by build_decision_record()."""
    record = {
        "schema_version": "1.0",
        "fingerprint": fingerprint or _fingerprint(),
        "context": {"decision_summary": "REST vs GraphQL for the partner API"},
        "chosen_option": "GraphQL",
        "outcome": "success",
        "lessons_learned": ["Invest in schema governance early"],
        "timestamp": "2026-01-01T00:00:00+00:00",
    }
    record.update(overrides)
    return record


@pytest.fixture
def decision_context():
    """A fresh raw REST vs GraphQL context for each test."""
    return _decision_context()


@pytest.fixture
def normalized_context():
    """The REST vs GraphQL context after validation and defaulting."""
    return normalize_context(_decision_context())
