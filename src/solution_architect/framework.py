"""Contextual evaluation frameworks: decision-specific scoring dimensions."""

import hashlib
import logging
import re
from datetime import datetime, timezone

from . import config
from .oracle import ask_json, clamp_int, OracleResponseError
from .prompt_builder import build_framework_prompt
from .prompts import FRAMEWORK_GENERATION_PROMPT

logger = logging.getLogger("architect.framework")

MIN_DIMENSIONS = 4
MAX_DIMENSIONS = 6


def _dimension(dim_id, name, description, weight, measurement_criteria, why_relevant) -> dict:
    return {
        "id": dim_id,
        "name": name,
        "description": description,
        "weight": weight,
        "measurement_criteria": measurement_criteria,
        "why_relevant": why_relevant,
    }


DOMAIN_DIMENSIONS = {
    "ux_design": [
        _dimension("user_efficiency", "User Task Efficiency", "How quickly can users complete their goals", 9,
                   "Time and clicks to complete primary task", "UX decisions directly impact user productivity"),
        _dimension("cognitive_load", "Cognitive Load", "Mental effort required", 8,
                   "Complexity of mental model required", "Lower cognitive load improves adoption"),
    ],
    "software_architecture": [
        _dimension("implementation_effort", "Implementation Effort", "Development time and complexity", 8,
                   "Estimated development time and risk", "Architecture choices affect delivery timeline"),
        _dimension("system_evolution", "System Evolution", "How well it supports future changes", 7,
                   "Flexibility to accommodate likely changes", "Systems need to evolve over time"),
    ],
    "data_modeling": [
        _dimension("data_integrity", "Data Integrity", "How well the model prevents inconsistent data", 9,
                   "Constraints enforced by the model versus by application code", "Bad data is expensive to repair later"),
        _dimension("query_flexibility", "Query Flexibility", "How easily expected questions can be answered", 7,
                   "Effort to express the known access patterns", "The model must serve the reads it was built for"),
    ],
    "workflow_design": [
        _dimension("process_efficiency", "Process Efficiency", "Steps and hand-offs needed to finish the work", 8,
                   "Number of steps, waits, and hand-offs per item", "Workflow friction compounds across every item"),
        _dimension("adoption_friction", "Adoption Friction", "How much existing habits must change", 7,
                   "Training and behaviour change required", "Unadopted workflows revert to the old way"),
    ],
    "product_management": [
        _dimension("user_value", "User Value", "How much the option improves outcomes for target users", 9,
                   "Expected impact on the primary user problem", "Value to users drives every other metric"),
        _dimension("delivery_risk", "Delivery Risk", "Likelihood of shipping on time and scope", 7,
                   "Unknowns, dependencies, and team familiarity", "Late delivery erodes the value of a good idea"),
    ],
}

CONSTRAINT_DIMENSION = _dimension(
    "constraint_satisfaction", "Constraint Satisfaction", "How well the option satisfies stated constraints", 9,
    "Number and severity of constraint violations", "Constraints are non-negotiable requirements",
)

GOAL_DIMENSION = _dimension(
    "goal_alignment", "Goal Alignment", "How well the option supports user goals", 8,
    "Direct support for stated goals", "Solutions must serve user needs",
)

# Padding order when fewer than MIN_DIMENSIONS were derived from context
GENERIC_DIMENSIONS = [
    _dimension("fit_for_purpose", "Fit for Purpose", "How directly it solves the problem", 9,
               "Alignment with stated requirements", "Core requirement of any solution"),
    _dimension("risk_level", "Risk Level", "Potential for failure or issues", 7,
               "Likelihood and impact of problems", "Risk affects success probability"),
    _dimension("delivery_effort", "Delivery Effort", "Cost and time to put the option in place", 6,
               "Relative effort compared with the other options", "Effort competes with other priorities"),
    _dimension("long_term_fit", "Long-term Fit", "How well the option holds up as needs change", 6,
               "Expected rework over the next year", "Decisions outlive the situation that prompted them"),
]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def default_framework(context: dict) -> dict:
    """Deterministic framework built from domain and context signals.

    Domain template first, then constraint and goal dimensions when the
    context lists them, then generic padding up to MIN_DIMENSIONS.
    """
    dimensions = [dict(d) for d in DOMAIN_DIMENSIONS.get(context["domain"]["type"], [])]

    if context["technical_context"]["constraints"]:
        dimensions.append(dict(CONSTRAINT_DIMENSION))
    if context["user_context"]["primary_goals"]:
        dimensions.append(dict(GOAL_DIMENSION))

    for generic in GENERIC_DIMENSIONS:
        if len(dimensions) >= MIN_DIMENSIONS:
            break
        dimensions.append(dict(generic))

    return {
        "dimensions": dimensions[:MAX_DIMENSIONS],
        "framework_rationale": "Generated based on domain and context signals (fallback mode)",
        "context_hash": "default",
        "generated_at": _now(),
        "source": "fallback",
    }


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", text.lower()).strip("_")


def parse_dimensions(raw_dimensions) -> list[dict]:
    """Normalize oracle-proposed dimensions, dropping unusable or duplicate ones."""
    if not isinstance(raw_dimensions, list):
        raise OracleResponseError("Framework response has no dimensions list")

    dimensions = []
    seen = set()
    for raw in raw_dimensions:
        if not isinstance(raw, dict) or not raw.get("name"):
            continue
        name = str(raw["name"]).strip()
        dim_id = _slug(str(raw.get("id") or "")) or _slug(name)
        if not dim_id or dim_id in seen:
            continue
        seen.add(dim_id)
        dimensions.append(_dimension(
            dim_id,
            name,
            str(raw.get("description") or ""),
            clamp_int(raw.get("weight"), 1, 10, 5),
            str(raw.get("measurement_criteria") or ""),
            str(raw.get("why_relevant") or ""),
        ))
    return dimensions[:MAX_DIMENSIONS]


def generate_framework(context: dict, oracle) -> dict:
    """Ask the oracle for 4-6 decision-specific dimensions.

    Falls back to default_framework() on any failure, including a response
    with fewer than MIN_DIMENSIONS usable dimensions.
    """
    prompt = build_framework_prompt(context)
    try:
        parsed = ask_json(oracle, FRAMEWORK_GENERATION_PROMPT, prompt, config.FRAMEWORK_MAX_TOKENS)
        dimensions = parse_dimensions(parsed.get("dimensions"))
        if len(dimensions) < MIN_DIMENSIONS:
            raise OracleResponseError(
                f"Framework has {len(dimensions)} usable dimensions, need at least {MIN_DIMENSIONS}"
            )
    except Exception as e:
        logger.warning("Framework generation failed, using default framework: %s", e)
        return default_framework(context)

    logger.info("Framework generated with %d dimensions", len(dimensions))
    return {
        "dimensions": dimensions,
        "framework_rationale": str(parsed.get("framework_rationale") or ""),
        "context_hash": hashlib.md5(prompt.encode("utf-8")).hexdigest()[:8],
        "generated_at": _now(),
        "source": "oracle",
    }
