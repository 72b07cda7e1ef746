"""Decision context: defaults, normalization, and input validation."""

import logging

logger = logging.getLogger("architect.context")

DOMAIN_TYPES = (
    "product_management",
    "software_architecture",
    "ux_design",
    "data_modeling",
    "workflow_design",
    "general",
)

SCALES = ("small", "medium", "large", "enterprise")

DEFAULT_SCALE = "medium"


class InvalidDecisionError(ValueError):
    """Raised when a decision context cannot be analyzed.

    Raised before any analysis phase runs, so nothing has been
    fingerprinted or sent to the oracle yet.
    """


def _string_list(value) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value if str(v).strip()]


def _normalize_option(raw: dict, index: int) -> dict:
    if not isinstance(raw, dict):
        raise InvalidDecisionError(f"Option {index + 1} must be an object")
    option_id = str(raw.get("id") or "").strip()
    name = str(raw.get("name") or "").strip()
    if not option_id or not name:
        raise InvalidDecisionError(f"Option {index + 1} must have an id and a name")
    return {
        "id": option_id,
        "name": name,
        "description": str(raw.get("description") or ""),
        "pros": _string_list(raw.get("pros")),
        "cons": _string_list(raw.get("cons")),
        "implementation_notes": str(raw.get("implementation_notes") or ""),
    }


def _normalize_domain(raw) -> dict:
    if raw is None:
        return {"type": "general", "description": ""}
    if isinstance(raw, str):
        domain = {"type": raw, "description": ""}
    elif isinstance(raw, dict):
        domain = {
            "type": raw.get("type") or "general",
            "description": str(raw.get("description") or ""),
        }
    else:
        raise InvalidDecisionError("Domain must be a tag or an object with a 'type'")
    if domain["type"] not in DOMAIN_TYPES:
        raise InvalidDecisionError(
            f"Unknown domain '{domain['type']}'. Expected one of: {', '.join(DOMAIN_TYPES)}"
        )
    return domain


def normalize_context(raw: dict) -> dict:
    """Validate a raw decision context and return a fully-defaulted copy.

    The caller's dict is never mutated. Every optional block is present in
    the result, so downstream phases can index without guards.

    Raises:
        InvalidDecisionError: missing summary, fewer than 2 options,
            malformed or duplicate options, or an unknown domain/scale.
    """
    if not isinstance(raw, dict):
        raise InvalidDecisionError("Decision context must be an object")

    summary = str(raw.get("decision_summary") or "").strip()
    if not summary:
        raise InvalidDecisionError("Decision summary is required")

    raw_options = raw.get("options")
    if not isinstance(raw_options, list) or len(raw_options) < 2:
        raise InvalidDecisionError("At least 2 options are required for comparison")

    options = [_normalize_option(o, i) for i, o in enumerate(raw_options)]
    seen = set()
    for option in options:
        if option["id"] in seen:
            raise InvalidDecisionError(f"Duplicate option id '{option['id']}'")
        seen.add(option["id"])

    user = raw.get("user_context") or {}
    technical = raw.get("technical_context") or {}
    business = raw.get("business_context") or {}

    scale = technical.get("scale") or DEFAULT_SCALE
    if scale not in SCALES:
        raise InvalidDecisionError(
            f"Unknown scale '{scale}'. Expected one of: {', '.join(SCALES)}"
        )

    context = {
        "decision_summary": summary,
        "options": options,
        "domain": _normalize_domain(raw.get("domain")),
        "user_context": {
            "personas": _string_list(user.get("personas")),
            "skill_level": user.get("skill_level") or "",
            "primary_goals": _string_list(user.get("primary_goals")),
            "pain_points": _string_list(user.get("pain_points")),
        },
        "technical_context": {
            "existing_system": str(technical.get("existing_system") or ""),
            "constraints": _string_list(technical.get("constraints")),
            "scale": scale,
            "performance_requirements": str(technical.get("performance_requirements") or ""),
        },
        "business_context": {
            "urgency": business.get("urgency") or "",
            "budget_constraint": business.get("budget_constraint") or "",
            "long_term_vision": str(business.get("long_term_vision") or ""),
        },
        "additional_context": str(raw.get("additional_context") or ""),
    }
    logger.debug(
        "Normalized context: %d options, domain=%s, scale=%s",
        len(options), context["domain"]["type"], scale,
    )
    return context
