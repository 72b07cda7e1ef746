"""Quick scan: one cheap oracle call to decide whether deep analysis is needed."""

import logging

from . import config
from .oracle import ask_json, clamp_int, string_list, OracleResponseError
from .prompt_builder import build_quick_scan_prompt
from .prompts import QUICK_SCAN_PROMPT

logger = logging.getLogger("architect.quick_scan")

ANALYSIS_DEPTHS = ("quick", "standard", "deep")
COMPLEXITIES = ("straightforward", "moderate", "complex")


def fallback_quick_scan() -> dict:
    return {
        "dominant_option": None,
        "needs_deep_analysis": True,
        "analysis_depth_recommended": "standard",
        "quick_signals": ["Quick scan failed - recommending standard analysis"],
        "estimated_complexity": "moderate",
    }


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise OracleResponseError(f"needs_deep_analysis is not a boolean: {value!r}")


def _dominant_option(raw, context: dict) -> dict | None:
    """Keep the dominant option only if it names one of the submitted options."""
    if not isinstance(raw, dict):
        return None
    options_by_id = {o["id"]: o for o in context["options"]}
    option = options_by_id.get(str(raw.get("id") or ""))
    if option is None:
        return None
    return {
        "id": option["id"],
        "name": raw.get("name") or option["name"],
        "confidence": clamp_int(raw.get("confidence"), 0, 100, 0),
        "margin_over_second": clamp_int(raw.get("margin_over_second"), 0, 100, 0),
        "quick_rationale": str(raw.get("quick_rationale") or ""),
    }


def parse_quick_scan(parsed: dict, context: dict) -> dict:
    """Validate an oracle quick-scan payload.

    Raises:
        OracleResponseError: `needs_deep_analysis` is missing or not boolean.
    """
    if "needs_deep_analysis" not in parsed:
        raise OracleResponseError("Quick scan response lacks needs_deep_analysis")

    depth = parsed.get("analysis_depth_recommended")
    complexity = parsed.get("estimated_complexity")
    return {
        "dominant_option": _dominant_option(parsed.get("dominant_option"), context),
        "needs_deep_analysis": _as_bool(parsed["needs_deep_analysis"]),
        "analysis_depth_recommended": depth if depth in ANALYSIS_DEPTHS else "standard",
        "quick_signals": string_list(parsed.get("quick_signals")),
        "estimated_complexity": complexity if complexity in COMPLEXITIES else "moderate",
    }


def quick_scan(context: dict, oracle) -> dict:
    """Classify the decision with a single oracle request.

    Never raises: any network, timeout, or parse failure yields the
    standard-analysis fallback.
    """
    logger.info("Quick scan starting")
    try:
        parsed = ask_json(
            oracle,
            QUICK_SCAN_PROMPT,
            build_quick_scan_prompt(context),
            config.QUICK_SCAN_MAX_TOKENS,
        )
        result = parse_quick_scan(parsed, context)
    except Exception as e:
        logger.warning("Quick scan failed, defaulting to standard analysis: %s", e)
        return fallback_quick_scan()

    if result["needs_deep_analysis"] or result["dominant_option"] is None:
        logger.info("Quick scan complete: deeper analysis needed (%s)", result["analysis_depth_recommended"])
    else:
        logger.info("Quick scan complete: clear winner %s", result["dominant_option"]["name"])
    return result
