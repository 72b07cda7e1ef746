"""Deep analysis: score every option against the contextual framework."""

import logging

from . import config
from .oracle import ask_json, clamp_int, string_list, OracleResponseError
from .prompt_builder import build_deep_analysis_prompt
from .prompts import DEEP_ANALYSIS_PROMPT

logger = logging.getLogger("architect.analysis")

FACTOR_WEIGHTS = ("critical", "important", "nice_to_have")

FALLBACK_CONFIDENCE = 30
FALLBACK_CAVEAT = "This is a fallback recommendation due to analysis failure"


class AnalysisError(Exception):
    """Deep analysis did not produce a usable recommendation."""


def fallback_recommendation(context: dict) -> dict:
    """Low-confidence pick of the first listed option, flagged for manual review."""
    first = context["options"][0]
    return {
        "recommended_option_id": first["id"],
        "recommended_option_name": first["name"],
        "confidence": FALLBACK_CONFIDENCE,
        "recommendation_rationale": "Automated analysis failed. Please review the options manually.",
        "key_factors": [],
        "next_steps": ["Review options manually", "Consult team"],
        "caveats": [FALLBACK_CAVEAT],
    }


def _resolve_option(options: list[dict], option_id, option_name) -> dict | None:
    for option in options:
        if option_id is not None and option["id"] == str(option_id):
            return option
    for option in options:
        if option_name and option["name"].lower() == str(option_name).lower():
            return option
    return None


def _key_factors(raw) -> list[dict]:
    factors = []
    for item in raw if isinstance(raw, list) else []:
        if not isinstance(item, dict) or not item.get("factor"):
            continue
        weight = item.get("weight")
        factors.append({
            "factor": str(item["factor"]),
            "weight": weight if weight in FACTOR_WEIGHTS else "important",
            "how_option_addresses": str(item.get("how_option_addresses") or ""),
        })
    return factors


def parse_recommendation(raw, context: dict) -> dict:
    if not isinstance(raw, dict):
        raise OracleResponseError("Deep analysis response has no recommendation")
    option = _resolve_option(
        context["options"], raw.get("recommended_option_id"), raw.get("recommended_option_name")
    )
    if option is None:
        raise OracleResponseError(
            f"Recommended option {raw.get('recommended_option_id')!r} is not one of the submitted options"
        )
    recommendation = {
        "recommended_option_id": option["id"],
        "recommended_option_name": option["name"],
        "confidence": clamp_int(raw.get("confidence"), 0, 100, 50),
        "recommendation_rationale": str(raw.get("recommendation_rationale") or ""),
        "key_factors": _key_factors(raw.get("key_factors")),
        "next_steps": string_list(raw.get("next_steps")),
    }
    caveats = string_list(raw.get("caveats"))
    if caveats:
        recommendation["caveats"] = caveats
    return recommendation


def _weighted_overall(dimension_scores: list[dict], weights: dict[str, int]) -> int:
    total_weight = sum(weights[s["dimension_id"]] for s in dimension_scores)
    if not total_weight:
        return 0
    weighted = sum(s["score"] * weights[s["dimension_id"]] for s in dimension_scores)
    return clamp_int(weighted / total_weight * 10, 0, 100, 0)


def parse_evaluations(raw, context: dict, framework: dict) -> list[dict]:
    """Keep scores only for submitted options and framework dimensions.

    Scores for dimensions the oracle invented are dropped, so every score
    in the result refers to a dimension of `framework`.
    """
    if not isinstance(raw, list):
        return []
    dimensions = {d["id"]: d for d in framework["dimensions"]}
    weights = {d["id"]: d["weight"] for d in framework["dimensions"]}

    evaluations = []
    seen_options = set()
    for item in raw:
        if not isinstance(item, dict):
            continue
        option = _resolve_option(context["options"], item.get("option_id"), item.get("option_name"))
        if option is None or option["id"] in seen_options:
            continue
        seen_options.add(option["id"])

        scores = []
        scored = set()
        for score in item.get("dimension_scores") or []:
            if not isinstance(score, dict):
                continue
            dim = dimensions.get(str(score.get("dimension_id")))
            if dim is None or dim["id"] in scored:
                continue
            scored.add(dim["id"])
            scores.append({
                "dimension_id": dim["id"],
                "dimension_name": dim["name"],
                "score": clamp_int(score.get("score"), 1, 10, 5),
                "rationale": str(score.get("rationale") or ""),
            })

        overall = item.get("overall_score")
        evaluations.append({
            "option_id": option["id"],
            "option_name": option["name"],
            "dimension_scores": scores,
            "overall_score": (
                clamp_int(overall, 0, 100, 0) if overall is not None
                else _weighted_overall(scores, weights)
            ),
            "strengths": string_list(item.get("strengths")),
            "weaknesses": string_list(item.get("weaknesses")),
        })
    return evaluations


def deep_analysis(context: dict, framework: dict, similar_decisions: list[dict], oracle) -> dict:
    """Score all options with one oracle request.

    Returns a dict with `recommendation` and `contextual_evaluations`.

    Raises:
        AnalysisError: on any oracle, timeout, or parse failure. The caller
            decides what to substitute.
    """
    try:
        prompt = build_deep_analysis_prompt(context, framework, similar_decisions)
        parsed = ask_json(oracle, DEEP_ANALYSIS_PROMPT, prompt, config.DEEP_ANALYSIS_MAX_TOKENS)
        recommendation = parse_recommendation(parsed.get("recommendation"), context)
        evaluations = parse_evaluations(parsed.get("contextual_evaluations"), context, framework)
    except Exception as e:
        raise AnalysisError(f"Deep analysis failed: {e}") from e

    logger.info(
        "Deep analysis complete. Recommended: %s (%d%%)",
        recommendation["recommended_option_name"], recommendation["confidence"],
    )
    return {"recommendation": recommendation, "contextual_evaluations": evaluations}
