"""Similarity search over previously recorded decisions."""

import logging
import math

from . import config
from .context import SCALES
from .oracle import string_list
from .persistence import OUTCOMES

logger = logging.getLogger("architect.similarity")

# Rubric weights; they sum to 100 so the raw score is already a percentage.
DOMAIN_WEIGHT = 25
SCALE_WEIGHT = 15
ADJACENT_SCALE_WEIGHT = 8
OPTION_COUNT_WEIGHT = 10
NEAR_OPTION_COUNT_WEIGHT = 5
KEYWORD_WEIGHT = 30
TRADE_OFF_WEIGHT = 20


def _overlap_ratio(a: list, b: list) -> float:
    shared = set(a) & set(b)
    return len(shared) / max(len(set(a)), len(set(b)), 1)


def _scale_score(scale_a: str, scale_b: str) -> int:
    if scale_a == scale_b:
        return SCALE_WEIGHT
    if scale_a in SCALES and scale_b in SCALES:
        if abs(SCALES.index(scale_a) - SCALES.index(scale_b)) == 1:
            return ADJACENT_SCALE_WEIGHT
    return 0


def _option_count_score(count_a: int, count_b: int) -> int:
    diff = abs(count_a - count_b)
    if diff == 0:
        return OPTION_COUNT_WEIGHT
    if diff <= 2:
        return NEAR_OPTION_COUNT_WEIGHT
    return 0


def calculate_similarity(fp_a: dict, fp_b: dict) -> int:
    """Score two fingerprints on a 0-100 scale (rounded half up)."""
    score = 0.0
    if fp_a["domain"] == fp_b["domain"]:
        score += DOMAIN_WEIGHT
    score += _scale_score(fp_a["scale"], fp_b["scale"])
    score += _option_count_score(int(fp_a["option_count"]), int(fp_b["option_count"]))
    score += KEYWORD_WEIGHT * _overlap_ratio(fp_a["keywords"], fp_b["keywords"])
    score += TRADE_OFF_WEIGHT * _overlap_ratio(fp_a["trade_off_types"], fp_b["trade_off_types"])
    return max(0, min(100, math.floor(score + 0.5)))


def _lessons(value) -> list[str]:
    # A single lesson stored as a bare string counts as one lesson
    if isinstance(value, str):
        return [value] if value.strip() else []
    return string_list(value)


def _outcome(value) -> str | None:
    return value if value in OUTCOMES else None


def _chosen_option(record: dict) -> str:
    if record.get("chosen_option"):
        return record["chosen_option"]
    result = record.get("result") or {}
    # Older records wrapped the engine result in a {"data": ...} envelope
    recommendation = (result.get("recommendation") or (result.get("data") or {}).get("recommendation") or {})
    return recommendation.get("recommended_option_name") or "Unknown"


def find_similar_decisions(
    fingerprint: dict,
    records,
    limit: int = config.MAX_SIMILAR_DECISIONS,
    threshold: int = config.SIMILARITY_THRESHOLD,
) -> list[dict]:
    """Rank recorded decisions against `fingerprint`.

    Args:
        fingerprint: Fingerprint of the decision being analyzed.
        records: Iterable of (decision_id, record) pairs, e.g. from
            DecisionRepository.list_records().
        limit: Maximum number of matches returned.
        threshold: Matches scoring below this are dropped.

    Records without a usable fingerprint are skipped, never raised.
    """
    matches = []
    for decision_id, record in records:
        try:
            past = record["fingerprint"]
            score = calculate_similarity(fingerprint, past)
            if score < threshold:
                continue
            context = record.get("context") or {}
            match = {
                "decision_id": decision_id,
                "fingerprint_hash": past.get("fingerprint_hash", ""),
                "decision_summary": str(context.get("decision_summary") or "Unknown"),
                "similarity_score": score,
                "chosen_option": str(_chosen_option(record)),
                "outcome": _outcome(record.get("outcome")),
                "lessons_learned": _lessons(record.get("lessons_learned")),
                "timestamp": record.get("timestamp"),
            }
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.debug("Skipping decision %s: unusable record (%s)", decision_id, exc)
            continue
        matches.append(match)

    matches.sort(key=lambda m: m["similarity_score"], reverse=True)
    logger.info("Similarity search: %d matches at or above %d", len(matches), threshold)
    return matches[:limit]
