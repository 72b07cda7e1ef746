"""Decision fingerprinting: a reproducible signature of a decision's shape."""

import hashlib
import logging
import re
from collections import Counter
from datetime import datetime, timezone

logger = logging.getLogger("architect.fingerprint")

STOP_WORDS = frozenset({
    "the", "a", "an", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could", "should",
    "may", "might", "must", "shall", "can", "need", "dare", "ought", "used",
    "to", "of", "in", "for", "on", "with", "at", "by", "from", "as", "into",
    "through", "during", "before", "after", "above", "below", "between",
    "and", "but", "or", "nor", "so", "yet", "both", "either", "neither",
    "not", "only", "own", "same", "than", "too", "very", "just", "how", "what",
    "which", "who", "this", "that", "these", "those", "we", "they", "i", "you", "it",
})

# Evaluated in order; every matching rule contributes its category.
TRADE_OFF_RULES = [
    (re.compile(r"speed|fast|quick|time", re.IGNORECASE), "speed_vs_quality"),
    (re.compile(r"scale|growth|expand", re.IGNORECASE), "scalability"),
    (re.compile(r"simple|complex|easy", re.IGNORECASE), "simplicity_vs_power"),
    (re.compile(r"cost|budget|expensive", re.IGNORECASE), "cost_vs_capability"),
    (re.compile(r"user|ux|experience|usab", re.IGNORECASE), "usability"),
    (re.compile(r"maintain|evolve|future", re.IGNORECASE), "maintainability"),
    (re.compile(r"secur|safe|protect", re.IGNORECASE), "security"),
    (re.compile(r"perform|latency|throughput", re.IGNORECASE), "performance"),
    (re.compile(r"flexib|adapt|config", re.IGNORECASE), "flexibility"),
    (re.compile(r"integrat|compat|connect", re.IGNORECASE), "integration"),
]

DEFAULT_TRADE_OFF = "general"
MAX_KEYWORDS = 10
HASH_KEYWORDS = 5
HASH_LENGTH = 12


def extract_keywords(text: str, limit: int = MAX_KEYWORDS) -> list[str]:
    """Top `limit` keywords by frequency.

    Tokens of 3 characters or fewer and stop words are dropped. Ties keep
    the order in which the words first appear in `text`.
    """
    cleaned = re.sub(r"[^a-z0-9\s]", " ", text.lower())
    words = [w for w in cleaned.split() if len(w) > 3 and w not in STOP_WORDS]
    # Counter preserves first-insertion order and most_common() sorts stably
    return [word for word, _ in Counter(words).most_common(limit)]


def _context_values(value) -> list[str]:
    """Flatten a context into its scalar values, leaving out field names."""
    if isinstance(value, dict):
        return [s for v in value.values() for s in _context_values(v)]
    if isinstance(value, (list, tuple)):
        return [s for v in value for s in _context_values(v)]
    if value is None or value == "":
        return []
    return [str(value)]


def identify_trade_off_types(context: dict) -> list[str]:
    text = " ".join(_context_values(context)).lower()
    types = [category for pattern, category in TRADE_OFF_RULES if pattern.search(text)]
    return types or [DEFAULT_TRADE_OFF]


def compute_fingerprint_hash(
    domain: str,
    scale: str,
    stakeholder_count: int,
    constraint_count: int,
    option_count: int,
    keywords: list[str],
    trade_off_types: list[str],
) -> str:
    hash_input = "|".join([
        domain,
        scale,
        str(stakeholder_count),
        str(constraint_count),
        str(option_count),
        ",".join(sorted(keywords[:HASH_KEYWORDS])),
        ",".join(sorted(trade_off_types)),
    ])
    return hashlib.md5(hash_input.encode("utf-8")).hexdigest()[:HASH_LENGTH]


def generate_fingerprint(context: dict) -> dict:
    """Fingerprint a normalized decision context.

    Only the stable characteristics (domain, scale, counts, top keywords,
    trade-off categories) feed the hash; `created_at` does not.
    """
    domain = context["domain"]["type"]
    scale = context["technical_context"]["scale"]
    stakeholder_count = len(context["user_context"]["personas"])
    constraint_count = len(context["technical_context"]["constraints"])
    option_count = len(context["options"])

    keywords = extract_keywords(
        f"{context['decision_summary']} "
        f"{context['domain']['description']} "
        f"{context['additional_context']}"
    )
    trade_off_types = identify_trade_off_types(context)

    fingerprint_hash = compute_fingerprint_hash(
        domain, scale, stakeholder_count, constraint_count, option_count,
        keywords, trade_off_types,
    )
    logger.debug("Fingerprint %s: keywords=%s trade_offs=%s", fingerprint_hash, keywords, trade_off_types)

    return {
        "domain": domain,
        "scale": scale,
        "stakeholder_count": stakeholder_count,
        "constraint_count": constraint_count,
        "option_count": option_count,
        "keywords": keywords,
        "trade_off_types": trade_off_types,
        "fingerprint_hash": fingerprint_hash,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
