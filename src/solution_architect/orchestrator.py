"""Decision orchestrator: sequences the analysis phases into one result."""

import logging
import time

from . import config
from .analysis import deep_analysis, fallback_recommendation
from .context import normalize_context
from .fingerprint import generate_fingerprint
from .framework import default_framework, generate_framework
from .logging_config import setup_logging
from .oracle import AnthropicOracle
from .persistence import FileDecisionRepository
from .quick_scan import quick_scan
from .similarity import find_similar_decisions

logger = logging.getLogger("architect.orchestrator")

MAX_HISTORICAL_LESSONS = 3


class SolutionArchitect:
    """Runs the decision-analysis pipeline.

    fingerprint -> similarity search -> quick scan -> (short-circuit |
    framework generation -> deep analysis). Every phase after
    fingerprinting degrades to a fallback instead of raising, so a valid
    context always yields a complete result.
    """

    def __init__(self, oracle, repository=None, similar_limit: int = config.MAX_SIMILAR_DECISIONS):
        self.oracle = oracle
        self.repository = repository
        self.similar_limit = similar_limit
        self.model_used = getattr(oracle, "name", type(oracle).__name__)

    def analyze_decision(
        self,
        context: dict,
        skip_fingerprinting: bool = False,
        skip_similar_search: bool = False,
        force_deep_analysis: bool = False,
    ) -> dict:
        """Analyze one decision and return the full result dict.

        Args:
            context: Raw decision context (summary, >=2 options, optional blocks).
            skip_fingerprinting: Don't use the fingerprint for retrieval. The
                fingerprint is still computed because the result carries it,
                so this also skips the similarity search.
            skip_similar_search: Don't search the decision corpus.
            force_deep_analysis: Skip the quick scan and go straight to a
                deep analysis.

        Raises:
            InvalidDecisionError: before any phase runs, if the context is invalid.
        """
        context = normalize_context(context)
        start = time.monotonic()
        phases = []

        logger.info("=== Analysis start: %s ===", context["decision_summary"][:100])

        # --- FINGERPRINTING ---
        fingerprint = generate_fingerprint(context)
        phases.append("fingerprinting")
        logger.info("Fingerprint: %s", fingerprint["fingerprint_hash"])

        similar = []
        quick = None
        framework = None
        try:
            # --- SIMILARITY_SEARCH ---
            if not (skip_fingerprinting or skip_similar_search) and self.repository is not None:
                similar = self._search_similar(fingerprint)
                phases.append("similarity_search")

            # --- QUICK_SCAN ---
            if force_deep_analysis:
                depth = "deep"
            else:
                quick = quick_scan(context, self.oracle)
                phases.append("quick_scan")

                if quick["dominant_option"] is not None and not quick["needs_deep_analysis"]:
                    logger.info("Quick result - clear winner identified")
                    return self._quick_result(context, fingerprint, similar, quick, phases, start)

                depth = quick["analysis_depth_recommended"]
                if depth == "quick":
                    # No dominant option to stand on, so a quick answer isn't available
                    depth = "standard"

            # --- FRAMEWORK_GENERATION ---
            framework = generate_framework(context, self.oracle)
            phases.append("framework_generation")
            logger.info("Framework dimensions: %d (%s)", len(framework["dimensions"]), framework["source"])

            # --- DEEP_ANALYSIS ---
            analysis = deep_analysis(context, framework, similar, self.oracle)
            phases.append("deep_analysis")
        except Exception as e:
            logger.warning("Analysis degraded to fallback after %s: %s", phases[-1], e)
            return self._fallback_result(context, fingerprint, similar, quick, framework, phases, start)

        return {
            "analysis_depth": depth,
            "quick_scan_result": quick,
            "fingerprint": fingerprint,
            "similar_decisions": similar,
            "evaluation_framework": framework,
            "recommendation": analysis["recommendation"],
            "contextual_evaluations": analysis["contextual_evaluations"],
            "historical_insights": build_historical_insights(similar),
            "analysis_metadata": self._metadata(phases, start, self.model_used),
        }

    def _search_similar(self, fingerprint: dict) -> list[dict]:
        try:
            similar = find_similar_decisions(
                fingerprint, self.repository.list_records(), limit=self.similar_limit
            )
        except Exception as e:
            logger.warning("Similarity search failed, continuing without history: %s", e)
            return []
        logger.info("Similar decisions found: %d", len(similar))
        return similar

    @staticmethod
    def _metadata(phases: list[str], start: float, model_used: str) -> dict:
        return {
            "total_time_ms": int((time.monotonic() - start) * 1000),
            "phases_completed": list(phases),
            "model_used": model_used,
        }

    def _quick_result(self, context, fingerprint, similar, quick, phases, start) -> dict:
        dominant = quick["dominant_option"]
        return {
            "analysis_depth": "quick",
            "quick_scan_result": quick,
            "fingerprint": fingerprint,
            "similar_decisions": similar,
            "evaluation_framework": default_framework(context),
            "recommendation": {
                "recommended_option_id": dominant["id"],
                "recommended_option_name": dominant["name"],
                "confidence": dominant["confidence"],
                "recommendation_rationale": dominant["quick_rationale"],
                "key_factors": [{
                    "factor": "Clear dominant option",
                    "weight": "critical",
                    "how_option_addresses": dominant["quick_rationale"],
                }],
                "next_steps": ["Proceed with implementation", "No further analysis needed"],
            },
            "contextual_evaluations": [],
            "historical_insights": build_historical_insights(similar),
            "analysis_metadata": self._metadata(phases, start, self.model_used),
        }

    def _fallback_result(self, context, fingerprint, similar, quick, framework, phases, start) -> dict:
        if framework is None:
            framework = default_framework(context)
        return {
            "analysis_depth": "standard",
            "quick_scan_result": quick,
            "fingerprint": fingerprint,
            "similar_decisions": similar,
            "evaluation_framework": framework,
            "recommendation": fallback_recommendation(context),
            "contextual_evaluations": [],
            "historical_insights": build_historical_insights(similar),
            "analysis_metadata": self._metadata(phases + ["fallback"], start, "fallback"),
        }


def build_historical_insights(similar_decisions: list[dict]) -> dict | None:
    """Summarize lessons from similar past decisions; None when there are none."""
    if not similar_decisions:
        return None
    successful = [sd for sd in similar_decisions if sd.get("outcome") == "success"]
    failed = [sd for sd in similar_decisions if sd.get("outcome") == "failed"]
    return {
        "pattern_observed": (
            f"Found {len(similar_decisions)} similar past decisions ({len(successful)} successful)"
        ),
        "success_factors": [lesson for sd in successful for lesson in (sd.get("lessons_learned") or [])][:MAX_HISTORICAL_LESSONS],
        "warnings": [lesson for sd in failed for lesson in (sd.get("lessons_learned") or [])][:MAX_HISTORICAL_LESSONS],
    }


def estimate_analysis_time(context: dict) -> dict:
    """Rough per-depth durations in seconds, for progress display."""
    option_count = len(context.get("options") or [])
    technical = context.get("technical_context") or {}
    has_constraints = bool(technical.get("constraints"))
    return {
        "quick_scan": 3,
        "standard": 15 + option_count * 2 + (5 if has_constraints else 0),
        "deep": 25 + option_count * 4 + (10 if has_constraints else 0),
    }


def create_architect(decisions_dir=None, client=None) -> SolutionArchitect:
    """Wire the live Anthropic oracle and the file-backed decision corpus."""
    setup_logging()
    return SolutionArchitect(
        oracle=AnthropicOracle(client=client),
        repository=FileDecisionRepository(decisions_dir or config.DECISIONS_DIR),
    )
