"""Decision corpus: repositories for recorded decisions and their outcomes."""

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger("architect.persistence")

CURRENT_SCHEMA_VERSION = "1.0"

OUTCOMES = ("success", "partial", "failed", "pending")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def make_decision_id(fingerprint_hash: str, when: datetime | None = None) -> str:
    """'3f2a9c1b7d4e' + 2026-10-16 14:03:22 UTC -> '3f2a9c1b7d4e-20261016T140322Z'"""
    when = when or datetime.now(timezone.utc)
    return f"{fingerprint_hash}-{when.strftime('%Y%m%dT%H%M%SZ')}"


def build_decision_record(
    context: dict,
    result: dict,
    chosen_option: str | None = None,
    outcome: str = "pending",
    lessons_learned: list[str] | None = None,
) -> dict:
    """Assemble a corpus record from a finished analysis.

    `chosen_option` defaults to the engine's recommendation; pass the
    option the team actually went with when it differs.
    """
    if outcome not in OUTCOMES:
        raise ValueError(f"Unknown outcome '{outcome}'. Expected one of: {', '.join(OUTCOMES)}")
    fingerprint = result["fingerprint"]
    return {
        "schema_version": CURRENT_SCHEMA_VERSION,
        "decision_id": make_decision_id(fingerprint["fingerprint_hash"]),
        "fingerprint": fingerprint,
        "context": context,
        "result": result,
        "chosen_option": chosen_option or result["recommendation"]["recommended_option_name"],
        "outcome": outcome,
        "lessons_learned": list(lessons_learned or []),
        "timestamp": _now(),
    }


class DecisionRepository:
    """Storage interface for the decision corpus.

    Analysis only ever calls list_records(); writes happen afterwards,
    once a decision's real-world outcome is known.
    """

    def list_records(self):
        """Yield (decision_id, record) pairs. Unreadable records are skipped."""
        raise NotImplementedError

    def save_record(self, record: dict) -> str:
        raise NotImplementedError

    def get_record(self, decision_id: str) -> dict:
        raise NotImplementedError

    def record_outcome(
        self,
        decision_id: str,
        outcome: str,
        lessons_learned: list[str] | None = None,
        chosen_option: str | None = None,
    ) -> dict:
        """Attach a real-world outcome to a stored decision and return it."""
        if outcome not in OUTCOMES:
            raise ValueError(f"Unknown outcome '{outcome}'. Expected one of: {', '.join(OUTCOMES)}")
        record = self.get_record(decision_id)
        record["outcome"] = outcome
        if lessons_learned is not None:
            record["lessons_learned"] = list(lessons_learned)
        if chosen_option:
            record["chosen_option"] = chosen_option
        record["outcome_recorded_at"] = _now()
        self.save_record(record)
        logger.info("Recorded outcome '%s' for decision %s", outcome, decision_id)
        return record


class InMemoryDecisionRepository(DecisionRepository):
    """Dict-backed corpus for tests and ephemeral sessions."""

    def __init__(self, records: dict[str, dict] | None = None):
        self._records = dict(records or {})

    def list_records(self):
        # Snapshot so concurrent saves don't disturb an in-flight scan
        yield from list(self._records.items())

    def save_record(self, record: dict) -> str:
        decision_id = record.get("decision_id") or make_decision_id(
            record["fingerprint"]["fingerprint_hash"]
        )
        record["decision_id"] = decision_id
        self._records[decision_id] = record
        return decision_id

    def get_record(self, decision_id: str) -> dict:
        return self._records[decision_id]


class FileDecisionRepository(DecisionRepository):
    """One JSON document per decision: <decisions_dir>/<decision_id>.json"""

    def __init__(self, decisions_dir: Path):
        self.decisions_dir = Path(decisions_dir)

    def _path_for(self, decision_id: str) -> Path:
        if not re.fullmatch(r"[A-Za-z0-9._-]+", decision_id) or decision_id.startswith("."):
            raise ValueError(f"Invalid decision id '{decision_id}'")
        return self.decisions_dir / f"{decision_id}.json"

    def list_records(self):
        if not self.decisions_dir.is_dir():
            logger.info("Decision corpus %s does not exist yet", self.decisions_dir)
            return

        for path in sorted(self.decisions_dir.glob("*.json")):
            try:
                with open(path, "r", encoding="utf-8") as f:
                    record = json.load(f)
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
                logger.warning("Skipping unreadable decision record %s: %s", path.name, exc)
                continue
            yield path.stem, record

    def save_record(self, record: dict) -> str:
        decision_id = record.get("decision_id") or make_decision_id(
            record["fingerprint"]["fingerprint_hash"]
        )
        record["decision_id"] = decision_id
        self.decisions_dir.mkdir(parents=True, exist_ok=True)

        record_file = self._path_for(decision_id)
        temp_file = record_file.with_suffix(".json.tmp")
        with open(temp_file, "w", encoding="utf-8") as f:
            json.dump(record, f, indent=2, default=str)
        temp_file.replace(record_file)
        logger.info("Decision saved to %s", record_file)
        return decision_id

    def get_record(self, decision_id: str) -> dict:
        record_file = self._path_for(decision_id)
        if not record_file.exists():
            raise KeyError(decision_id)
        with open(record_file, "r", encoding="utf-8") as f:
            return json.load(f)
