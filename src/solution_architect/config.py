"""Runtime configuration, resolved once from the environment (.env supported)."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

WORKSPACE_DIR = Path(
    os.getenv("ARCHITECT_WORKSPACE", str(Path.home() / "Documents" / "forge-workspace"))
).expanduser()

# Oracle (Anthropic) settings
MODEL_NAME = os.getenv("ARCHITECT_MODEL", "claude-sonnet-4-20250514")
ORACLE_TIMEOUT_SECONDS = float(os.getenv("ARCHITECT_ORACLE_TIMEOUT", "60"))
ORACLE_MAX_ATTEMPTS = int(os.getenv("ARCHITECT_ORACLE_MAX_ATTEMPTS", "2"))

QUICK_SCAN_MAX_TOKENS = 1024
FRAMEWORK_MAX_TOKENS = 2048
DEEP_ANALYSIS_MAX_TOKENS = 4096

# Decision corpus
DECISIONS_DIR = Path(
    os.getenv("DECISIONS_DIR", str(WORKSPACE_DIR / "decisions"))
).expanduser()
MAX_SIMILAR_DECISIONS = int(os.getenv("ARCHITECT_MAX_SIMILAR", "5"))
SIMILARITY_THRESHOLD = 50

LOG_DIR = Path(os.getenv("ARCHITECT_LOG_DIR", str(WORKSPACE_DIR))).expanduser()
