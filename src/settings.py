"""Static configuration for postsorter.

All user-editable settings (database, reprocessing, rules, logging) live in a
single JSON file for quick edits without touching Python. The file is looked
up in POSTSORTER_CONFIG, then the working directory, then the project root;
without one, built-in defaults apply.
"""

import json
import os
from typing import Optional

from dotenv import load_dotenv

from core.catalog import DEFAULT_CATALOG

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_FILENAME = "config.json"


def _find_config_path() -> Optional[str]:
    """Return the config file to load, or None to run on defaults."""

    explicit = os.getenv("POSTSORTER_CONFIG")
    if explicit:
        if not os.path.exists(explicit):
            raise FileNotFoundError(f"Config file not found: {explicit}")
        return os.path.abspath(explicit)

    for directory in (os.getcwd(), PROJECT_ROOT):
        candidate = os.path.join(directory, CONFIG_FILENAME)
        if os.path.exists(candidate):
            return candidate
    return None


def _load_json_config(path: Optional[str]) -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if path is None:
        return {}
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


load_dotenv()

CONFIG_PATH = _find_config_path()
_CONFIG = _load_json_config(CONFIG_PATH)

# Relative paths are anchored at the config file, or the working directory.
BASE_DIR = os.path.dirname(CONFIG_PATH) if CONFIG_PATH else os.getcwd()


def _resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(BASE_DIR, path)


# Where to store the SQLite database; POSTSORTER_DB_PATH wins over config.json.
_database = _CONFIG.get("database", {})
DB_PATH = _resolve_path(os.getenv("POSTSORTER_DB_PATH") or _database.get("path", "postsorter.db"))

# Reprocess picks up unclassified posts and posts below this confidence.
_classification = _CONFIG.get("classification", {})
REPROCESS_THRESHOLD = float(_classification.get("reprocess_threshold", 0.5))
REPROCESS_LIMIT = int(_classification.get("reprocess_limit", 50))
# Number of batch entries echoed after a run.
REPORT_PREVIEW = int(_classification.get("report_preview", 10))
# Posts considered by a keyword summary when --limit is not given.
SUMMARY_LIMIT = int(_classification.get("summary_limit", 100))

# An explicit rules list replaces the built-in catalog entirely.
RULES_CONFIG = _CONFIG.get("rules") or list(DEFAULT_CATALOG)

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
