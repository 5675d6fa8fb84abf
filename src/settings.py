"""Static configuration for redwatch.

All user-editable settings (subreddits, threads, polling, storage, logging)
live in a single JSON file for quick edits without touching Python.
"""

import json
import os

from core.config import MonitorConfig, OutputConfig

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# config.json sits at the project root unless REDWATCH_CONFIG points elsewhere.
CONFIG_PATH = os.getenv("REDWATCH_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _normalize_targets(raw_targets: list) -> list[str]:
    """Accept plain names or {"name", "enabled"} entries; keep enabled names."""

    names: list[str] = []
    for entry in raw_targets:
        if isinstance(entry, str):
            name = entry
        elif isinstance(entry, dict):
            if not entry.get("enabled", True):
                continue
            name = entry.get("name", "")
        else:
            continue
        name = name.strip()
        if name and name not in names:
            names.append(name)
    return names


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Subreddits feed the "+" multireddit query; threads are fullnames (t3_...).
SUBREDDITS = _normalize_targets(_CONFIG.get("subreddits", []))
THREADS = _normalize_targets(_CONFIG.get("threads", []))

# Polling controls for the monitor loop.
# - interval_seconds: wait between cycles
# - max_posts: listing limit per fetch (reddit caps at 100)
# - tip_size: how many fallback cursors to retain
# - repair_every: validate the tip every N cycles
# - empty_fetch_threshold: validate early after N empty fetches in a row
_monitor = _CONFIG.get("monitor", {})
MONITOR = MonitorConfig(
    interval_seconds=float(_monitor.get("interval_seconds", 30)),
    max_posts=int(_monitor.get("max_posts", 100)),
    tip_size=int(_monitor.get("tip_size", 15)),
    repair_every=int(_monitor.get("repair_every", 10)),
    empty_fetch_threshold=int(_monitor.get("empty_fetch_threshold", 3)),
)

_output = _CONFIG.get("output", {})
OUTPUT = OutputConfig(queue_size=int(_output.get("queue_size", 1000)))
# Whether consumers log every published post.
LOG_POSTS = bool(_output.get("log_posts", True))

# Tip persistence lets a restart resume incremental fetching.
_storage = _CONFIG.get("storage", {})
DB_PATH = _storage.get("db_path") or os.path.join(os.path.dirname(__file__), "redwatch.db")
if not os.path.isabs(DB_PATH):
    DB_PATH = os.path.join(PROJECT_ROOT, DB_PATH)
PERSIST_TIP = bool(_storage.get("persist_tip", True))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
