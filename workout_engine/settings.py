"""User preferences persisted as a JSON list.

Each entry is a ``{"key", "value", "type"}`` mapping so the file keeps the
order in which options were added.  The workout engine reads
``weight_increment`` and ``default_rest_duration``; the app reads
``user_id`` to know whose history to load.
"""

from __future__ import annotations

from pathlib import Path
import json
import logging
from typing import Any, Dict, List

from . import DEFAULT_REST_DURATION, DEFAULT_WEIGHT_INCREMENT

logger = logging.getLogger(__name__)

SETTINGS_PATH = Path(__file__).resolve().parents[1] / "data" / "settings.json"

DEFAULT_SETTINGS: List[Dict[str, Any]] = [
    {"key": "weight_increment", "value": DEFAULT_WEIGHT_INCREMENT, "type": "float"},
    {"key": "default_rest_duration", "value": DEFAULT_REST_DURATION, "type": "int"},
    {"key": "user_id", "value": None, "type": "str"},
]

_cache: List[Dict[str, Any]] | None = None


def load_settings() -> List[Dict[str, Any]]:
    """Read :data:`SETTINGS_PATH`, writing the defaults when it is missing or corrupt."""
    if SETTINGS_PATH.exists():
        try:
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.exception("Unreadable settings at %s, restoring defaults", SETTINGS_PATH)
        else:
            if isinstance(data, list):
                return data
            logger.warning("Settings at %s are not a list, restoring defaults", SETTINGS_PATH)
    defaults = [dict(entry) for entry in DEFAULT_SETTINGS]
    save_settings(defaults)
    return defaults


def save_settings(entries: List[Dict[str, Any]]) -> None:
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(json.dumps(entries), encoding="utf-8")


def get_settings() -> List[Dict[str, Any]]:
    global _cache
    if _cache is None:
        _cache = load_settings()
    return _cache


def reset_cache() -> None:
    """Forget the cached entries so the next read hits the disk."""
    global _cache
    _cache = None


def get_value(key: str, default: Any = None) -> Any:
    """Return the value stored for ``key``; ``None`` values yield ``default``."""
    entry = next((e for e in get_settings() if e.get("key") == key), None)
    if entry is None or entry.get("value") is None:
        return default
    return entry["value"]


def set_value(key: str, value: Any) -> None:
    """Store ``value`` under ``key`` and write the file."""
    entries = get_settings()
    entry = next((e for e in entries if e.get("key") == key), None)
    if entry is None:
        entries.append({"key": key, "value": value, "type": type(value).__name__})
    else:
        entry["value"] = value
    save_settings(entries)
