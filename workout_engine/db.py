"""Database bootstrap helpers."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from . import DEFAULT_DB_PATH, SCHEMA_PATH

# Tables every workout database must provide.
REQUIRED_TABLES = [
    "library_exercises",
    "routines",
    "workout_logs",
]


def ensure_schema(db_path: Path = DEFAULT_DB_PATH) -> Path:
    """Create ``db_path`` and any missing tables, returning the path."""

    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(str(path)) as conn:
        conn.executescript(SCHEMA_PATH.read_text(encoding="utf-8"))
    logging.getLogger(__name__).debug("Schema ensured for %s", path)
    return path


def missing_tables(db_path: Path = DEFAULT_DB_PATH) -> list[str]:
    """Return required tables absent from ``db_path``."""

    with sqlite3.connect(str(db_path)) as conn:
        rows = conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table'"
        ).fetchall()
    present = {name for (name,) in rows}
    return [name for name in REQUIRED_TABLES if name not in present]
