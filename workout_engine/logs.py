"""Storage for finished workouts.

Logs are written with an upsert keyed on the log id so a save that failed
half way can simply be repeated with the same log.  Deleting only flags the
row; flagged logs disappear from the history.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path

from . import DEFAULT_DB_PATH
from .models import PersistedLog

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id",
    "user_id",
    "routine_id",
    "date",
    "start_time",
    "end_time",
    "duration_seconds",
    "total_volume",
    "exercises_json",
    "completed",
)


def _row_to_log(row) -> PersistedLog:
    data = dict(zip(_COLUMNS, row))
    data["exercises"] = json.loads(data.pop("exercises_json") or "[]")
    data["completed"] = bool(data["completed"])
    return PersistedLog.from_dict(data)


def get_workout_logs(user_id: str, db_path: Path = DEFAULT_DB_PATH) -> list[PersistedLog]:
    """Return all logs of ``user_id``, oldest first."""

    with sqlite3.connect(str(db_path)) as conn:
        rows = conn.execute(
            f"""
            SELECT {", ".join(_COLUMNS)}
              FROM workout_logs
             WHERE user_id = ? AND deleted = 0
             ORDER BY date, rowid
            """,
            (user_id,),
        ).fetchall()
    return [_row_to_log(r) for r in rows]


def get_workout_log(log_id: str, db_path: Path = DEFAULT_DB_PATH) -> PersistedLog | None:
    with sqlite3.connect(str(db_path)) as conn:
        row = conn.execute(
            f"SELECT {', '.join(_COLUMNS)} FROM workout_logs WHERE id = ? AND deleted = 0",
            (log_id,),
        ).fetchone()
    return _row_to_log(row) if row else None


def save_workout_log(log: PersistedLog, db_path: Path = DEFAULT_DB_PATH) -> None:
    """Insert ``log`` or overwrite the stored copy with the same id."""

    data = log.to_dict()
    data["exercises_json"] = json.dumps(data.pop("exercises"))
    data["completed"] = int(data["completed"])
    with sqlite3.connect(str(db_path)) as conn:
        conn.execute(
            f"""
            INSERT INTO workout_logs ({", ".join(_COLUMNS)})
            VALUES ({", ".join("?" for _ in _COLUMNS)})
            ON CONFLICT(id) DO UPDATE SET
                {", ".join(f"{c} = excluded.{c}" for c in _COLUMNS[1:])},
                deleted = 0
            """,
            tuple(data[c] for c in _COLUMNS),
        )


def delete_workout_log(log_id: str, db_path: Path = DEFAULT_DB_PATH) -> bool:
    """Hide ``log_id`` from the history. Returns ``False`` if no live log matched."""

    with sqlite3.connect(str(db_path)) as conn:
        cur = conn.execute(
            "UPDATE workout_logs SET deleted = 1 WHERE id = ? AND deleted = 0",
            (log_id,),
        )
    if cur.rowcount:
        logger.info("Workout log %s deleted", log_id)
    return cur.rowcount > 0


class WorkoutLogStore:
    """History and persistence collaborator bound to a database path."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH) -> None:
        self.db_path = Path(db_path)

    def get_workout_logs(self, user_id: str) -> list[PersistedLog]:
        return get_workout_logs(user_id, self.db_path)

    def get_workout_log(self, log_id: str) -> PersistedLog | None:
        return get_workout_log(log_id, self.db_path)

    def save_workout_log(self, log: PersistedLog) -> None:
        save_workout_log(log, self.db_path)

    def delete_workout_log(self, log_id: str) -> bool:
        return delete_workout_log(log_id, self.db_path)
