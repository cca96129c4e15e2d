"""Routine templates stored in the ``routines`` table."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path

from . import DEFAULT_DB_PATH
from .models import Routine, RoutineBlock

# Routines loaded by the most recent call to :func:`load_routines`.
WORKOUT_ROUTINES: list[Routine] = []


def _row_to_routine(row) -> Routine:
    routine_id, user_id, name, sessions_json = row
    return Routine(
        id=routine_id,
        user_id=user_id,
        name=name,
        sessions=[RoutineBlock.from_dict(b) for b in json.loads(sessions_json or "[]")],
    )


def load_routines(
    user_id: str | None = None,
    db_path: Path = DEFAULT_DB_PATH,
) -> list[Routine]:
    """Load routines into :data:`WORKOUT_ROUTINES` and return them.

    When ``user_id`` is given only that user's routines and shared ones
    (``user_id IS NULL``) are returned.
    """

    global WORKOUT_ROUTINES

    with sqlite3.connect(str(db_path)) as conn:
        if user_id is None:
            rows = conn.execute(
                "SELECT id, user_id, name, sessions_json FROM routines"
                " WHERE deleted = 0 ORDER BY name"
            ).fetchall()
        else:
            rows = conn.execute(
                "SELECT id, user_id, name, sessions_json FROM routines"
                " WHERE deleted = 0 AND (user_id = ? OR user_id IS NULL)"
                " ORDER BY name",
                (user_id,),
            ).fetchall()
    WORKOUT_ROUTINES = [_row_to_routine(r) for r in rows]
    return WORKOUT_ROUTINES


def get_routine(routine_id: str, db_path: Path = DEFAULT_DB_PATH) -> Routine | None:
    """Return the routine with ``routine_id`` or ``None``."""

    with sqlite3.connect(str(db_path)) as conn:
        row = conn.execute(
            "SELECT id, user_id, name, sessions_json FROM routines"
            " WHERE id = ? AND deleted = 0",
            (routine_id,),
        ).fetchone()
    return _row_to_routine(row) if row else None


def save_routine(routine: Routine, db_path: Path = DEFAULT_DB_PATH) -> None:
    """Insert or replace ``routine``."""

    data = routine.to_dict()
    with sqlite3.connect(str(db_path)) as conn:
        conn.execute(
            "INSERT OR REPLACE INTO routines (id, user_id, name, sessions_json)"
            " VALUES (?, ?, ?, ?)",
            (routine.id, routine.user_id, routine.name, json.dumps(data["sessions"])),
        )


def delete_routine(routine_id: str, db_path: Path = DEFAULT_DB_PATH) -> bool:
    """Flag ``routine_id`` as deleted so it is no longer offered."""

    with sqlite3.connect(str(db_path)) as conn:
        cur = conn.execute(
            "UPDATE routines SET deleted = 1 WHERE id = ? AND deleted = 0",
            (routine_id,),
        )
    return cur.rowcount > 0
