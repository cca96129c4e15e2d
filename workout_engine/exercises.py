"""Exercise catalog backed by the ``library_exercises`` table.

:class:`ExerciseCatalog` is the collaborator the session builder and the
feedback analysis use to resolve exercise ids.  The module level helpers
mirror its methods for callers that only need a one-off query.
"""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path

from . import DEFAULT_DB_PATH

_COLUMNS = (
    "id, name, description, category, primary_muscles_json,"
    " secondary_muscles_json, equipment_json, difficulty"
)


def _row_to_exercise(row) -> dict:
    (
        ex_id,
        name,
        description,
        category,
        primary_json,
        secondary_json,
        equipment_json,
        difficulty,
    ) = row
    return {
        "id": ex_id,
        "name": name,
        "description": description or "",
        "category": category,
        "muscle_groups": {
            "primary": json.loads(primary_json or "[]"),
            "secondary": json.loads(secondary_json or "[]"),
        },
        "equipment": json.loads(equipment_json or "[]"),
        "difficulty": difficulty,
    }


def get_exercise_by_id(exercise_id: str, db_path: Path = DEFAULT_DB_PATH) -> dict | None:
    """Return details for ``exercise_id`` or ``None`` if it does not exist."""

    with sqlite3.connect(str(db_path)) as conn:
        row = conn.execute(
            f"SELECT {_COLUMNS} FROM library_exercises WHERE id = ? AND deleted = 0",
            (exercise_id,),
        ).fetchone()
    return _row_to_exercise(row) if row else None


def get_all_exercises(db_path: Path = DEFAULT_DB_PATH) -> list[dict]:
    """Return every catalog exercise ordered by name."""

    with sqlite3.connect(str(db_path)) as conn:
        rows = conn.execute(
            f"SELECT {_COLUMNS} FROM library_exercises WHERE deleted = 0 ORDER BY name"
        ).fetchall()
    return [_row_to_exercise(r) for r in rows]


def search_exercises(query: str, db_path: Path = DEFAULT_DB_PATH) -> list[dict]:
    """Return exercises whose name or muscle groups contain ``query``."""

    needle = query.lower()
    results = []
    for ex in get_all_exercises(db_path):
        groups = ex["muscle_groups"]["primary"] + ex["muscle_groups"]["secondary"]
        if needle in ex["name"].lower() or any(needle in g.lower() for g in groups):
            results.append(ex)
    return results


def similarity_score(reference: dict, candidate: dict) -> int:
    """Score how well ``candidate`` substitutes ``reference``.

    Shared primary muscles weigh three points each, shared secondary
    muscles and shared equipment one point each.
    """

    ref_groups = reference["muscle_groups"]
    cand_groups = candidate["muscle_groups"]
    primary = set(ref_groups["primary"]) & set(cand_groups["primary"])
    secondary = set(ref_groups["secondary"]) & set(cand_groups["secondary"])
    equipment = set(reference["equipment"]) & set(candidate["equipment"])
    return 3 * len(primary) + len(secondary) + len(equipment)


def find_similar_exercises(
    exercise_id: str,
    limit: int = 5,
    db_path: Path = DEFAULT_DB_PATH,
) -> list[dict]:
    """Return up to ``limit`` ranked substitutes for ``exercise_id``.

    Exercises sharing nothing with the reference are left out.  Equal
    scores are ordered by name.
    """

    reference = get_exercise_by_id(exercise_id, db_path)
    if reference is None or limit <= 0:
        return []
    scored = []
    for candidate in get_all_exercises(db_path):
        if candidate["id"] == exercise_id:
            continue
        score = similarity_score(reference, candidate)
        if score > 0:
            scored.append((score, candidate))
    scored.sort(key=lambda item: (-item[0], item[1]["name"]))
    return [candidate for _score, candidate in scored[:limit]]


def save_exercise(exercise: dict, db_path: Path = DEFAULT_DB_PATH) -> None:
    """Insert or replace ``exercise`` in the catalog."""

    groups = exercise.get("muscle_groups", {})
    with sqlite3.connect(str(db_path)) as conn:
        conn.execute(
            f"""
            INSERT OR REPLACE INTO library_exercises ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                exercise["id"],
                exercise["name"],
                exercise.get("description", ""),
                exercise.get("category", "strength"),
                json.dumps(groups.get("primary", [])),
                json.dumps(groups.get("secondary", [])),
                json.dumps(exercise.get("equipment", [])),
                exercise.get("difficulty", "beginner"),
            ),
        )


def delete_exercise(exercise_id: str, db_path: Path = DEFAULT_DB_PATH) -> bool:
    """Hide ``exercise_id`` from the catalog.

    The row is kept so logs referencing the exercise stay readable; lookups
    of a deleted exercise return ``None``.
    """

    with sqlite3.connect(str(db_path)) as conn:
        cur = conn.execute(
            "UPDATE library_exercises SET deleted = 1 WHERE id = ? AND deleted = 0",
            (exercise_id,),
        )
    return cur.rowcount > 0


class ExerciseCatalog:
    """Catalog collaborator bound to a database path."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH) -> None:
        self.db_path = Path(db_path)

    def get_exercise_by_id(self, exercise_id: str) -> dict | None:
        return get_exercise_by_id(exercise_id, self.db_path)

    def find_similar_exercises(self, exercise_id: str, limit: int = 5) -> list[dict]:
        return find_similar_exercises(exercise_id, limit, self.db_path)

    def search(self, query: str) -> list[dict]:
        return search_exercises(query, self.db_path)
