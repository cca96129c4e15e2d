import json
import sqlite3
from pathlib import Path
import sys
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from workout_engine import settings
from workout_engine.db import ensure_schema
from utils import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_time(monkeypatch):
    """Control ``time.time``; set ``fake_time[0]`` to move the clock."""
    now = [1000.0]
    import time

    monkeypatch.setattr(time, "time", lambda: now[0])
    return now


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    monkeypatch.setattr(settings, "SETTINGS_PATH", path)
    settings.reset_cache()
    yield path
    settings.reset_cache()


@pytest.fixture
def sample_db(tmp_path: Path) -> Path:
    """Create a temporary database with a small catalog and a 'Push Day' routine."""
    db_path = ensure_schema(tmp_path / "workout.db")

    conn = sqlite3.connect(db_path)
    exercises = [
        ("bench", "Bench Press", ["chest"], ["triceps", "shoulders"], ["barbell", "bench"]),
        ("pushup", "Push-up", ["chest"], ["triceps"], []),
        ("ohp", "Overhead Press", ["shoulders"], ["triceps"], ["barbell"]),
        ("curl", "Bicep Curl", ["biceps"], [], ["dumbbell"]),
    ]
    for ex_id, name, primary, secondary, equipment in exercises:
        conn.execute(
            """
            INSERT INTO library_exercises
                (id, name, primary_muscles_json, secondary_muscles_json, equipment_json)
            VALUES (?, ?, ?, ?, ?)
            """,
            (ex_id, name, json.dumps(primary), json.dumps(secondary), json.dumps(equipment)),
        )

    sessions = [
        {
            "id": "push",
            "name": "Push Day",
            "order": 0,
            "exercises": [
                {
                    "exercise_id": "bench",
                    "order": 0,
                    "rest_time": 120,
                    "sets": [
                        {"set_type": "warmup", "target_reps": 12, "target_weight": 20},
                        {"set_type": "working", "target_reps": 8, "target_weight": 60},
                    ],
                },
                {
                    "exercise_id": "ohp",
                    "order": 1,
                    "rest_time": 90,
                    "sets": [{"target_reps": 10}],
                },
            ],
        }
    ]
    conn.execute(
        "INSERT INTO routines (id, user_id, name, sessions_json) VALUES (?, ?, ?, ?)",
        ("r1", None, "Push Day", json.dumps(sessions)),
    )
    conn.execute(
        "INSERT INTO routines (id, user_id, name, sessions_json) VALUES (?, ?, ?, ?)",
        ("r2", "someone-else", "Private Legs", "[]"),
    )
    conn.commit()
    conn.close()
    return db_path
