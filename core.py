"""Convenience imports for the app entry point.

``main.py`` and scripts import the engine from here so they do not need to
know which module of :mod:`workout_engine` defines what.
"""

from __future__ import annotations

from workout_engine import (
    DEFAULT_DB_PATH,
    DEFAULT_REST_DURATION,
    DEFAULT_WEIGHT_INCREMENT,
)
from workout_engine.db import ensure_schema
from workout_engine.errors import PersistenceError, ValidationError, WorkoutError
from workout_engine.exercises import ExerciseCatalog
from workout_engine.logs import WorkoutLogStore
from workout_engine.routines import WORKOUT_ROUTINES, get_routine, load_routines
from workout_engine.workout_session import WorkoutSession

__all__ = [
    "DEFAULT_DB_PATH",
    "DEFAULT_REST_DURATION",
    "DEFAULT_WEIGHT_INCREMENT",
    "ExerciseCatalog",
    "PersistenceError",
    "ValidationError",
    "WORKOUT_ROUTINES",
    "WorkoutError",
    "WorkoutLogStore",
    "WorkoutSession",
    "ensure_schema",
    "get_routine",
    "load_routines",
]
