"""Shared constants for the workout session engine."""

from __future__ import annotations

from pathlib import Path

# Rest between sets of an exercise added during a workout without its own rest time
DEFAULT_REST_DURATION = 90

# Stepper increment applied to set weights
DEFAULT_WEIGHT_INCREMENT = 2.5

# Bounds for the Rate of Perceived Exertion
RPE_MIN = 1
RPE_MAX = 10

# Seconds between rest countdown ticks
REST_TICK_INTERVAL = 1.0

# Path to the bundled SQLite database shipped with the application
DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "data" / "workout.db"

# Schema applied to fresh databases
SCHEMA_PATH = Path(__file__).resolve().parent.parent / "data" / "workout_schema.sql"

__all__ = [
    "DEFAULT_REST_DURATION",
    "DEFAULT_WEIGHT_INCREMENT",
    "RPE_MIN",
    "RPE_MAX",
    "REST_TICK_INTERVAL",
    "DEFAULT_DB_PATH",
    "SCHEMA_PATH",
]
