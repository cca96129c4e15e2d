"""UI screen modules for WorkoutApp."""

from .session import (
    WorkoutActiveScreen,
    WorkoutSummaryScreen,
)
from .routines_screen import RoutinesScreen
from .workout_history_screen import WorkoutHistoryScreen

__all__ = [
    "RoutinesScreen",
    "WorkoutActiveScreen",
    "WorkoutHistoryScreen",
    "WorkoutSummaryScreen",
]
