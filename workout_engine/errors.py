"""Exceptions raised by the workout engine."""

from __future__ import annotations


class WorkoutError(Exception):
    """Base class for workout engine errors."""


class ValidationError(WorkoutError):
    """A workout cannot be finalized in its current context."""


class PersistenceError(WorkoutError):
    """Saving a finished workout failed.

    ``log`` is the workout log that could not be stored; the live session is
    kept so the save can be retried.
    """

    def __init__(self, message: str, log=None) -> None:
        super().__init__(message)
        self.log = log
