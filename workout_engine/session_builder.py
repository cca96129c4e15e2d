"""Construct live sessions from routine templates.

Target weights are pre-filled from the user's history ("carryover"): the
weight of the most recent logged set of an exercise becomes the default for
that exercise's sets.  At build time carryover replaces the template weight;
:meth:`SessionBuilder.refresh_weights` only fills sets still without one.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .models import (
    PersistedLog,
    Routine,
    RoutineExercise,
    Session,
    SessionExercise,
    SessionSet,
    SetType,
)

logger = logging.getLogger(__name__)

UNKNOWN_EXERCISE_NAME = "Unknown Exercise"
FREEFORM_NAME = "Freeform Workout"


def last_weight_for(exercise_id: str, logs: Iterable[PersistedLog]) -> float | None:
    """Return the most recent positive weight logged for ``exercise_id``.

    Logs are ordered by ``date`` with a stable sort, so logs sharing a date
    keep the order the history provided and the later entry wins.  Within a
    log the last set carrying a weight is used.
    """

    ordered = sorted(logs, key=lambda log: log.date)
    for log in reversed(ordered):
        for exercise in log.exercises:
            if exercise.exercise_id != exercise_id:
                continue
            for completed_set in reversed(exercise.sets):
                if completed_set.completed and completed_set.weight and completed_set.weight > 0:
                    return completed_set.weight
    return None


class SessionBuilder:
    """Builds :class:`Session` objects.

    ``catalog`` only needs ``get_exercise_by_id``; it is optional so
    sessions can be built without a database (names then fall back to
    ``"Unknown Exercise"``).
    """

    def __init__(self, catalog=None) -> None:
        self.catalog = catalog

    def exercise_name(self, exercise_id: str) -> str:
        details = self.catalog.get_exercise_by_id(exercise_id) if self.catalog else None
        return details["name"] if details else UNKNOWN_EXERCISE_NAME

    def build_from_routine(
        self,
        routine: Routine,
        historical_logs: Iterable[PersistedLog] = (),
        block_index: int = 0,
    ) -> Session:
        logs = list(historical_logs)
        block = (
            routine.sessions[block_index]
            if 0 <= block_index < len(routine.sessions)
            else None
        )
        session = Session(name=routine.name, routine_id=routine.id)
        if block is None or not block.exercises:
            logger.info("Routine %s has no exercises, starting empty session", routine.id)
            return session
        for idx, prescription in enumerate(block.exercises):
            session.exercises.append(self._exercise_from_template(idx, prescription, logs))
        return session

    def build_freeform(self) -> Session:
        return Session(name=FREEFORM_NAME)

    def refresh_weights(self, session: Session, logs: Iterable[PersistedLog]) -> int:
        """Fill missing target weights from ``logs``.

        Used when history arrives after the session has started.  Returns
        the number of sets that received a weight.
        """

        logs = list(logs)
        filled = 0
        for exercise in session.exercises:
            weight = last_weight_for(exercise.exercise_id, logs)
            if weight is None:
                continue
            for session_set in exercise.sets:
                if not session_set.target_weight:
                    session_set.target_weight = weight
                    filled += 1
        if filled:
            session.touch()
        return filled

    def add_exercise(
        self,
        session: Session,
        exercise_id: str,
        set_count: int = 1,
        rest_time: int | None = None,
        logs: Iterable[PersistedLog] = (),
    ) -> SessionExercise:
        """Append ``exercise_id`` with ``set_count`` empty sets."""

        weight = last_weight_for(exercise_id, logs)
        exercise = SessionExercise(
            exercise_id=exercise_id,
            name=self.exercise_name(exercise_id),
            order=len(session.exercises),
            sets=[
                SessionSet(set_number=n, target_weight=weight)
                for n in range(1, max(1, set_count) + 1)
            ],
            rest_time=rest_time,
        )
        session.exercises.append(exercise)
        session.touch()
        return exercise

    def _exercise_from_template(
        self,
        order: int,
        prescription: RoutineExercise,
        logs: list[PersistedLog],
    ) -> SessionExercise:
        carryover = last_weight_for(prescription.exercise_id, logs)
        sets = []
        for set_idx, config in enumerate(prescription.sets):
            template_weight = config.target_weight
            sets.append(
                SessionSet(
                    set_number=set_idx + 1,
                    set_type=SetType.parse(config.set_type),
                    target_reps=config.target_reps,
                    target_weight=carryover if carryover is not None else template_weight,
                    target_duration=config.target_duration,
                    target_distance=config.target_distance,
                )
            )
        return SessionExercise(
            exercise_id=prescription.exercise_id,
            name=self.exercise_name(prescription.exercise_id),
            order=order,
            sets=sets,
            rest_time=prescription.rest_time,
            notes=prescription.notes,
        )
