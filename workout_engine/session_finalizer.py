"""Turn a live session into a stored workout log."""

from __future__ import annotations

import logging
import time
from typing import Callable

from .errors import PersistenceError, ValidationError
from .models import CompletedExercise, CompletedSet, PersistedLog, Session, SessionSet

logger = logging.getLogger(__name__)


def _effective(actual, target):
    if actual is not None:
        return actual
    if target is not None:
        return target
    return 0


def resolve_set(session_set: SessionSet) -> CompletedSet:
    """Return the logged form of a completed set (actual, else target, else 0)."""

    return CompletedSet(
        set_number=session_set.set_number,
        set_type=session_set.set_type,
        reps=_effective(session_set.completed_reps, session_set.target_reps),
        weight=_effective(session_set.completed_weight, session_set.target_weight),
        duration=_effective(session_set.completed_duration, session_set.target_duration),
        distance=_effective(session_set.completed_distance, session_set.target_distance),
        completed=True,
        rpe=session_set.rpe,
    )


def total_volume(exercises) -> float:
    return sum(s.weight * s.reps for ex in exercises for s in ex.sets)


class SessionFinalizer:
    """Builds the log, hands it to the store and then to the feedback callback.

    ``store`` needs a ``save_workout_log(log)`` method; ``feedback`` is an
    optional callable receiving the stored log.
    """

    def __init__(self, store, feedback: Callable[[PersistedLog], None] | None = None) -> None:
        self.store = store
        self.feedback = feedback
        # (session, revision, log) of a log whose save failed
        self._pending: tuple[Session, int, PersistedLog] | None = None

    def build_log(self, session: Session, user_id: str) -> PersistedLog:
        end_time = time.time()
        exercises = tuple(
            CompletedExercise(
                exercise_id=ex.exercise_id,
                order=ex.order,
                sets=[resolve_set(s) for s in ex.sets if s.completed],
                notes=ex.notes,
            )
            for ex in session.exercises
        )
        return PersistedLog(
            id=f"workout_{int(end_time * 1000)}",
            user_id=user_id,
            routine_id=session.routine_id,
            date=end_time,
            start_time=session.start_time if session.start_time is not None else end_time,
            end_time=end_time,
            exercises=exercises,
            duration_seconds=session.clock.elapsed(),
            total_volume=total_volume(exercises),
            completed=True,
        )

    def _validate(self, workout) -> None:
        if not workout.user_id:
            raise ValidationError("No signed-in user")
        if workout.session is None:
            raise ValidationError("No workout in progress")

    def _log_for(self, workout) -> PersistedLog:
        session = workout.session
        if self._pending is not None:
            pending_session, revision, log = self._pending
            if pending_session is session and revision == session.revision:
                return log
        return self.build_log(session, workout.user_id)

    def complete(self, workout) -> PersistedLog | None:
        """Store the workout and release the live session.

        Returns ``None`` without side effects when there is no user or no
        session.  Raises :class:`PersistenceError` when the store fails; the
        session then stays live and calling ``complete`` again retries with
        the same log unless the session was changed in between.
        """

        try:
            self._validate(workout)
        except ValidationError as exc:
            logger.info("Workout not finalized: %s", exc)
            return None

        session = workout.session
        previous_state = workout.state
        workout.state = workout.FINALIZING
        log = self._log_for(workout)
        try:
            self.store.save_workout_log(log)
        except Exception as exc:
            logger.exception("Saving workout log %s failed", log.id)
            self._pending = (session, session.revision, log)
            workout.state = previous_state
            raise PersistenceError(f"Failed to save workout: {exc}", log) from exc

        self._pending = None
        workout.release(workout.PERSISTED)
        logger.info(
            "Workout %s saved: %s s, volume %s", log.id, log.duration_seconds, log.total_volume
        )
        if self.feedback:
            try:
                self.feedback(log)
            except Exception:
                # the log is already stored
                logger.exception("Feedback for workout %s failed", log.id)
        return log

    def cancel(self, workout) -> None:
        """Discard the live session without storing anything."""

        self._pending = None
        workout.release(workout.DISCARDED)
        logger.info("Workout discarded")
