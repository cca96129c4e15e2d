"""Controller for the workout in progress.

:class:`WorkoutSession` is the session context the app hands to its
screens.  It owns the live :class:`~workout_engine.models.Session`, the rest
timer and the collaborators, and is the only object that mutates the
session.
"""

from __future__ import annotations

import logging
import time

from . import DEFAULT_REST_DURATION, DEFAULT_WEIGHT_INCREMENT
from .models import PersistedLog, Routine, Session
from .rest_timer import RestTimer
from .session_builder import SessionBuilder
from .session_finalizer import SessionFinalizer
from .set_tracker import SetTracker

logger = logging.getLogger(__name__)


class WorkoutSession:
    """Lifecycle: building -> running <-> paused -> finalizing -> persisted | discarded."""

    BUILDING = "building"
    RUNNING = "running"
    PAUSED = "paused"
    FINALIZING = "finalizing"
    PERSISTED = "persisted"
    DISCARDED = "discarded"

    def __init__(
        self,
        user_id: str | None,
        *,
        catalog=None,
        log_store=None,
        feedback=None,
        scheduler=None,
        weight_increment: float = DEFAULT_WEIGHT_INCREMENT,
        default_rest: int = DEFAULT_REST_DURATION,
        on_rest_finished=None,
    ) -> None:
        self.user_id = user_id
        self.catalog = catalog
        self.log_store = log_store
        self.default_rest = default_rest
        self.session: Session | None = None
        self.state = self.BUILDING
        self.rest_timer = RestTimer(scheduler, on_finish=on_rest_finished)
        self.builder = SessionBuilder(catalog)
        self.tracker = SetTracker(self.rest_timer, weight_increment)
        self.finalizer = SessionFinalizer(log_store, feedback)

    # ------------------------------------------------------------------
    # Starting
    # ------------------------------------------------------------------

    def history(self) -> list[PersistedLog]:
        if self.log_store is None or not self.user_id:
            return []
        return self.log_store.get_workout_logs(self.user_id)

    def start_from_routine(self, routine: Routine, logs=None, block_index: int = 0) -> Session:
        """Begin a workout from ``routine``.

        ``logs`` defaults to the user's history from the log store.
        """

        if logs is None:
            logs = self.history()
        return self._begin(self.builder.build_from_routine(routine, logs, block_index))

    def start_freeform(self) -> Session:
        return self._begin(self.builder.build_freeform())

    def _begin(self, session: Session) -> Session:
        self.rest_timer.stop()
        self.session = session
        session.clock.start()
        self.state = self.RUNNING
        logger.info("Workout '%s' started with %d exercises", session.name, len(session.exercises))
        return session

    def refresh_weights(self, logs=None) -> int:
        """Apply history that arrived after the workout started."""

        if self.session is None:
            return 0
        if logs is None:
            logs = self.history()
        return self.builder.refresh_weights(self.session, logs)

    def add_exercise(self, exercise_id: str, set_count: int = 1, rest_time: int | None = None):
        """Append an exercise; without ``rest_time`` the default rest applies."""

        if self.session is None:
            return None
        if rest_time is None:
            rest_time = self.default_rest
        return self.builder.add_exercise(
            self.session, exercise_id, set_count, rest_time, self.history()
        )

    # ------------------------------------------------------------------
    # Running / paused
    # ------------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.state in (self.RUNNING, self.PAUSED)

    @property
    def is_paused(self) -> bool:
        return self.state == self.PAUSED

    def pause(self) -> None:
        if self.state != self.RUNNING:
            return
        self.session.clock.pause()
        self.rest_timer.stop()
        self.state = self.PAUSED

    def resume(self) -> None:
        """Continue the clock; a stopped rest countdown stays stopped."""

        if self.state != self.PAUSED:
            return
        self.session.clock.resume()
        self.state = self.RUNNING

    def toggle_pause(self) -> None:
        if self.is_paused:
            self.resume()
        else:
            self.pause()

    def elapsed(self) -> int:
        return self.session.clock.elapsed() if self.session else 0

    # ------------------------------------------------------------------
    # Set tracking
    # ------------------------------------------------------------------

    def toggle_completion(self, ex_idx: int, set_idx: int) -> bool:
        if not self.is_active:
            return False
        return self.tracker.toggle_completion(self.session, ex_idx, set_idx)

    def update_metrics(self, ex_idx: int, set_idx: int, patch: dict) -> bool:
        if not self.is_active:
            return False
        return self.tracker.update_metrics(self.session, ex_idx, set_idx, patch)

    def step_reps(self, ex_idx: int, set_idx: int, delta: int = 1) -> bool:
        if not self.is_active:
            return False
        return self.tracker.step_reps(self.session, ex_idx, set_idx, delta)

    def step_weight(self, ex_idx: int, set_idx: int, direction: int = 1) -> bool:
        if not self.is_active:
            return False
        return self.tracker.step_weight(self.session, ex_idx, set_idx, direction)

    def add_set(self, ex_idx: int):
        if not self.is_active:
            return None
        return self.tracker.add_set(self.session, ex_idx)

    def navigate(self, direction: int) -> bool:
        if not self.is_active:
            return False
        return self.tracker.navigate(self.session, direction)

    # ------------------------------------------------------------------
    # Ending
    # ------------------------------------------------------------------

    def complete(self) -> PersistedLog | None:
        return self.finalizer.complete(self)

    def cancel(self) -> None:
        if self.session is None:
            return
        self.finalizer.cancel(self)

    def release(self, final_state: str) -> None:
        """Drop the live session and its rest schedule."""

        self.rest_timer.close()
        self.session = None
        self.state = final_state

    def close(self) -> None:
        """Tear down without a decision, e.g. when the app stops."""

        self.rest_timer.close()

    def __enter__(self) -> "WorkoutSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Display helpers
    # ------------------------------------------------------------------

    def summary(self) -> str:
        """Return a formatted text summary of the live session."""

        if self.session is None:
            return ""
        session = self.session
        lines = [f"Workout: {session.name}"]
        if session.start_time is not None:
            start = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(session.start_time))
            lines.append(f"Start: {start}")
        minutes, seconds = divmod(self.elapsed(), 60)
        lines.append(f"Duration: {minutes}m {seconds}s")
        for ex in session.exercises:
            lines.append(f"\n{ex.name}")
            for s in ex.sets:
                mark = "x" if s.completed else " "
                reps = s.completed_reps if s.completed_reps is not None else s.target_reps
                weight = (
                    s.completed_weight if s.completed_weight is not None else s.target_weight
                )
                lines.append(f"  [{mark}] Set {s.set_number}: {reps or 0} x {weight or 0}")
        return "\n".join(lines)
