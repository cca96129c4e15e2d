"""Per-set mutations of a live session.

Every mutation works in place on the :class:`~workout_engine.models.Session`
owned by the workout controller.  Indices that point outside the session are
ignored (the call returns ``False``) rather than raising, since they come
straight from UI events.
"""

from __future__ import annotations

import logging

from . import DEFAULT_WEIGHT_INCREMENT, RPE_MAX, RPE_MIN
from .models import Session, SessionSet, SetType

logger = logging.getLogger(__name__)

METRIC_FIELDS = (
    "completed_reps",
    "completed_weight",
    "completed_duration",
    "completed_distance",
    "rpe",
)


def _current(recorded, target):
    if recorded is not None:
        return recorded
    return target if target is not None else 0


def clamp_rpe(value):
    """Clamp ``value`` into the RPE range; half points such as 8.5 are kept."""
    if value is None:
        return None
    return max(RPE_MIN, min(RPE_MAX, value))


class SetTracker:
    """Applies set completion, metric edits and navigation to a session.

    ``rest_timer`` is armed on completion and navigation events.
    """

    def __init__(self, rest_timer, weight_increment: float = DEFAULT_WEIGHT_INCREMENT) -> None:
        self.rest_timer = rest_timer
        self.weight_increment = weight_increment

    @staticmethod
    def _get_set(session: Session, ex_idx: int, set_idx: int) -> SessionSet | None:
        if not 0 <= ex_idx < len(session.exercises):
            logger.debug("Ignoring exercise index %s", ex_idx)
            return None
        sets = session.exercises[ex_idx].sets
        if not 0 <= set_idx < len(sets):
            logger.debug("Ignoring set index %s for exercise %s", set_idx, ex_idx)
            return None
        return sets[set_idx]

    def toggle_completion(self, session: Session, ex_idx: int, set_idx: int) -> bool:
        """Flip the completion flag of a set.

        Completing a set arms the rest timer with the exercise's rest time,
        or with the next exercise's rest time when it was the last set.
        Un-completing never touches the timer.
        """

        target = self._get_set(session, ex_idx, set_idx)
        if target is None:
            return False
        target.completed = not target.completed
        session.touch()
        if not target.completed:
            return True

        exercise = session.exercises[ex_idx]
        is_last_set = set_idx == len(exercise.sets) - 1
        if not is_last_set:
            if exercise.rest_time:
                self.rest_timer.start(exercise.rest_time)
        elif ex_idx < len(session.exercises) - 1:
            upcoming = session.exercises[ex_idx + 1]
            if upcoming.rest_time:
                self.rest_timer.start(upcoming.rest_time)
        return True

    def update_metrics(self, session: Session, ex_idx: int, set_idx: int, patch: dict) -> bool:
        """Merge recorded values from ``patch`` into a set."""

        unknown = set(patch) - set(METRIC_FIELDS)
        if unknown:
            raise KeyError(f"Unknown set metric(s): {', '.join(sorted(unknown))}")
        target = self._get_set(session, ex_idx, set_idx)
        if target is None:
            return False
        for name, value in patch.items():
            if name == "rpe":
                value = clamp_rpe(value)
            elif value is not None:
                value = max(0, value)
            setattr(target, name, value)
        session.touch()
        return True

    def step_reps(self, session: Session, ex_idx: int, set_idx: int, delta: int = 1) -> bool:
        target = self._get_set(session, ex_idx, set_idx)
        if target is None:
            return False
        base = _current(target.completed_reps, target.target_reps)
        return self.update_metrics(
            session, ex_idx, set_idx, {"completed_reps": max(0, base + delta)}
        )

    def step_weight(self, session: Session, ex_idx: int, set_idx: int, direction: int = 1) -> bool:
        target = self._get_set(session, ex_idx, set_idx)
        if target is None:
            return False
        base = _current(target.completed_weight, target.target_weight)
        new_weight = max(0, base + direction * self.weight_increment)
        return self.update_metrics(
            session, ex_idx, set_idx, {"completed_weight": new_weight}
        )

    def add_set(self, session: Session, ex_idx: int) -> SessionSet | None:
        """Append a set copying type and targets from the current last set."""

        if not 0 <= ex_idx < len(session.exercises):
            return None
        sets = session.exercises[ex_idx].sets
        last = sets[-1] if sets else None
        new_set = SessionSet(
            set_number=len(sets) + 1,
            set_type=last.set_type if last else SetType.NORMAL,
            target_reps=last.target_reps if last else None,
            target_weight=last.target_weight if last else None,
            completed=False,
        )
        sets.append(new_set)
        session.touch()
        return new_set

    def navigate(self, session: Session, direction: int) -> bool:
        """Move to the previous (-1) or next (+1) exercise.

        Moves past either end are ignored.  Entering an exercise that
        declares a rest time starts the rest timer.
        """

        if direction not in (1, -1):
            raise ValueError("direction must be +1 or -1")
        new_index = session.current_exercise_index + direction
        if not 0 <= new_index < len(session.exercises):
            return False
        session.current_exercise_index = new_index
        session.current_set_index = 0
        session.touch()
        rest_time = session.exercises[new_index].rest_time
        if rest_time:
            self.rest_timer.start(rest_time)
        return True
