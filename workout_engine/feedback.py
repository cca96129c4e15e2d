"""Post-workout analysis shown on the summary screen.

Given a stored log this works out how long the trained muscles need to
recover and whether the weight of each exercise should go up next time.
"""

from __future__ import annotations

from .models import PersistedLog

# Muscle groups that need the longer recovery window
LARGE_MUSCLE_GROUPS = {"legs", "quads", "hamstrings", "glutes", "back", "lats", "chest"}


def calculate_recovery_time(muscle_groups) -> dict:
    """Return ``hours``, ``days`` and a ``message`` for ``muscle_groups``."""

    if any(group.lower() in LARGE_MUSCLE_GROUPS for group in muscle_groups):
        return {
            "hours": 48,
            "days": 2,
            "message": "Large muscle groups trained. Rest 48-72 hours before "
            "training these muscles again.",
        }
    return {
        "hours": 24,
        "days": 1,
        "message": "Smaller muscle groups trained. Rest 24-48 hours before "
        "training these muscles again.",
    }


def should_increase_weight(
    target_reps: float,
    completed_reps: float,
    sets_completed: int,
    total_sets: int,
    average_rpe: float | None = None,
) -> dict:
    """Recommend a weight change for the next session.

    The returned mapping has ``should_increase``, ``recommendation`` and
    ``suggested_increase`` (kg, negative for a reduction).  RPE, when
    recorded, takes precedence over plain rep completion.
    """

    rep_completion = (completed_reps / target_reps * 100) if target_reps else 0
    set_completion = (sets_completed / total_sets * 100) if total_sets else 0
    all_done = rep_completion >= 100 and set_completion >= 100

    if average_rpe:
        if average_rpe <= 6 and all_done:
            return _advice(
                True,
                f"You completed all sets and reps with ease (RPE {average_rpe:g}). "
                "Consider increasing weight by 5-7.5kg next session.",
                5,
            )
        if average_rpe <= 8 and all_done:
            return _advice(
                True,
                f"You completed all sets and reps with moderate effort (RPE {average_rpe:g}). "
                "Consider increasing weight by 2.5-5kg next session.",
                2.5,
            )
        if average_rpe >= 9:
            return _advice(
                False,
                f"This was very challenging (RPE {average_rpe:g}). Maintain current "
                "weight or reduce by 2.5kg to focus on form and control.",
                -2.5,
            )

    if all_done:
        return _advice(
            True,
            "You completed all sets and reps. Consider increasing weight by "
            "2.5-5kg next session.",
            2.5,
        )
    if rep_completion >= 90 and set_completion >= 100:
        return _advice(
            True,
            "You completed most reps. Consider a small increase of 1-2.5kg next session.",
            1,
        )
    if rep_completion < 80:
        return _advice(
            False,
            "You struggled with this weight. Maintain current weight or reduce "
            "by 2.5kg to focus on form and complete all reps.",
            -2.5,
        )
    return _advice(
        False,
        "Maintain current weight and focus on completing all reps with good form.",
        0,
    )


def _advice(should_increase: bool, recommendation: str, suggested: float) -> dict:
    return {
        "should_increase": should_increase,
        "recommendation": recommendation,
        "suggested_increase": suggested,
    }


def analyze_workout(log: PersistedLog, catalog=None) -> dict:
    """Return recovery advice and per-exercise weight recommendations.

    Exercises unknown to ``catalog``, without sets or done without weight
    are skipped.  The first set's reps serve as the rep target.
    """

    muscle_groups: set[str] = set()
    analyses = []
    for ex in log.exercises:
        details = catalog.get_exercise_by_id(ex.exercise_id) if catalog else None
        if details is None:
            continue
        muscle_groups.update(details["muscle_groups"]["primary"])
        muscle_groups.update(details["muscle_groups"]["secondary"])
        if not ex.sets:
            continue
        first = ex.sets[0]
        if not first.weight:
            continue
        average_reps = sum(s.reps for s in ex.sets) / len(ex.sets)
        rpes = [s.rpe for s in ex.sets if s.rpe]
        average_rpe = sum(rpes) / len(rpes) if rpes else None
        analysis = should_increase_weight(
            first.reps,
            average_reps,
            sum(1 for s in ex.sets if s.completed),
            len(ex.sets),
            average_rpe,
        )
        analyses.append(
            {
                "exercise_id": ex.exercise_id,
                "exercise_name": details["name"],
                "current_weight": first.weight,
                **analysis,
            }
        )
    return {
        "duration_seconds": log.duration_seconds,
        "total_volume": log.total_volume,
        "muscle_groups": sorted(muscle_groups),
        "recovery": calculate_recovery_time(muscle_groups),
        "exercises": analyses,
    }
