import pytest

from workout_engine.exercises import ExerciseCatalog
from workout_engine.feedback import analyze_workout, calculate_recovery_time, should_increase_weight
from workout_engine.models import CompletedExercise, CompletedSet, PersistedLog
from utils import make_log


def test_recovery_time_depends_on_muscle_size():
    assert calculate_recovery_time(["Chest", "triceps"])["hours"] == 48
    assert calculate_recovery_time(["biceps"])["days"] == 1


@pytest.mark.parametrize(
    "completed_reps, sets_done, rpe, increase",
    [
        (10, 3, 6, 5),
        (10, 3, 8, 2.5),
        (10, 3, 9, -2.5),
        (10, 3, None, 2.5),
        (9.5, 3, None, 1),
        (7, 3, None, -2.5),
        (8.5, 2, None, 0),
    ],
)
def test_should_increase_weight(completed_reps, sets_done, rpe, increase):
    advice = should_increase_weight(10, completed_reps, sets_done, 3, rpe)
    assert advice["suggested_increase"] == increase
    assert advice["should_increase"] == (increase > 0)


def test_analyze_workout(sample_db):
    log = make_log("l", date=100, exercise_id="bench", weights=[60, 60, 60], reps=8)
    analysis = analyze_workout(log, ExerciseCatalog(sample_db))

    assert analysis["muscle_groups"] == ["chest", "shoulders", "triceps"]
    assert analysis["recovery"]["hours"] == 48
    [bench] = analysis["exercises"]
    assert bench["exercise_name"] == "Bench Press"
    assert bench["current_weight"] == 60
    assert bench["suggested_increase"] == 2.5


def test_analyze_skips_unknown_and_unweighted(sample_db):
    log = PersistedLog(
        id="l",
        user_id="u1",
        date=1,
        start_time=1,
        end_time=2,
        exercises=(
            CompletedExercise(exercise_id="ghost", sets=[CompletedSet(1, reps=5, weight=10)]),
            CompletedExercise(exercise_id="pushup", sets=[CompletedSet(1, reps=20)]),
            CompletedExercise(exercise_id="curl"),
        ),
    )
    analysis = analyze_workout(log, ExerciseCatalog(sample_db))
    assert analysis["exercises"] == []
    assert analysis["muscle_groups"] == ["biceps", "chest", "triceps"]
    assert analysis["recovery"]["hours"] == 48
