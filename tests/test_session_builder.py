import pytest

from workout_engine.exercises import ExerciseCatalog
from workout_engine.models import (
    Routine,
    RoutineBlock,
    RoutineExercise,
    SetConfiguration,
    SetType,
)
from workout_engine.routines import get_routine
from workout_engine.session_builder import (
    FREEFORM_NAME,
    UNKNOWN_EXERCISE_NAME,
    SessionBuilder,
    last_weight_for,
)
from utils import make_log


def _routine(*exercises):
    return Routine(
        id="r",
        name="Test Routine",
        sessions=[RoutineBlock(id="b", name="Day A", exercises=list(exercises))],
    )


def test_last_weight_uses_most_recent_log():
    logs = [
        make_log("l2", date=200, exercise_id="bench", weights=[25]),
        make_log("l1", date=100, exercise_id="bench", weights=[20]),
    ]
    assert last_weight_for("bench", logs) == 25
    assert last_weight_for("squat", logs) is None


def test_last_weight_takes_last_set_with_weight():
    logs = [make_log("l1", date=100, exercise_id="bench", weights=[40, 50, 0])]
    assert last_weight_for("bench", logs) == 50


def test_last_weight_same_date_later_entry_wins():
    logs = [
        make_log("a", date=100, exercise_id="bench", weights=[30]),
        make_log("b", date=100, exercise_id="bench", weights=[35]),
    ]
    assert last_weight_for("bench", logs) == 35


def test_build_from_routine_applies_carryover():
    routine = _routine(
        RoutineExercise(
            exercise_id="bench",
            rest_time=90,
            sets=[SetConfiguration(target_reps=8, target_weight=20)] * 2,
        )
    )
    logs = [
        make_log("d1", date=100, exercise_id="bench", weights=[20]),
        make_log("d2", date=200, exercise_id="bench", weights=[25]),
    ]
    session = SessionBuilder().build_from_routine(routine, logs)

    exercise = session.exercises[0]
    assert [s.target_weight for s in exercise.sets] == [25, 25]
    assert [s.set_number for s in exercise.sets] == [1, 2]
    assert exercise.rest_time == 90
    assert exercise.name == UNKNOWN_EXERCISE_NAME
    assert session.routine_id == "r"
    assert session.current_exercise_index == 0
    assert not any(s.completed for s in exercise.sets)


def test_build_without_history_keeps_template_weight():
    routine = _routine(
        RoutineExercise(exercise_id="bench", sets=[SetConfiguration(target_weight=60)])
    )
    session = SessionBuilder().build_from_routine(routine)
    assert session.exercises[0].sets[0].target_weight == 60


def test_empty_routine_gives_empty_session():
    session = SessionBuilder().build_from_routine(Routine(id="r", name="Empty"))
    assert session.exercises == []
    assert session.current_exercise is None

    session = SessionBuilder().build_from_routine(_routine())
    assert session.exercises == []


def test_build_freeform():
    session = SessionBuilder().build_freeform()
    assert session.name == FREEFORM_NAME
    assert session.routine_id is None
    assert session.exercises == []


def test_refresh_weights_fills_only_missing_targets():
    routine = _routine(
        RoutineExercise(
            exercise_id="bench",
            sets=[SetConfiguration(target_weight=None), SetConfiguration(target_weight=0)],
        )
    )
    builder = SessionBuilder()
    session = builder.build_from_routine(routine)
    session.exercises[0].sets[1].target_weight = 70
    revision = session.revision

    filled = builder.refresh_weights(
        session, [make_log("l", date=1, exercise_id="bench", weights=[45])]
    )
    assert filled == 1
    assert [s.target_weight for s in session.exercises[0].sets] == [45, 70]
    assert session.revision == revision + 1

    assert builder.refresh_weights(session, []) == 0


def test_add_exercise_appends_sets(sample_db):
    builder = SessionBuilder(ExerciseCatalog(sample_db))
    session = builder.build_freeform()
    exercise = builder.add_exercise(
        session, "curl", set_count=3, rest_time=60,
        logs=[make_log("l", date=1, exercise_id="curl", weights=[12])],
    )
    assert exercise.name == "Bicep Curl"
    assert exercise.order == 0
    assert [s.set_number for s in exercise.sets] == [1, 2, 3]
    assert all(s.target_weight == 12 for s in exercise.sets)
    assert session.exercises == [exercise]


def test_build_from_stored_routine(sample_db):
    routine = get_routine("r1", sample_db)
    session = SessionBuilder(ExerciseCatalog(sample_db)).build_from_routine(routine)

    names = [ex.name for ex in session.exercises]
    assert names == ["Bench Press", "Overhead Press"]
    bench = session.exercises[0]
    assert bench.sets[0].set_type is SetType.WARMUP
    assert bench.sets[1].set_type is SetType.NORMAL
    assert [s.target_weight for s in bench.sets] == [20, 60]


def test_unknown_set_type_is_rejected():
    with pytest.raises(ValueError):
        SetType.parse("superset")
