import sqlite3

from workout_engine import db, exercises, logs, routines
from workout_engine.exercises import ExerciseCatalog
from workout_engine.logs import WorkoutLogStore
from workout_engine.models import Routine, RoutineBlock, RoutineExercise, SetConfiguration, SetType
from workout_engine.workout_session import WorkoutSession
from utils import FakeClock, make_log


def test_schema_creates_required_tables(tmp_path):
    path = db.ensure_schema(tmp_path / "nested" / "workout.db")
    assert path.exists()
    assert db.missing_tables(path) == []


def test_missing_tables_reported(tmp_path):
    path = tmp_path / "empty.db"
    sqlite3.connect(path).close()
    assert db.missing_tables(path) == db.REQUIRED_TABLES


def test_logs_round_trip_in_date_order(sample_db):
    store = WorkoutLogStore(sample_db)
    store.save_workout_log(make_log("b", date=200, exercise_id="bench", weights=[50, 55]))
    store.save_workout_log(make_log("a", date=100, exercise_id="bench", weights=[45]))
    store.save_workout_log(make_log("x", date=150, exercise_id="bench", weights=[1], user_id="u2"))

    loaded = store.get_workout_logs("u1")
    assert [log.id for log in loaded] == ["a", "b"]
    sets = loaded[1].exercises[0].sets
    assert [s.weight for s in sets] == [50, 55]
    assert sets[0].set_type is SetType.NORMAL


def test_saving_same_log_twice_keeps_one_row(sample_db):
    log = make_log("dup", date=100, exercise_id="bench", weights=[60])
    logs.save_workout_log(log, sample_db)
    logs.save_workout_log(log, sample_db)
    assert len(logs.get_workout_logs("u1", sample_db)) == 1


def test_finished_workout_is_stored(sample_db, fake_time):
    store = WorkoutLogStore(sample_db)
    workout = WorkoutSession(
        "u1", catalog=ExerciseCatalog(sample_db), log_store=store, scheduler=FakeClock()
    )
    workout.start_from_routine(routines.get_routine("r1", sample_db))
    workout.toggle_completion(0, 1)
    fake_time[0] += 600
    log = workout.complete()

    stored = store.get_workout_logs("u1")
    assert [s.id for s in stored] == [log.id]
    assert stored[0].total_volume == 8 * 60
    assert stored[0].duration_seconds == 600
    assert stored[0].exercises[1].sets == []


def test_exercise_lookup(sample_db):
    bench = exercises.get_exercise_by_id("bench", sample_db)
    assert bench["name"] == "Bench Press"
    assert bench["muscle_groups"]["primary"] == ["chest"]
    assert exercises.get_exercise_by_id("missing", sample_db) is None


def test_search_matches_name_and_muscles(sample_db):
    catalog = ExerciseCatalog(sample_db)
    assert [e["id"] for e in catalog.search("press")] == ["bench", "ohp"]
    assert [e["id"] for e in catalog.search("BICEPS")] == ["curl"]


def test_similar_exercises_ranked(sample_db):
    similar = exercises.find_similar_exercises("bench", db_path=sample_db)
    # push-up shares the primary muscle, overhead press only secondary muscles and equipment
    assert [e["id"] for e in similar] == ["pushup", "ohp"]
    assert exercises.find_similar_exercises("bench", limit=1, db_path=sample_db)[0]["id"] == "pushup"
    assert exercises.find_similar_exercises("missing", db_path=sample_db) == []


def test_save_exercise_replaces(sample_db):
    exercises.save_exercise(
        {"id": "curl", "name": "Hammer Curl", "muscle_groups": {"primary": ["biceps"]}},
        sample_db,
    )
    assert exercises.get_exercise_by_id("curl", sample_db)["name"] == "Hammer Curl"


def test_load_routines_includes_shared(sample_db):
    loaded = routines.load_routines("u1", sample_db)
    assert [r.id for r in loaded] == ["r1"]
    assert routines.WORKOUT_ROUTINES is loaded

    every = routines.load_routines(db_path=sample_db)
    assert {r.id for r in every} == {"r1", "r2"}


def test_save_routine_round_trip(sample_db):
    routine = Routine(
        id="r3",
        name="Arms",
        user_id="u1",
        sessions=[
            RoutineBlock(
                id="a",
                name="Arms",
                exercises=[
                    RoutineExercise(
                        exercise_id="curl",
                        rest_time=45,
                        sets=[SetConfiguration(set_type=SetType.WARMUP, target_reps=15)],
                    )
                ],
            )
        ],
    )
    routines.save_routine(routine, sample_db)
    assert routines.get_routine("r3", sample_db) == routine


def test_deleted_log_leaves_history(sample_db):
    store = WorkoutLogStore(sample_db)
    store.save_workout_log(make_log("a", date=100, exercise_id="bench", weights=[45]))
    store.save_workout_log(make_log("b", date=200, exercise_id="bench", weights=[50]))

    assert store.delete_workout_log("b")
    assert not store.delete_workout_log("b")
    assert not store.delete_workout_log("missing")
    assert [log.id for log in store.get_workout_logs("u1")] == ["a"]
    assert store.get_workout_log("b") is None
    assert store.get_workout_log("a").exercises[0].sets[0].weight == 45


def test_saving_deleted_log_restores_it(sample_db):
    log = make_log("a", date=100, exercise_id="bench", weights=[45])
    logs.save_workout_log(log, sample_db)
    logs.delete_workout_log("a", sample_db)
    logs.save_workout_log(log, sample_db)
    assert logs.get_workout_log("a", sample_db) == log


def test_deleted_exercise_hidden_from_catalog(sample_db):
    assert exercises.delete_exercise("curl", sample_db)
    assert exercises.get_exercise_by_id("curl", sample_db) is None
    assert "curl" not in [e["id"] for e in exercises.get_all_exercises(sample_db)]
    assert not exercises.delete_exercise("curl", sample_db)


def test_deleted_routine_not_offered(sample_db):
    assert routines.delete_routine("r1", sample_db)
    assert routines.load_routines("u1", sample_db) == []
    assert routines.get_routine("r1", sample_db) is None
