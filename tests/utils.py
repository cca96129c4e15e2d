import sqlite3

from workout_engine.models import CompletedExercise, CompletedSet, PersistedLog


class FakeEvent:
    def __init__(self, callback, interval):
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeClock:
    """Stand-in for ``kivy.clock.Clock`` that records registered intervals."""

    def __init__(self):
        self.events = []

    def schedule_interval(self, callback, interval):
        event = FakeEvent(callback, interval)
        self.events.append(event)
        return event

    @property
    def live(self):
        return [e for e in self.events if not e.cancelled]

    def fire(self, times=1):
        """Invoke every live interval ``times`` times."""
        for _ in range(times):
            for event in self.live:
                event.callback(event.interval)


class MemoryLogStore:
    def __init__(self, logs=None, fail=0):
        self.logs = list(logs or [])
        self.saved = []
        self.fail = fail

    def get_workout_logs(self, user_id):
        return [log for log in self.logs if log.user_id == user_id]

    def save_workout_log(self, log):
        if self.fail:
            self.fail -= 1
            raise sqlite3.OperationalError("database is locked")
        self.saved.append(log)


def make_log(log_id, date, exercise_id, weights, user_id="u1", reps=10):
    """Return a one-exercise log with a completed set per weight."""
    return PersistedLog(
        id=log_id,
        user_id=user_id,
        date=date,
        start_time=date,
        end_time=date + 60,
        exercises=(
            CompletedExercise(
                exercise_id=exercise_id,
                sets=[
                    CompletedSet(set_number=i + 1, reps=reps, weight=w)
                    for i, w in enumerate(weights)
                ],
            ),
        ),
    )
