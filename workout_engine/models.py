"""In-memory records for routines, live sessions and finished logs.

Everything here is a plain dataclass so the controller, the SQLite store and
the screens can pass the same objects around.  ``to_dict``/``from_dict``
produce JSON-friendly mappings used by :mod:`workout_engine.logs` and
:mod:`workout_engine.routines`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum

from .duration_clock import DurationClock


class SetType(str, Enum):
    NORMAL = "normal"
    WARMUP = "warmup"
    DROP = "drop"
    FAILURE = "failure"

    @classmethod
    def parse(cls, value: "SetType | str | None") -> "SetType":
        """Return the enum member for ``value``.

        Older templates call a regular set ``working``; it maps to ``normal``.
        """

        if isinstance(value, cls):
            return value
        if value in (None, "", "working"):
            return cls.NORMAL
        return cls(value)


# ----------------------------------------------------------------------
# Routine templates
# ----------------------------------------------------------------------


@dataclass
class SetConfiguration:
    set_type: SetType = SetType.NORMAL
    target_reps: int | None = None
    target_weight: float | None = None
    target_duration: int | None = None
    target_distance: float | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "SetConfiguration":
        return cls(
            set_type=SetType.parse(data.get("set_type")),
            target_reps=data.get("target_reps"),
            target_weight=data.get("target_weight"),
            target_duration=data.get("target_duration"),
            target_distance=data.get("target_distance"),
        )


@dataclass
class RoutineExercise:
    exercise_id: str
    order: int = 0
    sets: list[SetConfiguration] = field(default_factory=list)
    rest_time: int | None = None
    notes: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "RoutineExercise":
        return cls(
            exercise_id=data["exercise_id"],
            order=data.get("order", 0),
            sets=[SetConfiguration.from_dict(s) for s in data.get("sets", [])],
            rest_time=data.get("rest_time"),
            notes=data.get("notes"),
        )


@dataclass
class RoutineBlock:
    """One workout day of a routine, e.g. "Push Day"."""

    id: str
    name: str
    order: int = 0
    exercises: list[RoutineExercise] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "RoutineBlock":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            order=data.get("order", 0),
            exercises=[RoutineExercise.from_dict(e) for e in data.get("exercises", [])],
        )


@dataclass
class Routine:
    id: str
    name: str
    user_id: str | None = None
    sessions: list[RoutineBlock] = field(default_factory=list)

    def to_dict(self) -> dict:
        return to_plain(asdict(self))

    @classmethod
    def from_dict(cls, data: dict) -> "Routine":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            user_id=data.get("user_id"),
            sessions=[RoutineBlock.from_dict(b) for b in data.get("sessions", [])],
        )


# ----------------------------------------------------------------------
# Live session
# ----------------------------------------------------------------------


@dataclass
class SessionSet:
    set_number: int
    set_type: SetType = SetType.NORMAL
    target_reps: int | None = None
    target_weight: float | None = None
    target_duration: int | None = None
    target_distance: float | None = None
    completed: bool = False
    completed_reps: int | None = None
    completed_weight: float | None = None
    completed_duration: int | None = None
    completed_distance: float | None = None
    rpe: float | None = None


@dataclass
class SessionExercise:
    exercise_id: str
    name: str
    order: int = 0
    sets: list[SessionSet] = field(default_factory=list)
    rest_time: int | None = None
    notes: str | None = None


@dataclass
class Session:
    """The live workout being recorded."""

    name: str
    routine_id: str | None = None
    exercises: list[SessionExercise] = field(default_factory=list)
    current_exercise_index: int = 0
    current_set_index: int = 0
    clock: DurationClock = field(default_factory=DurationClock)
    # bumped on every mutation so a built-but-unsaved log can be reused
    revision: int = 0

    @property
    def start_time(self) -> float | None:
        return self.clock.started_at

    @property
    def paused_seconds(self) -> float:
        return self.clock.paused_seconds

    @property
    def pause_started_at(self) -> float | None:
        return self.clock.pause_started_at

    @property
    def current_exercise(self) -> SessionExercise | None:
        if 0 <= self.current_exercise_index < len(self.exercises):
            return self.exercises[self.current_exercise_index]
        return None

    def touch(self) -> None:
        self.revision += 1


# ----------------------------------------------------------------------
# Finished logs
# ----------------------------------------------------------------------


@dataclass
class CompletedSet:
    set_number: int
    set_type: SetType = SetType.NORMAL
    reps: float = 0
    weight: float = 0
    duration: float = 0
    distance: float = 0
    completed: bool = True
    rpe: float | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "CompletedSet":
        return cls(
            set_number=data["set_number"],
            set_type=SetType.parse(data.get("set_type")),
            reps=data.get("reps") or 0,
            weight=data.get("weight") or 0,
            duration=data.get("duration") or 0,
            distance=data.get("distance") or 0,
            completed=data.get("completed", True),
            rpe=data.get("rpe"),
        )


@dataclass
class CompletedExercise:
    exercise_id: str
    order: int = 0
    sets: list[CompletedSet] = field(default_factory=list)
    notes: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "CompletedExercise":
        return cls(
            exercise_id=data["exercise_id"],
            order=data.get("order", 0),
            sets=[CompletedSet.from_dict(s) for s in data.get("sets", [])],
            notes=data.get("notes"),
        )


@dataclass(frozen=True)
class PersistedLog:
    id: str
    user_id: str
    date: float
    start_time: float
    end_time: float
    exercises: tuple[CompletedExercise, ...] = ()
    duration_seconds: int = 0
    total_volume: float = 0
    routine_id: str | None = None
    completed: bool = True

    def to_dict(self) -> dict:
        return to_plain(asdict(self))

    @classmethod
    def from_dict(cls, data: dict) -> "PersistedLog":
        return cls(
            id=data["id"],
            user_id=data["user_id"],
            date=data["date"],
            start_time=data["start_time"],
            end_time=data["end_time"],
            exercises=tuple(
                CompletedExercise.from_dict(e) for e in data.get("exercises", [])
            ),
            duration_seconds=data.get("duration_seconds", 0),
            total_volume=data.get("total_volume", 0),
            routine_id=data.get("routine_id"),
            completed=data.get("completed", True),
        )


def to_plain(value):
    """Replace enum members in ``value`` with their string values."""

    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value
