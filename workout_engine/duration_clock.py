"""Pause-aware elapsed time for a workout session."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass


@dataclass
class DurationClock:
    """Accumulates running time while excluding paused spans.

    Only timestamps are stored; :meth:`elapsed` is always recomputed from
    them so a display refresh that misses a beat never drifts the value.
    While paused the value is measured against ``pause_started_at`` so
    repeated reads return the same number until :meth:`resume`.
    """

    started_at: float | None = None
    paused_seconds: float = 0.0
    pause_started_at: float | None = None

    @property
    def is_running(self) -> bool:
        return self.started_at is not None and self.pause_started_at is None

    @property
    def is_paused(self) -> bool:
        return self.pause_started_at is not None

    def start(self) -> None:
        self.started_at = time.time()
        self.paused_seconds = 0.0
        self.pause_started_at = None

    def pause(self) -> None:
        if self.started_at is None or self.pause_started_at is not None:
            return
        self.pause_started_at = time.time()

    def resume(self) -> None:
        if self.pause_started_at is None:
            return
        self.paused_seconds += max(0.0, time.time() - self.pause_started_at)
        self.pause_started_at = None

    def elapsed(self) -> int:
        """Return whole seconds of running time."""

        if self.started_at is None:
            return 0
        reference = (
            self.pause_started_at if self.pause_started_at is not None else time.time()
        )
        return max(0, math.floor(reference - self.started_at - self.paused_seconds))
