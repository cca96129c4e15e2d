"""Single-instance rest countdown.

The countdown is driven by a repeating 1 second interval obtained from a
scheduler.  By default that is Kivy's :data:`kivy.clock.Clock`; anything with
a ``schedule_interval(callback, interval)`` method returning an event with
``cancel()`` works, which is how the tests drive it.

Only one interval may be registered at a time: every path that registers a
new interval first cancels the previous handle.
"""

from __future__ import annotations

import logging
from typing import Callable

from . import REST_TICK_INTERVAL

logger = logging.getLogger(__name__)

IDLE = "idle"
RUNNING = "running"


def _default_scheduler():
    # Imported lazily so the engine can be used without a Kivy event loop.
    from kivy.clock import Clock

    return Clock


class RestTimer:
    """Countdown with start/stop/edit semantics."""

    def __init__(
        self,
        scheduler=None,
        *,
        interval: float = REST_TICK_INTERVAL,
        on_finish: Callable[[], None] | None = None,
    ) -> None:
        self._scheduler = scheduler
        self.interval = interval
        self.on_finish = on_finish
        self.remaining: int | None = None
        self._event = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def active(self) -> bool:
        return self._event is not None

    @property
    def state(self) -> str:
        return RUNNING if self.active else IDLE

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self, seconds: int) -> None:
        """Restart the countdown from ``seconds``."""

        self._release()
        seconds = int(seconds)
        if seconds <= 0:
            self.remaining = None
            return
        self.remaining = seconds
        if self._scheduler is None:
            self._scheduler = _default_scheduler()
        self._event = self._scheduler.schedule_interval(self._on_interval, self.interval)
        logger.debug("Rest timer started for %s seconds", seconds)

    def tick(self) -> None:
        if not self.active or self.remaining is None:
            return
        self.remaining -= 1
        if self.remaining <= 0:
            self._release()
            self.remaining = None
            logger.debug("Rest timer finished")
            if self.on_finish:
                self.on_finish()

    def stop(self) -> None:
        self._release()
        self.remaining = None

    def edit(self, new_seconds: int) -> bool:
        """Replace the remaining time of a running countdown.

        The registered interval is kept as is.  Returns ``False`` when the
        timer is idle or ``new_seconds`` is not positive.
        """

        if not self.active or new_seconds <= 0:
            return False
        self.remaining = int(new_seconds)
        return True

    # ------------------------------------------------------------------
    # Resource handling
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release the interval on teardown."""

        self.stop()

    def __enter__(self) -> "RestTimer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _release(self) -> None:
        event, self._event = self._event, None
        if event is not None:
            event.cancel()

    def _on_interval(self, _dt) -> None:
        self.tick()
