"""Clock, random and timer adapters.

- ``SystemClock`` / ``SystemRandomSource`` / ``AsyncioTimerBackend`` for a
  running application (the timers need a running event loop)
- ``FixedClock`` / ``ScriptedRandomSource`` / ``ManualTimerBackend`` for
  tests and reproducible runs; time only moves when ``advance`` is called
"""

import asyncio
import itertools
import random
from collections.abc import Callable, Iterable
from datetime import date

import structlog

from storefront.promotions.port import Clock, RandomSource, TimerBackend, TimerHandle

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Clocks
# ---------------------------------------------------------------------------
class SystemClock(Clock):
    def today(self) -> date:
        return date.today()


class FixedClock(Clock):
    """Clock pinned to one date until moved with ``set``."""

    def __init__(self, day: date) -> None:
        self.day = day

    def set(self, day: date) -> None:
        self.day = day

    def today(self) -> date:
        return self.day


# ---------------------------------------------------------------------------
# Random sources
# ---------------------------------------------------------------------------
class SystemRandomSource(RandomSource):
    def __init__(self, seed: int | None = None) -> None:
        self._random = random.Random(seed)

    def random(self) -> float:
        return self._random.random()


class ScriptedRandomSource(RandomSource):
    """Replays the given draws in order, cycling when they run out."""

    def __init__(self, values: Iterable[float]) -> None:
        values = list(values)
        if not values:
            raise ValueError("ScriptedRandomSource needs at least one value")
        if any(not 0 <= value < 1 for value in values):
            raise ValueError("Scripted draws must lie in [0, 1)")
        self._values = itertools.cycle(values)
        self.draws: list[float] = []

    def random(self) -> float:
        value = next(self._values)
        self.draws.append(value)
        return value


# ---------------------------------------------------------------------------
# Asyncio timers
# ---------------------------------------------------------------------------
class _AsyncioTimerHandle(TimerHandle):
    def __init__(self, task: asyncio.Task) -> None:
        self._task = task

    def cancel(self) -> None:
        if not self._task.done():
            self._task.cancel()

    @property
    def active(self) -> bool:
        return not self._task.done()


class AsyncioTimerBackend(TimerBackend):
    """Runs timers as tasks on the running event loop.

    Callbacks run on the loop thread, one at a time, so a tick always
    sees the results of every mutation that completed before it.
    """

    def schedule_repeating(
        self,
        initial_delay: float,
        interval: float,
        callback: Callable[[], None],
    ) -> TimerHandle:
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._run(initial_delay, interval, callback))
        return _AsyncioTimerHandle(task)

    async def _run(self, initial_delay, interval, callback):
        await asyncio.sleep(initial_delay)
        while True:
            try:
                callback()
            except Exception:
                # A failing tick must not kill the timer; the next tick retries
                logger.exception("Promotion tick failed", callback=getattr(callback, "__name__", repr(callback)))
            await asyncio.sleep(interval)


# ---------------------------------------------------------------------------
# Manual timers
# ---------------------------------------------------------------------------
class _ManualTimer(TimerHandle):
    def __init__(self, due: float, interval: float, callback: Callable[[], None], order: int) -> None:
        self.due = due
        self.interval = interval
        self.callback = callback
        self.order = order
        self._active = True

    def cancel(self) -> None:
        self._active = False

    @property
    def active(self) -> bool:
        return self._active


class ManualTimerBackend(TimerBackend):
    """Virtual-time timers. Nothing fires until ``advance`` moves the clock."""

    def __init__(self) -> None:
        self.now = 0.0
        self._timers: list[_ManualTimer] = []
        self._counter = itertools.count()

    def schedule_repeating(
        self,
        initial_delay: float,
        interval: float,
        callback: Callable[[], None],
    ) -> TimerHandle:
        if interval <= 0:
            raise ValueError("Timer interval must be positive")
        timer = _ManualTimer(self.now + initial_delay, interval, callback, next(self._counter))
        self._timers.append(timer)
        return timer

    @property
    def pending(self) -> int:
        """Number of timers that are still scheduled."""
        return sum(1 for timer in self._timers if timer.active)

    def advance(self, seconds: float) -> int:
        """Move virtual time forward, firing due callbacks in time order.

        Returns the number of callbacks fired.
        """
        target = self.now + seconds
        fired = 0
        while True:
            self._timers = [timer for timer in self._timers if timer.active]
            due = [timer for timer in self._timers if timer.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.due, t.order))
            self.now = timer.due
            timer.due += timer.interval
            timer.callback()
            fired += 1
        self.now = target
        return fired
