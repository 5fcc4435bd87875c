"""Promotion timing ports (abstract interfaces).

The promotional timers depend on three things the engine must not take
from the wall clock directly: today's date, random draws, and delayed
repeating callbacks. Each sits behind a port so tests can drive
promotions deterministically through the manual adapters.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import date

TUESDAY = 1  # date.weekday()


class Clock(ABC):
    """Calendar source for day-dependent discounts."""

    @abstractmethod
    def today(self) -> date:
        """Return the current calendar date."""
        ...

    def is_tuesday(self) -> bool:
        return self.today().weekday() == TUESDAY


class RandomSource(ABC):
    """Uniform draws in ``[0, 1)``."""

    @abstractmethod
    def random(self) -> float: ...


class TimerHandle(ABC):
    """A scheduled repeating callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop the timer. Cancelling twice is a no-op."""
        ...

    @property
    @abstractmethod
    def active(self) -> bool: ...


class TimerBackend(ABC):
    """Schedules repeating callbacks."""

    @abstractmethod
    def schedule_repeating(
        self,
        initial_delay: float,
        interval: float,
        callback: Callable[[], None],
    ) -> TimerHandle:
        """Run ``callback`` after ``initial_delay`` seconds, then every ``interval`` seconds."""
        ...
