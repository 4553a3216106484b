"""Time sources for the lifecycle engine."""
import abc
from datetime import datetime, timedelta, timezone


class Clock(abc.ABC):
    """Source of the current instant, injected so tests can pin it."""

    @abc.abstractmethod
    def now(self) -> datetime:
        """Return the current timezone-aware instant."""


class SystemClock(Clock):
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """Clock frozen at a given instant; advance it manually in tests."""

    def __init__(self, instant: datetime):
        self.set(instant)

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime):
        if instant.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime")
        self._instant = instant

    def advance(self, **kwargs):
        """Move the clock forward by a timedelta given as keyword arguments."""
        self._instant = self._instant + timedelta(**kwargs)
