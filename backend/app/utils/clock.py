"""
Injectable clock.

The timeline core never reads wall-clock time itself; callers pass a
Clock so one aggregation run sees exactly one ``now`` and tests can pin it.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """Source of the current instant."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current instant as a timezone-aware datetime."""


class SystemClock(Clock):
    """Clock backed by the system time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """
    Clock pinned to one instant.

    Naive datetimes are interpreted as UTC.
    """

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, **delta) -> "FixedClock":
        """Return a new clock moved forward by ``timedelta(**delta)``."""
        return FixedClock(self._instant + timedelta(**delta))
