"""
System invariants and validation utilities.

Enforces timeline derivation constraints:
1. Every aggregation runs against one valid, finite clock reading
2. The merged timeline is non-decreasing by date
3. Essay progress stays within [0, 100]

Fail fast with explicit errors.
"""

import math
from datetime import datetime, timezone
from typing import Any, Iterable, Sequence


class InvariantViolationError(Exception):
    """Base exception for invariant violations."""
    
    def __init__(self, invariant_name: str, message: str, details: dict = None):
        self.invariant_name = invariant_name
        self.details = details or {}
        super().__init__(f"[INVARIANT VIOLATION: {invariant_name}] {message}")


class InvalidClockReadingError(InvariantViolationError):
    """Raised when the injected clock yields an unusable instant."""
    
    def __init__(self, message: str, details: dict = None):
        super().__init__("invalid_clock_reading", message, details)


class TimelineOrderError(InvariantViolationError):
    """Raised when a merged timeline is not in chronological order."""
    
    def __init__(self, message: str, details: dict = None):
        super().__init__("timeline_not_chronological", message, details)


class ProgressOutOfBoundsError(InvariantViolationError):
    """Raised when an essay progress percentage leaves [0, 100]."""
    
    def __init__(self, message: str, details: dict = None):
        super().__init__("progress_out_of_bounds", message, details)


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def validate_clock_reading(now: Any) -> datetime:
    """
    Invariant: derivations run against a valid clock reading.
    
    Accepts a datetime (naive values are taken as UTC) or a finite POSIX
    timestamp in seconds.
    
    Args:
        now: Value returned by the injected clock
        
    Returns:
        The reading as an aware UTC datetime
        
    Raises:
        InvalidClockReadingError: If the reading is missing, non-finite or of an unknown type
    """
    if isinstance(now, datetime):
        return as_utc(now)
    
    if isinstance(now, (int, float)) and not isinstance(now, bool):
        if not math.isfinite(now):
            raise InvalidClockReadingError(
                "Clock returned a non-finite timestamp",
                details={"now": repr(now)}
            )
        try:
            return datetime.fromtimestamp(now, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise InvalidClockReadingError(
                f"Clock timestamp out of range: {e}",
                details={"now": repr(now)}
            ) from e
    
    raise InvalidClockReadingError(
        "Clock must return a datetime or a finite timestamp",
        details={"now": repr(now), "type": type(now).__name__}
    )


def check_timeline_chronological(items: Sequence[Any]) -> None:
    """
    Invariant: merged timeline is non-decreasing by ``date``.
    
    Raises:
        TimelineOrderError: On the first out-of-order pair
    """
    for index in range(1, len(items)):
        previous, current = items[index - 1], items[index]
        if current.date < previous.date:
            raise TimelineOrderError(
                f"Timeline item {current.id} precedes item {previous.id}",
                details={
                    "index": index,
                    "previous_date": previous.date.isoformat(),
                    "current_date": current.date.isoformat(),
                }
            )


def check_progress_bounds(essays: Iterable[Any]) -> None:
    """
    Invariant: every essay progress percentage lies in [0, 100].
    
    Raises:
        ProgressOutOfBoundsError: On the first offending entry
    """
    for essay in essays:
        if not 0 <= essay.progress_percent <= 100:
            raise ProgressOutOfBoundsError(
                f"Essay progress {essay.progress_percent} for prompt {essay.prompt_id} out of range",
                details={"prompt_id": str(essay.prompt_id), "progress": essay.progress_percent}
            )
