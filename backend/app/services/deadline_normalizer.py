"""Deadline normalizer: admission deadlines to timeline items."""
import logging
from datetime import datetime
from typing import Any, Iterable, List, Optional

from app.services.timeline_items import (
    DeadlineItem,
    DeadlineStatus,
    NormalizationResult,
    SkippedRecord,
    TimelineItemKind,
    clamp_days_left,
    days_until,
)
from app.utils.invariants import as_utc, validate_clock_reading


def classify_deadline(diff_days: int) -> DeadlineStatus:
    """Map a signed day difference to a deadline status."""
    if diff_days < 0:
        return DeadlineStatus.OVERDUE
    if diff_days == 0:
        return DeadlineStatus.DUE_TODAY
    return DeadlineStatus.UPCOMING


class DeadlineNormalizer:
    """
    Converts Deadline records into DeadlineItem timeline entries.
    
    Rules:
    - Status is purely date-relative (overdue / due-today / upcoming)
    - days_left is clamped at zero
    - A record without deadline_date is dropped and reported, never fatal
    - Display fields (type, extension, original date) pass through unchanged
    """
    
    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize deadline normalizer.
        
        Args:
            logger: Diagnostic sink; defaults to the module logger
        """
        self.logger = logger or logging.getLogger(__name__)
    
    def normalize(self, deadlines: Iterable[Any], now: Any) -> NormalizationResult:
        """
        Normalize deadlines against one clock reading.
        
        Args:
            deadlines: Deadline records (ORM rows or any object with the same attributes)
            now: Current instant
            
        Returns:
            NormalizationResult with items in input order and skipped records
            
        Raises:
            InvalidClockReadingError: If ``now`` is unusable
        """
        now = validate_clock_reading(now)
        items: List[DeadlineItem] = []
        skipped: List[SkippedRecord] = []
        
        for deadline in deadlines or ():
            deadline_date = getattr(deadline, "deadline_date", None)
            if deadline_date is None:
                skipped.append(self._skip(deadline, "missing deadline_date"))
                continue
            items.append(self._to_item(deadline, as_utc(deadline_date), now))
        
        return NormalizationResult(items=items, skipped=skipped)
    
    def _to_item(self, deadline: Any, deadline_date: datetime, now: datetime) -> DeadlineItem:
        diff_days = days_until(deadline_date, now)
        original = getattr(deadline, "original_deadline", None)
        
        return DeadlineItem(
            id=deadline.id,
            kind=TimelineItemKind.DEADLINE,
            date=deadline_date,
            status=classify_deadline(diff_days).value,
            priority=getattr(deadline, "priority", None),
            days_left=clamp_days_left(diff_days),
            title=deadline.title,
            description=getattr(deadline, "description", None),
            time=getattr(deadline, "deadline_time", None),
            timezone=getattr(deadline, "timezone", None),
            deadline_type=getattr(deadline, "deadline_type", None),
            is_extended=bool(getattr(deadline, "is_extended", False)),
            original_deadline=as_utc(original) if original is not None else None,
        )
    
    def _skip(self, deadline: Any, reason: str) -> SkippedRecord:
        record_id = getattr(deadline, "id", None)
        self.logger.warning("Dropping deadline %s from timeline: %s", record_id, reason)
        return SkippedRecord(record_id=record_id, kind=TimelineItemKind.DEADLINE, reason=reason)
