"""
Derived timeline types shared by the normalizers, merger and aggregator.

Everything here is constructed fresh for one ``now`` and never mutated
afterwards (frozen dataclasses).
"""
import enum
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID


SECONDS_PER_DAY = 86_400


class TimelineItemKind(str, enum.Enum):
    """Source of a timeline item."""
    DEADLINE = "deadline"
    EVENT = "event"


class DeadlineStatus(str, enum.Enum):
    """Date-relative status of a formal deadline."""
    OVERDUE = "overdue"
    DUE_TODAY = "due-today"
    UPCOMING = "upcoming"


class EventStatus(str, enum.Enum):
    """Status of a calendar event; completion overrides win over dates."""
    COMPLETED = "completed"
    MISSED = "missed"
    PAST = "past"
    TODAY = "today"
    UPCOMING = "upcoming"


def days_until(target: datetime, now: datetime) -> int:
    """
    Whole days from ``now`` to ``target``, rounded up.
    
    Negative when ``target`` lies in the past. Both arguments must be
    timezone-aware.
    """
    return math.ceil((target - now).total_seconds() / SECONDS_PER_DAY)


def clamp_days_left(diff_days: int) -> int:
    """Days left never go below zero; lateness is expressed by status."""
    return max(0, diff_days)


@dataclass(frozen=True)
class SkippedRecord:
    """A source record dropped during normalization."""
    record_id: Optional[UUID]
    kind: TimelineItemKind
    reason: str


@dataclass(frozen=True)
class TimelineItem:
    """Unified, derived representation of a deadline or calendar event."""
    id: UUID
    kind: TimelineItemKind
    date: datetime
    status: str
    priority: Optional[str]
    days_left: int
    title: str
    description: Optional[str]


@dataclass(frozen=True)
class DeadlineItem(TimelineItem):
    """Timeline item built from an admission deadline."""
    time: Optional[str] = None
    timezone: Optional[str] = None
    deadline_type: Optional[str] = None
    is_extended: bool = False
    original_deadline: Optional[datetime] = None


@dataclass(frozen=True)
class EventItem(TimelineItem):
    """Timeline item built from a calendar event."""
    event_type: str = "event"
    time: str = ""
    end_date: Optional[datetime] = None
    location: str = "TBD"
    completion_status: str = "pending"
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    color: Optional[str] = None
    timezone: Optional[str] = None
    is_all_day: bool = False
    is_system_generated: bool = False
    is_complete: bool = False
    is_overdue: bool = False
    reminder_count: int = 0
    university_name: Optional[str] = None
    university_slug: Optional[str] = None
    program_name: Optional[str] = None
    program_slug: Optional[str] = None
    applicant_name: Optional[str] = None
    details: Any = None


@dataclass(frozen=True)
class NormalizationResult:
    """Items produced by a normalizer plus the records it had to drop."""
    items: List[TimelineItem] = field(default_factory=list)
    skipped: List[SkippedRecord] = field(default_factory=list)
