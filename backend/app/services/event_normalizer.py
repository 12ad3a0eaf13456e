"""
Event normalizer: calendar events to timeline items.

Calendar events come in several subtypes. Subtype-specific display data is
resolved into one details variant per subtype; the registry below must
cover every EventType.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.models.calendar_event import CompletionStatus, EventType
from app.services.timeline_items import (
    EventItem,
    EventStatus,
    NormalizationResult,
    SkippedRecord,
    TimelineItemKind,
    clamp_days_left,
    days_until,
)
from app.utils.invariants import as_utc, validate_clock_reading


ALL_DAY_LABEL = "All Day"
DEFAULT_LOCATION = "TBD"


@dataclass(frozen=True)
class PlainEventDetails:
    """A user event without subtype data."""
    subtype: EventType = EventType.EVENT


@dataclass(frozen=True)
class DeadlineEventDetails:
    """Calendar copy of an admission deadline."""
    deadline_type: Optional[str] = None
    deadline_title: Optional[str] = None
    subtype: EventType = EventType.DEADLINE


@dataclass(frozen=True)
class InterviewDetails:
    """Interview slot."""
    interview_type: Optional[str] = None
    duration_minutes: Optional[int] = None
    location: Optional[str] = None
    subtype: EventType = EventType.INTERVIEW


@dataclass(frozen=True)
class ScholarshipDetails:
    """Scholarship note."""
    scholarship_name: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[str] = None
    subtype: EventType = EventType.SCHOLARSHIP


@dataclass(frozen=True)
class ReminderDetails:
    """System-generated reminder carrier; the earliest unsent reminder still ahead of now."""
    next_reminder_at: Optional[datetime] = None
    subtype: EventType = EventType.REMINDER


def active_reminders(event: Any) -> List[Any]:
    """Reminders of ``event`` that are still active, in stored order."""
    return [r for r in (getattr(event, "reminders", None) or []) if getattr(r, "is_active", True)]


def _plain_details(event: Any, now: datetime) -> PlainEventDetails:
    return PlainEventDetails()


def _deadline_details(event: Any, now: datetime) -> DeadlineEventDetails:
    deadline = getattr(event, "deadline", None)
    if deadline is None:
        return DeadlineEventDetails()
    return DeadlineEventDetails(
        deadline_type=deadline.deadline_type,
        deadline_title=deadline.title,
    )


def _interview_details(event: Any, now: datetime) -> InterviewDetails:
    interview = getattr(event, "interview", None)
    if interview is None:
        return InterviewDetails()
    return InterviewDetails(
        interview_type=interview.interview_type,
        duration_minutes=interview.duration_minutes,
        location=interview.location,
    )


def _scholarship_details(event: Any, now: datetime) -> ScholarshipDetails:
    scholarship = getattr(event, "scholarship", None)
    if scholarship is None:
        return ScholarshipDetails()
    return ScholarshipDetails(
        scholarship_name=scholarship.scholarship_name,
        amount=scholarship.amount,
        currency=scholarship.currency,
    )


def _reminder_details(event: Any, now: datetime) -> ReminderDetails:
    pending = [
        as_utc(r.remind_at) for r in active_reminders(event)
        if r.remind_at is not None and not getattr(r, "is_sent", False)
    ]
    return ReminderDetails(
        next_reminder_at=min((at for at in pending if at >= now), default=None),
    )


_DETAIL_RESOLVERS: Dict[EventType, Callable[[Any, datetime], Any]] = {
    EventType.EVENT: _plain_details,
    EventType.DEADLINE: _deadline_details,
    EventType.INTERVIEW: _interview_details,
    EventType.SCHOLARSHIP: _scholarship_details,
    EventType.REMINDER: _reminder_details,
}

_missing = set(EventType) - set(_DETAIL_RESOLVERS)
if _missing:
    raise RuntimeError(f"No detail resolver for event types: {sorted(t.value for t in _missing)}")


def classify_event(completion_status: CompletionStatus, diff_days: int) -> EventStatus:
    """
    Derive event status.
    
    Explicit completion wins regardless of date; otherwise the status is
    date-relative to the event start.
    """
    if completion_status == CompletionStatus.COMPLETED:
        return EventStatus.COMPLETED
    if completion_status == CompletionStatus.MISSED:
        return EventStatus.MISSED
    if diff_days < 0:
        return EventStatus.PAST
    if diff_days == 0:
        return EventStatus.TODAY
    return EventStatus.UPCOMING


class EventNormalizer:
    """
    Converts CalendarEvent records into EventItem timeline entries.
    
    Rules:
    - Completion overrides (completed, missed) take precedence over dates
    - Non-all-day events show their start time in the event's own zone
    - Linked entities only enrich display fields
    - A record without start_date is dropped and reported, never fatal
    """
    
    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        default_timezone: str = "UTC",
        time_format: str = "%I:%M %p",
    ):
        """
        Initialize event normalizer.
        
        Args:
            logger: Diagnostic sink; defaults to the module logger
            default_timezone: Zone used when an event has no usable timezone
            time_format: strftime pattern for the time-of-day display
        """
        self.logger = logger or logging.getLogger(__name__)
        self.default_timezone = default_timezone
        self.time_format = time_format
    
    def normalize(self, events: Iterable[Any], now: Any) -> NormalizationResult:
        """
        Normalize calendar events against one clock reading.
        
        Args:
            events: CalendarEvent records (ORM rows or look-alikes)
            now: Current instant
            
        Returns:
            NormalizationResult with items in input order and skipped records
            
        Raises:
            InvalidClockReadingError: If ``now`` is unusable
        """
        now = validate_clock_reading(now)
        items: List[EventItem] = []
        skipped: List[SkippedRecord] = []
        
        for event in events or ():
            start_date = getattr(event, "start_date", None)
            if start_date is None:
                record_id = getattr(event, "id", None)
                self.logger.warning("Dropping calendar event %s from timeline: missing start_date", record_id)
                skipped.append(SkippedRecord(
                    record_id=record_id,
                    kind=TimelineItemKind.EVENT,
                    reason="missing start_date",
                ))
                continue
            items.append(self._to_item(event, as_utc(start_date), now))
        
        return NormalizationResult(items=items, skipped=skipped)
    
    def format_time(self, start_date: datetime, timezone_name: Optional[str], is_all_day: bool) -> str:
        """Render the display time of an event start."""
        if is_all_day:
            return ALL_DAY_LABEL
        return start_date.astimezone(self._zone(timezone_name)).strftime(self.time_format)
    
    def _zone(self, timezone_name: Optional[str]) -> ZoneInfo:
        name = timezone_name or self.default_timezone
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            self.logger.warning(
                "Unknown event timezone %r, displaying in %s", name, self.default_timezone
            )
            return ZoneInfo(self.default_timezone)
    
    def _event_type(self, event: Any) -> EventType:
        raw = getattr(event, "event_type", None) or EventType.EVENT.value
        try:
            return EventType(raw)
        except ValueError:
            self.logger.warning(
                "Calendar event %s has unknown type %r, treating as plain event",
                getattr(event, "id", None), raw
            )
            return EventType.EVENT
    
    def _completion(self, event: Any) -> CompletionStatus:
        raw = getattr(event, "completion_status", None) or CompletionStatus.PENDING.value
        try:
            return CompletionStatus(raw)
        except ValueError:
            self.logger.warning(
                "Calendar event %s has unknown completion status %r, treating as pending",
                getattr(event, "id", None), raw
            )
            return CompletionStatus.PENDING
    
    def _to_item(self, event: Any, start_date: datetime, now: datetime) -> EventItem:
        event_type = self._event_type(event)
        completion = self._completion(event)
        details = _DETAIL_RESOLVERS[event_type](event, now)
        diff_days = days_until(start_date, now)
        is_all_day = bool(getattr(event, "is_all_day", False))
        timezone_name = getattr(event, "timezone", None)
        
        university = getattr(event, "university", None)
        program = getattr(event, "program", None)
        application = getattr(event, "application", None)
        end_date = getattr(event, "end_date", None)
        completed_at = getattr(event, "completed_at", None)
        created_at = getattr(event, "created_at", None)
        
        location = getattr(event, "location", None)
        if not location and isinstance(details, InterviewDetails):
            location = details.location
        
        return EventItem(
            id=event.id,
            kind=TimelineItemKind.EVENT,
            date=start_date,
            status=classify_event(completion, diff_days).value,
            priority=getattr(event, "priority", None),
            days_left=clamp_days_left(diff_days),
            title=event.title,
            description=getattr(event, "description", None),
            event_type=event_type.value,
            time=self.format_time(start_date, timezone_name, is_all_day),
            end_date=as_utc(end_date) if end_date is not None else None,
            location=location or DEFAULT_LOCATION,
            completion_status=completion.value,
            completed_at=as_utc(completed_at) if completed_at is not None else None,
            created_at=as_utc(created_at) if created_at is not None else None,
            color=getattr(event, "color", None),
            timezone=timezone_name,
            is_all_day=is_all_day,
            is_system_generated=bool(getattr(event, "is_system_generated", False)),
            is_complete=completion == CompletionStatus.COMPLETED,
            is_overdue=start_date < now and completion == CompletionStatus.PENDING,
            reminder_count=len(active_reminders(event)),
            university_name=university.university_name if university is not None else None,
            university_slug=university.slug if university is not None else None,
            program_name=program.program_name if program is not None else None,
            program_slug=program.program_slug if program is not None else None,
            applicant_name=application.applicant_name if application is not None else None,
            details=details,
        )
