"""Application progress summary derived from essay progress and timeline events."""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Sequence

from app.models.calendar_event import CompletionStatus, EventType
from app.services.essay_progress_service import EssayProgress, round_half_up
from app.services.timeline_items import EventItem
from app.utils.invariants import validate_clock_reading


ESSAY_WEIGHT = 0.7
TASK_WEIGHT = 0.3
UNKNOWN_DEADLINE_LABEL = "TBD"


@dataclass(frozen=True)
class EssayStats:
    """Counts over essay prompts."""
    total: int
    completed: int
    in_progress: int
    not_started: int
    completion_rate: int


@dataclass(frozen=True)
class TaskStats:
    """Counts over calendar events."""
    total: int
    completed: int
    pending: int
    missed: int
    completion_rate: int


@dataclass(frozen=True)
class ApplicationProgress:
    """Progress summary of one user's application to one university."""
    essay_progress: int
    task_progress: int
    overall_progress: int
    application_status: str
    upcoming_deadlines: int
    overdue_events: int
    next_deadline: Optional[datetime]
    next_deadline_label: str
    last_activity: Optional[datetime]
    essays: EssayStats
    tasks: TaskStats


def _rate(part: int, total: int) -> int:
    return round_half_up(part / total * 100) if total > 0 else 0


def format_deadline_label(value: datetime) -> str:
    """Short display date, e.g. ``Mar 20, 2024``."""
    return f"{value:%b} {value.day}, {value.year}"


def first_average_deadline(average_deadlines: Optional[str]) -> str:
    """First entry of a comma-separated deadline hint, or ``TBD``."""
    if not average_deadlines:
        return UNKNOWN_DEADLINE_LABEL
    first = average_deadlines.split(",")[0].strip()
    return first or UNKNOWN_DEADLINE_LABEL


class ApplicationProgressCalculator:
    """
    Summarizes application progress.
    
    Inputs are already-normalized essay progress and event items; no
    records are read here. Essays weigh 70% and tasks 30% of the overall
    figure when both exist.
    """
    
    def calculate(
        self,
        essays: Sequence[EssayProgress],
        events: Sequence[EventItem],
        now: Any,
        average_deadlines: Optional[str] = None,
    ) -> ApplicationProgress:
        """
        Build the progress summary.
        
        Args:
            essays: Essay progress entries
            events: Normalized calendar event items
            now: Current instant
            average_deadlines: University deadline hint used when no event is upcoming
            
        Returns:
            ApplicationProgress
        """
        now = validate_clock_reading(now)
        essays = list(essays or ())
        events = list(events or ())
        
        essay_stats = self._essay_stats(essays)
        task_stats = self._task_stats(events)
        
        if essay_stats.total > 0 and task_stats.total > 0:
            overall = round_half_up(
                essay_stats.completion_rate * ESSAY_WEIGHT
                + task_stats.completion_rate * TASK_WEIGHT
            )
        elif essay_stats.total > 0:
            overall = essay_stats.completion_rate
        else:
            overall = task_stats.completion_rate
        
        open_future = [
            e for e in events
            if e.date > now and e.completion_status != CompletionStatus.COMPLETED.value
        ]
        upcoming = [
            e for e in open_future
            if e.event_type == EventType.DEADLINE.value or e.priority == "high"
        ]
        overdue = [
            e for e in events
            if e.date < now and e.completion_status == CompletionStatus.PENDING.value
        ]
        next_deadline = min((e.date for e in open_future), default=None)
        
        return ApplicationProgress(
            essay_progress=essay_stats.completion_rate,
            task_progress=task_stats.completion_rate,
            overall_progress=overall,
            application_status=self._application_status(essays, events, essay_stats, task_stats),
            upcoming_deadlines=len(upcoming),
            overdue_events=len(overdue),
            next_deadline=next_deadline,
            next_deadline_label=(
                format_deadline_label(next_deadline)
                if next_deadline is not None
                else first_average_deadline(average_deadlines)
            ),
            last_activity=self._last_activity(essays, events),
            essays=essay_stats,
            tasks=task_stats,
        )
    
    def _essay_stats(self, essays: List[EssayProgress]) -> EssayStats:
        completed = sum(1 for e in essays if e.is_complete)
        in_progress = sum(1 for e in essays if not e.is_complete and e.completion_reason == "in_progress")
        not_started = sum(1 for e in essays if not e.has_submission)
        return EssayStats(
            total=len(essays),
            completed=completed,
            in_progress=in_progress,
            not_started=not_started,
            completion_rate=_rate(completed, len(essays)),
        )
    
    def _task_stats(self, events: List[EventItem]) -> TaskStats:
        completed = sum(1 for e in events if e.completion_status == CompletionStatus.COMPLETED.value)
        pending = sum(1 for e in events if e.completion_status == CompletionStatus.PENDING.value)
        missed = sum(1 for e in events if e.completion_status == CompletionStatus.MISSED.value)
        return TaskStats(
            total=len(events),
            completed=completed,
            pending=pending,
            missed=missed,
            completion_rate=_rate(completed, len(events)),
        )
    
    def _application_status(
        self,
        essays: List[EssayProgress],
        events: List[EventItem],
        essay_stats: EssayStats,
        task_stats: TaskStats,
    ) -> str:
        has_activity = any(e.has_submission for e in essays) or len(events) > 0
        if not has_activity:
            return "not-started"
        
        essays_done = essay_stats.completed == essay_stats.total
        tasks_done = task_stats.completed == task_stats.total
        if essays_done and tasks_done and (essay_stats.total > 0 or task_stats.total > 0):
            return "submitted"
        return "in-progress"
    
    def _last_activity(
        self,
        essays: List[EssayProgress],
        events: List[EventItem],
    ) -> Optional[datetime]:
        times = [e.last_edited_at for e in essays if e.has_submission and e.last_edited_at]
        times.extend(e.created_at for e in events if e.created_at)
        return max(times, default=None)
