"""
Timeline aggregator: the deterministic core behind the university view.

Given one snapshot of source records and one clock reading, produces the
chronological timeline, essay progress and application summary, and
assembles them with university metadata into a view model.
"""
import enum
import logging
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from app.config import Settings, get_settings
from app.services.application_progress_service import (
    ApplicationProgress,
    ApplicationProgressCalculator,
)
from app.services.deadline_normalizer import DeadlineNormalizer
from app.services.essay_progress_service import (
    EssayProgress,
    EssayProgressCalculator,
    select_primary_essay,
)
from app.services.event_normalizer import EventNormalizer
from app.services.timeline_items import (
    DeadlineItem,
    EventItem,
    SkippedRecord,
    TimelineItem,
)
from app.services.timeline_merger import merge_timeline
from app.utils.invariants import (
    check_progress_bounds,
    check_timeline_chronological,
    validate_clock_reading,
)


@dataclass(frozen=True)
class UniversityMetadata:
    """Identity fields of the university a view is built for."""
    id: UUID
    name: str
    slug: str
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    
    @property
    def location(self) -> str:
        parts = [p for p in (self.city, self.state, self.country) if p]
        return ", ".join(parts)
    
    @classmethod
    def from_record(cls, university: Any) -> "UniversityMetadata":
        return cls(
            id=university.id,
            name=university.university_name,
            slug=university.slug,
            city=getattr(university, "city", None),
            state=getattr(university, "state", None),
            country=getattr(university, "country", None),
        )


@dataclass(frozen=True)
class ProgramMetadata:
    """Identity fields of a program."""
    id: UUID
    name: str
    slug: Optional[str] = None
    degree_type: Optional[str] = None
    
    @classmethod
    def from_record(cls, program: Any) -> "ProgramMetadata":
        return cls(
            id=program.id,
            name=program.program_name,
            slug=getattr(program, "program_slug", None),
            degree_type=getattr(program, "degree_type", None),
        )


@dataclass(frozen=True)
class TimelineSnapshot:
    """
    Immutable bundle of source records for one aggregation.
    
    Collections left as None are treated as empty. ``study_level`` is the
    degree type the programs were filtered by, if any.
    """
    university: Any = None
    programs: Optional[Sequence[Any]] = None
    deadlines: Optional[Sequence[Any]] = None
    calendar_events: Optional[Sequence[Any]] = None
    essay_prompts: Optional[Sequence[Any]] = None
    submissions: Optional[Sequence[Any]] = None
    study_level: Optional[str] = None


@dataclass(frozen=True)
class UniversityTimelineView:
    """View model returned to the transport layer."""
    university: Optional[UniversityMetadata]
    programs: List[ProgramMetadata]
    generated_at: datetime
    timeline: List[TimelineItem]
    deadlines: List[DeadlineItem]
    calendar_events: List[EventItem]
    essay_prompts: List[EssayProgress]
    primary_essay: Optional[EssayProgress]
    progress: Optional[ApplicationProgress]
    skipped_records: List[SkippedRecord] = field(default_factory=list)
    filtered_by_study_level: Optional[str] = None
    
    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation; identical inputs give identical dicts."""
        data = _to_jsonable(self)
        if self.university is not None:
            data["university"]["location"] = self.university.location
        return data


def _to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    return value


def assemble_view(
    university: Optional[UniversityMetadata],
    programs: Optional[Sequence[ProgramMetadata]],
    generated_at: datetime,
    timeline: Optional[Sequence[TimelineItem]],
    essay_prompts: Optional[Sequence[EssayProgress]],
    primary_essay: Optional[EssayProgress],
    progress: Optional[ApplicationProgress] = None,
    skipped_records: Optional[Sequence[SkippedRecord]] = None,
    filtered_by_study_level: Optional[str] = None,
) -> UniversityTimelineView:
    """
    Combine derived parts into the view model.
    
    Performs no derivation; missing collections become empty lists.
    """
    timeline = list(timeline or ())
    return UniversityTimelineView(
        university=university,
        programs=list(programs or ()),
        generated_at=generated_at,
        timeline=timeline,
        deadlines=[item for item in timeline if isinstance(item, DeadlineItem)],
        calendar_events=[item for item in timeline if isinstance(item, EventItem)],
        essay_prompts=list(essay_prompts or ()),
        primary_essay=primary_essay,
        progress=progress,
        skipped_records=list(skipped_records or ()),
        filtered_by_study_level=filtered_by_study_level,
    )


class TimelineAggregator:
    """
    Deterministic aggregation over one snapshot and one clock reading.
    
    Pipeline:
    1. Validate the clock reading (fail fast)
    2. Normalize deadlines and calendar events (malformed records skipped)
    3. Merge into one chronological timeline
    4. Calculate essay progress and pick the primary essay
    5. Summarize application progress
    6. Assemble the view
    
    Rules:
    - No I/O, no shared mutable state
    - Same snapshot + same now = same view
    """
    
    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize timeline aggregator.
        
        Args:
            logger: Diagnostic sink handed to every component
            settings: Display settings; defaults to get_settings()
        """
        settings = settings or get_settings()
        self.logger = logger or logging.getLogger(__name__)
        self.deadline_normalizer = DeadlineNormalizer(logger=self.logger)
        self.event_normalizer = EventNormalizer(
            logger=self.logger,
            default_timezone=settings.default_event_timezone,
            time_format=settings.time_format,
        )
        self.essay_calculator = EssayProgressCalculator(logger=self.logger)
        self.progress_calculator = ApplicationProgressCalculator()
    
    def aggregate(self, snapshot: TimelineSnapshot, now: Any) -> UniversityTimelineView:
        """
        Build the view for one snapshot.
        
        Args:
            snapshot: Source records
            now: Current instant from the injected clock
            
        Returns:
            UniversityTimelineView
            
        Raises:
            InvalidClockReadingError: If ``now`` is unusable
        """
        now = validate_clock_reading(now)
        
        deadline_result = self.deadline_normalizer.normalize(snapshot.deadlines, now)
        event_result = self.event_normalizer.normalize(snapshot.calendar_events, now)
        
        timeline = merge_timeline(deadline_result.items, event_result.items)
        check_timeline_chronological(timeline)
        
        essays = self.essay_calculator.calculate(snapshot.essay_prompts, snapshot.submissions)
        check_progress_bounds(essays)
        primary_essay = select_primary_essay(essays)
        
        university = snapshot.university
        progress = self.progress_calculator.calculate(
            essays=essays,
            events=event_result.items,
            now=now,
            average_deadlines=getattr(university, "average_deadlines", None),
        )
        
        skipped = list(deadline_result.skipped) + list(event_result.skipped)
        if skipped:
            self.logger.info(
                "Timeline built with %d skipped record(s) for %s",
                len(skipped), getattr(university, "slug", None)
            )
        
        return assemble_view(
            university=UniversityMetadata.from_record(university) if university is not None else None,
            programs=[ProgramMetadata.from_record(p) for p in snapshot.programs or ()],
            generated_at=now,
            timeline=timeline,
            essay_prompts=essays,
            primary_essay=primary_essay,
            progress=progress,
            skipped_records=skipped,
            filtered_by_study_level=snapshot.study_level,
        )
