"""
Services package.

Services contain the timeline derivation logic and the record access
layer. Derivation services are pure: they take records and a clock
reading and return new objects.

Services should:
    - Accept collaborators (session, logger) as parameters
    - Never read wall-clock time implicitly
    - Return data or raise exceptions
"""

from app.services.timeline_items import (
    TimelineItem,
    DeadlineItem,
    EventItem,
    TimelineItemKind,
    DeadlineStatus,
    EventStatus,
    SkippedRecord,
    NormalizationResult,
)
from app.services.deadline_normalizer import DeadlineNormalizer
from app.services.event_normalizer import (
    EventNormalizer,
    PlainEventDetails,
    DeadlineEventDetails,
    InterviewDetails,
    ScholarshipDetails,
    ReminderDetails,
)
from app.services.essay_progress_service import (
    EssayProgress,
    EssayProgressCalculator,
    select_primary_essay,
)
from app.services.timeline_merger import merge_timeline
from app.services.application_progress_service import (
    ApplicationProgress,
    ApplicationProgressCalculator,
    EssayStats,
    TaskStats,
)
from app.services.entity_store import EntityStore, SqlAlchemyEntityStore
from app.services.timeline_aggregator import (
    TimelineAggregator,
    TimelineSnapshot,
    UniversityTimelineView,
    UniversityMetadata,
    ProgramMetadata,
    assemble_view,
)

__all__ = [
    "TimelineItem",
    "DeadlineItem",
    "EventItem",
    "TimelineItemKind",
    "DeadlineStatus",
    "EventStatus",
    "SkippedRecord",
    "NormalizationResult",
    "DeadlineNormalizer",
    "EventNormalizer",
    "PlainEventDetails",
    "DeadlineEventDetails",
    "InterviewDetails",
    "ScholarshipDetails",
    "ReminderDetails",
    "EssayProgress",
    "EssayProgressCalculator",
    "select_primary_essay",
    "merge_timeline",
    "ApplicationProgress",
    "ApplicationProgressCalculator",
    "EssayStats",
    "TaskStats",
    "EntityStore",
    "SqlAlchemyEntityStore",
    "TimelineAggregator",
    "TimelineSnapshot",
    "UniversityTimelineView",
    "UniversityMetadata",
    "ProgramMetadata",
    "assemble_view",
]
