"""University timeline orchestrator: loads records and builds the timeline view."""
import logging
from typing import Optional
from uuid import UUID

from app.config import Settings
from app.orchestrators.base import BaseOrchestrator, OrchestrationError
from app.services.entity_store import EntityStore
from app.services.timeline_aggregator import (
    TimelineAggregator,
    TimelineSnapshot,
    UniversityTimelineView,
)
from app.utils.clock import Clock
from app.utils.invariants import InvariantViolationError, validate_clock_reading


class UniversityNotFoundError(OrchestrationError):
    """Raised when the requested university does not exist or is inactive."""
    pass


class UniversityTimelineOrchestrator(BaseOrchestrator):
    """
    Orchestrator for the per-university admissions timeline.
    
    Steps:
    1. Read the clock once and validate the reading
    2. Load university, programs and admissions
    3. Load deadlines, calendar events, essay prompts and submissions
    4. Call TimelineAggregator.aggregate()
    
    READ-ONLY CONTRACT:
    - Only reads through the EntityStore
    - Writes nothing
    - Without a user, events and submissions are not loaded
    - Without an explicit study level, the user's stored level filters programs
    """
    
    def __init__(
        self,
        store: EntityStore,
        clock: Clock,
        logger: Optional[logging.Logger] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize university timeline orchestrator.
        
        Args:
            store: Record source
            clock: Injected clock, read once per run
            logger: Diagnostic sink shared with the aggregator
            settings: Display settings forwarded to the aggregator
        """
        super().__init__(logger)
        self.store = store
        self.clock = clock
        self.aggregator = TimelineAggregator(logger=self.logger, settings=settings)
    
    @property
    def orchestrator_name(self) -> str:
        """Return orchestrator name."""
        return "university_timeline_orchestrator"
    
    def build_view(
        self,
        university_slug: str,
        user_id: Optional[UUID] = None,
        study_level: Optional[str] = None,
    ) -> UniversityTimelineView:
        """
        Build the timeline view of one university.
        
        Args:
            university_slug: University slug
            user_id: Requesting user; None for an anonymous view
            study_level: Degree type filter for programs; defaults to the
                user's stored study level when a user is given
            
        Returns:
            UniversityTimelineView
            
        Raises:
            UniversityNotFoundError: If the university is missing or inactive
            InvalidClockReadingError: If the clock reading is unusable
            OrchestrationError: If loading records fails
        """
        self._start_trace()
        
        try:
            with self._trace_step("read_clock"):
                now = validate_clock_reading(self.clock.now())
            
            with self._trace_step("load_university") as step:
                university = self.store.find_university(university_slug)
                if university is None:
                    raise UniversityNotFoundError(
                        f"University '{university_slug}' not found"
                    )
                study_level = self._resolve_study_level(user_id, study_level)
                programs = self.store.find_programs(university.id, degree_type=study_level)
                admissions = self.store.find_admissions(university.id)
                step.details = {
                    "programs": len(programs),
                    "study_level": study_level,
                    "admissions": len(admissions),
                }
            
            with self._trace_step("load_records") as step:
                deadlines = self.store.find_deadlines([a.id for a in admissions])
                prompts = self.store.find_essay_prompts([p.id for p in programs])
                if user_id is not None:
                    events = self.store.find_calendar_events(user_id, university.id)
                    submissions = self.store.find_submissions(user_id, [p.id for p in prompts])
                else:
                    events = []
                    submissions = []
                step.details = {
                    "deadlines": len(deadlines),
                    "calendar_events": len(events),
                    "essay_prompts": len(prompts),
                    "submissions": len(submissions),
                }
            
            with self._trace_step("aggregate"):
                snapshot = TimelineSnapshot(
                    university=university,
                    programs=programs,
                    deadlines=deadlines,
                    calendar_events=events,
                    essay_prompts=prompts,
                    submissions=submissions,
                    study_level=study_level,
                )
                return self.aggregator.aggregate(snapshot, now)
        
        except (OrchestrationError, InvariantViolationError):
            raise
        except Exception as e:
            raise OrchestrationError(f"Orchestration failed: {str(e)}") from e
    
    def _resolve_study_level(self, user_id: Optional[UUID], study_level: Optional[str]) -> Optional[str]:
        """Explicit level wins; otherwise the signed-in user's stored level, lowercased."""
        if study_level:
            return study_level.lower()
        if user_id is None:
            return None
        user = self.store.find_user(user_id)
        if user is None or not user.study_level:
            return None
        return user.study_level.lower()
