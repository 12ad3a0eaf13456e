"""
Entity store: read access to the records the timeline is built from.

The timeline core only depends on the EntityStore contract; the
SQLAlchemy implementation is the production collaborator.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from app.models.admission import Admission, Deadline
from app.models.calendar_event import CalendarEvent
from app.models.essay import EssayPrompt, EssaySubmission
from app.models.university import Program, University
from app.models.user import User


class EntityStore(ABC):
    """Read-only contract for fetching timeline source records."""
    
    @abstractmethod
    def find_user(self, user_id: UUID) -> Optional[User]:
        """Active user by id, or None."""
    
    @abstractmethod
    def find_university(self, slug: str) -> Optional[University]:
        """Active university by slug, or None."""
    
    @abstractmethod
    def find_programs(self, university_id: UUID, degree_type: Optional[str] = None) -> List[Program]:
        """Active programs of a university, optionally of one degree type."""
    
    @abstractmethod
    def find_admissions(self, university_id: UUID) -> List[Admission]:
        """Active admissions of a university."""
    
    @abstractmethod
    def find_deadlines(self, admission_ids: Sequence[UUID]) -> List[Deadline]:
        """Active deadlines of the given admissions."""
    
    @abstractmethod
    def find_calendar_events(self, user_id: UUID, university_id: UUID) -> List[CalendarEvent]:
        """Visible calendar events of a user for a university."""
    
    @abstractmethod
    def find_essay_prompts(self, program_ids: Sequence[UUID]) -> List[EssayPrompt]:
        """Active essay prompts of the given programs."""
    
    @abstractmethod
    def find_submissions(self, user_id: UUID, prompt_ids: Sequence[UUID]) -> List[EssaySubmission]:
        """A user's submissions for the given prompts."""


class SqlAlchemyEntityStore(EntityStore):
    """
    EntityStore backed by a SQLAlchemy session.
    
    Every query returns a deterministic order so that repeated
    aggregations over unchanged data produce identical views.
    """
    
    def __init__(self, db: Session):
        """
        Initialize entity store.
        
        Args:
            db: Database session
        """
        self.db = db
    
    def find_user(self, user_id: UUID) -> Optional[User]:
        return self.db.query(User).filter(
            User.id == user_id,
            User.is_active.is_(True)
        ).first()
    
    def find_university(self, slug: str) -> Optional[University]:
        return self.db.query(University).filter(
            University.slug == slug,
            University.is_active.is_(True)
        ).first()
    
    def find_programs(self, university_id: UUID, degree_type: Optional[str] = None) -> List[Program]:
        query = self.db.query(Program).filter(
            Program.university_id == university_id,
            Program.is_active.is_(True)
        )
        if degree_type:
            query = query.filter(func.lower(Program.degree_type) == degree_type.lower())
        return query.order_by(Program.program_name.asc(), Program.id.asc()).all()
    
    def find_admissions(self, university_id: UUID) -> List[Admission]:
        return self.db.query(Admission).filter(
            Admission.university_id == university_id,
            Admission.is_active.is_(True)
        ).order_by(Admission.created_at.asc(), Admission.id.asc()).all()
    
    def find_deadlines(self, admission_ids: Sequence[UUID]) -> List[Deadline]:
        if not admission_ids:
            return []
        return self.db.query(Deadline).filter(
            Deadline.admission_id.in_(list(admission_ids)),
            Deadline.is_active.is_(True)
        ).order_by(Deadline.deadline_date.asc(), Deadline.id.asc()).all()
    
    def find_calendar_events(self, user_id: UUID, university_id: UUID) -> List[CalendarEvent]:
        return self.db.query(CalendarEvent).options(
            joinedload(CalendarEvent.university),
            joinedload(CalendarEvent.program),
            joinedload(CalendarEvent.application),
            joinedload(CalendarEvent.deadline),
            joinedload(CalendarEvent.interview),
            joinedload(CalendarEvent.scholarship),
            selectinload(CalendarEvent.reminders),
        ).filter(
            CalendarEvent.user_id == user_id,
            CalendarEvent.university_id == university_id,
            CalendarEvent.is_visible.is_(True)
        ).order_by(CalendarEvent.start_date.asc(), CalendarEvent.id.asc()).all()
    
    def find_essay_prompts(self, program_ids: Sequence[UUID]) -> List[EssayPrompt]:
        if not program_ids:
            return []
        return self.db.query(EssayPrompt).join(
            Program, EssayPrompt.program_id == Program.id
        ).options(
            joinedload(EssayPrompt.program)
        ).filter(
            EssayPrompt.program_id.in_(list(program_ids)),
            EssayPrompt.is_active.is_(True)
        ).order_by(
            Program.program_name.asc(),
            EssayPrompt.created_at.asc(),
            EssayPrompt.id.asc()
        ).all()
    
    def find_submissions(self, user_id: UUID, prompt_ids: Sequence[UUID]) -> List[EssaySubmission]:
        if not prompt_ids:
            return []
        return self.db.query(EssaySubmission).filter(
            EssaySubmission.user_id == user_id,
            EssaySubmission.essay_prompt_id.in_(list(prompt_ids))
        ).order_by(EssaySubmission.essay_prompt_id.asc()).all()
