"""CalendarEvent and Reminder models."""
import enum

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.base import BaseModel


class EventType(str, enum.Enum):
    """Subtype of a calendar event."""
    DEADLINE = "deadline"
    EVENT = "event"
    INTERVIEW = "interview"
    SCHOLARSHIP = "scholarship"
    REMINDER = "reminder"


class CompletionStatus(str, enum.Enum):
    """User-set completion state of a calendar event."""
    PENDING = "pending"
    COMPLETED = "completed"
    MISSED = "missed"


class CalendarEvent(Base, BaseModel):
    """
    User- or system-scheduled calendar item.
    
    An event may link to a university, program, application, deadline,
    interview or scholarship. Links only enrich display fields on the
    timeline; they never influence ordering or status.
    
    Attributes:
        user_id: Owner
        university_id: University the event belongs to
        event_type: One of EventType values
        title: Display title
        start_date: Event start; rows without it are skipped by the timeline
        end_date: Optional end
        is_all_day: All-day events display "All Day" instead of a time
        completion_status: One of CompletionStatus values
        completed_at: When the user marked it completed
        priority: "low", "medium" or "high"
        color: Display color
        location: Optional location
        timezone: IANA zone used to display the start time
        is_visible: Hidden events are never returned
        is_system_generated: Created by scheduling logic rather than the user
    """
    
    __tablename__ = "calendar_events"
    
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    university_id = Column(
        Uuid,
        ForeignKey("universities.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )
    program_id = Column(Uuid, ForeignKey("programs.id", ondelete="SET NULL"), nullable=True)
    application_id = Column(Uuid, ForeignKey("applications.id", ondelete="SET NULL"), nullable=True)
    admission_id = Column(Uuid, ForeignKey("admissions.id", ondelete="SET NULL"), nullable=True)
    deadline_id = Column(Uuid, ForeignKey("deadlines.id", ondelete="SET NULL"), nullable=True)
    interview_id = Column(Uuid, ForeignKey("interviews.id", ondelete="SET NULL"), nullable=True)
    scholarship_id = Column(Uuid, ForeignKey("scholarships.id", ondelete="SET NULL"), nullable=True)
    
    event_type = Column(String, nullable=False, default=EventType.EVENT.value)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(DateTime(timezone=True), nullable=True, index=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    is_all_day = Column(Boolean, default=False, nullable=False)
    completion_status = Column(String, nullable=False, default=CompletionStatus.PENDING.value)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    priority = Column(String, nullable=False, default="medium")
    color = Column(String, nullable=True)
    location = Column(String, nullable=True)
    timezone = Column(String, nullable=True)
    is_visible = Column(Boolean, default=True, nullable=False)
    is_system_generated = Column(Boolean, default=False, nullable=False)
    
    # Relationships
    user = relationship("User", back_populates="calendar_events")
    university = relationship("University")
    program = relationship("Program")
    application = relationship("Application")
    admission = relationship("Admission")
    deadline = relationship("Deadline")
    interview = relationship("Interview")
    scholarship = relationship("Scholarship")
    reminders = relationship(
        "Reminder",
        back_populates="calendar_event",
        cascade="all, delete-orphan",
        order_by="Reminder.remind_at"
    )


class Reminder(Base, BaseModel):
    """
    Notification scheduled ahead of a calendar event.
    
    Delivery is owned elsewhere; the timeline only counts active reminders.
    """
    
    __tablename__ = "reminders"
    
    calendar_event_id = Column(
        Uuid,
        ForeignKey("calendar_events.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    remind_at = Column(DateTime(timezone=True), nullable=False)
    reminder_type = Column(String, nullable=False, default="email")
    is_active = Column(Boolean, default=True, nullable=False)
    is_sent = Column(Boolean, default=False, nullable=False)
    
    calendar_event = relationship("CalendarEvent", back_populates="reminders")
