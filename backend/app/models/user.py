"""User model."""
from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.base import BaseModel


class User(Base, BaseModel):
    """
    User model representing applicants tracking their admissions.
    
    Attributes:
        email: Unique email address
        full_name: User's full name
        is_active: Whether the user account is active
        study_level: Preferred degree level (e.g. "masters"), used to filter programs
    """
    
    __tablename__ = "users"
    
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    study_level = Column(String, nullable=True)
    
    # Relationships
    applications = relationship(
        "Application",
        back_populates="user",
        cascade="all, delete-orphan"
    )
    calendar_events = relationship(
        "CalendarEvent",
        back_populates="user",
        cascade="all, delete-orphan"
    )
    essay_submissions = relationship(
        "EssaySubmission",
        back_populates="user",
        cascade="all, delete-orphan"
    )
