"""Admission and Deadline models."""
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.base import BaseModel


class Admission(Base, BaseModel):
    """
    Admission cycle of a university (optionally scoped to one program).
    
    Attributes:
        university_id: Owning university
        program_id: Program this admission applies to, if any
        admission_name: Display name (e.g. "Fall 2025 Intake")
        is_active: Inactive admissions are never returned
    """
    
    __tablename__ = "admissions"
    
    university_id = Column(
        Uuid,
        ForeignKey("universities.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    program_id = Column(
        Uuid,
        ForeignKey("programs.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    admission_name = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    
    # Relationships
    university = relationship("University", back_populates="admissions")
    deadlines = relationship(
        "Deadline",
        back_populates="admission",
        cascade="all, delete-orphan"
    )


class Deadline(Base, BaseModel):
    """
    Formal, institution-defined due date of an admission.
    
    Deadlines are immutable from the timeline's point of view: the
    timeline engine only reads them.
    
    Attributes:
        admission_id: Owning admission
        deadline_type: Kind of deadline (e.g. "application", "document", "fee")
        deadline_date: Due instant; rows without it are skipped by the timeline
        deadline_time: Free-text display time as entered by staff (e.g. "23:59")
        timezone: IANA zone name the deadline is stated in
        title: Display title
        description: Optional description
        priority: "low", "medium" or "high"
        is_extended: Whether the deadline was pushed back
        original_deadline: Due instant before the extension
        is_active: Inactive deadlines are never returned
    """
    
    __tablename__ = "deadlines"
    
    admission_id = Column(
        Uuid,
        ForeignKey("admissions.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    deadline_type = Column(String, nullable=False, default="application")
    deadline_date = Column(DateTime(timezone=True), nullable=True, index=True)
    deadline_time = Column(String, nullable=True)
    timezone = Column(String, nullable=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    priority = Column(String, nullable=False, default="medium")
    is_extended = Column(Boolean, default=False, nullable=False)
    original_deadline = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    
    # Relationships
    admission = relationship("Admission", back_populates="deadlines")
