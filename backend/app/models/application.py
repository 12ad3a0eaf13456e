"""Application and Interview models."""
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.base import BaseModel


class Application(Base, BaseModel):
    """
    A user's application to a program.
    
    Attributes:
        user_id: Applicant
        university_id: Target university
        program_id: Target program (optional)
        applicant_name: Name as written on the application
        application_status: Free-text status kept by the write path
    """
    
    __tablename__ = "applications"
    
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    university_id = Column(
        Uuid,
        ForeignKey("universities.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    program_id = Column(
        Uuid,
        ForeignKey("programs.id", ondelete="SET NULL"),
        nullable=True
    )
    applicant_name = Column(String, nullable=True)
    application_status = Column(String, nullable=True)
    
    # Relationships
    user = relationship("User", back_populates="applications")
    interviews = relationship(
        "Interview",
        back_populates="application",
        cascade="all, delete-orphan"
    )


class Interview(Base, BaseModel):
    """
    Admission interview scheduled for an application.
    
    Attributes:
        application_id: Application being interviewed for
        interview_type: e.g. "video", "on-campus", "phone"
        scheduled_at: Interview start
        duration_minutes: Planned length
        location: Room, address or meeting link
    """
    
    __tablename__ = "interviews"
    
    application_id = Column(
        Uuid,
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    interview_type = Column(String, nullable=True)
    scheduled_at = Column(DateTime(timezone=True), nullable=True)
    duration_minutes = Column(Integer, nullable=True)
    location = Column(String, nullable=True)
    
    application = relationship("Application", back_populates="interviews")
