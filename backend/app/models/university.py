"""University, Program and Scholarship models."""
from sqlalchemy import Column, String, Text, Boolean, Float, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.base import BaseModel


class University(Base, BaseModel):
    """
    University model.
    
    Attributes:
        university_name: Display name
        slug: Unique URL slug
        city: City
        state: State or region (optional)
        country: Country
        average_deadlines: Comma-separated free-text deadline hints (e.g. "Jan 5, Mar 1")
        is_active: Inactive universities are never returned
    """
    
    __tablename__ = "universities"
    
    university_name = Column(String, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    country = Column(String, nullable=True)
    average_deadlines = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    
    # Relationships
    programs = relationship(
        "Program",
        back_populates="university",
        cascade="all, delete-orphan"
    )
    admissions = relationship(
        "Admission",
        back_populates="university",
        cascade="all, delete-orphan"
    )
    scholarships = relationship(
        "Scholarship",
        back_populates="university",
        cascade="all, delete-orphan"
    )


class Program(Base, BaseModel):
    """
    Degree program offered by a university.
    
    Attributes:
        university_id: Owning university
        program_name: Display name
        program_slug: URL slug
        degree_type: Degree level (e.g. "masters", "mba", "phd")
        is_active: Inactive programs are never returned
    """
    
    __tablename__ = "programs"
    
    university_id = Column(
        Uuid,
        ForeignKey("universities.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    program_name = Column(String, nullable=False)
    program_slug = Column(String, nullable=True)
    degree_type = Column(String, nullable=True)
    program_description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    
    # Relationships
    university = relationship("University", back_populates="programs")
    essay_prompts = relationship(
        "EssayPrompt",
        back_populates="program",
        cascade="all, delete-orphan"
    )


class Scholarship(Base, BaseModel):
    """Scholarship offered by a university."""
    
    __tablename__ = "scholarships"
    
    university_id = Column(
        Uuid,
        ForeignKey("universities.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    scholarship_name = Column(String, nullable=False)
    amount = Column(Float, nullable=True)
    currency = Column(String(3), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    
    university = relationship("University", back_populates="scholarships")
