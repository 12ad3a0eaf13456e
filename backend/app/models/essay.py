"""EssayPrompt and EssaySubmission models."""
import enum

from sqlalchemy import (
    Column, String, Text, Integer, Boolean, DateTime, ForeignKey, Uuid, UniqueConstraint
)
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.base import BaseModel


class EssayStatus(str, enum.Enum):
    """Lifecycle status of an essay submission."""
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    SUBMITTED = "submitted"


class EssayPrompt(Base, BaseModel):
    """
    Writing requirement of a program.
    
    Attributes:
        program_id: Owning program
        prompt_title: Short title
        prompt_text: Full prompt
        word_limit: Maximum words; progress is measured against it
        min_word_count: Minimum words
        is_mandatory: Whether the essay is required
        is_active: Inactive prompts are never returned
    """
    
    __tablename__ = "essay_prompts"
    
    program_id = Column(
        Uuid,
        ForeignKey("programs.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    prompt_title = Column(String, nullable=False)
    prompt_text = Column(Text, nullable=True)
    word_limit = Column(Integer, nullable=True)
    min_word_count = Column(Integer, nullable=True)
    is_mandatory = Column(Boolean, default=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    
    # Relationships
    program = relationship("Program", back_populates="essay_prompts")
    submissions = relationship(
        "EssaySubmission",
        back_populates="essay_prompt",
        cascade="all, delete-orphan"
    )


class EssaySubmission(Base, BaseModel):
    """
    A user's latest attempt at an essay prompt (at most one per user and prompt).
    
    Attributes:
        user_id: Author
        essay_prompt_id: Prompt answered
        content: Essay text
        word_count: Words in content as counted by the editor
        status: One of EssayStatus values
        submission_date: When it was submitted
        last_edited_at: Last edit time
    """
    
    __tablename__ = "essay_submissions"
    __table_args__ = (
        UniqueConstraint("user_id", "essay_prompt_id", name="uq_essay_submission_user_prompt"),
    )
    
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    essay_prompt_id = Column(
        Uuid,
        ForeignKey("essay_prompts.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    content = Column(Text, nullable=False, default="")
    word_count = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=False, default=EssayStatus.IN_PROGRESS.value)
    submission_date = Column(DateTime(timezone=True), nullable=True)
    last_edited_at = Column(DateTime(timezone=True), nullable=True)
    
    # Relationships
    user = relationship("User", back_populates="essay_submissions")
    essay_prompt = relationship("EssayPrompt", back_populates="submissions")
