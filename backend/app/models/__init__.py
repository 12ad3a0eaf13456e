"""
Models Package

Imports all SQLAlchemy models for application use.
"""

from app.models.base import BaseModel
from app.models.user import User
from app.models.university import University, Program, Scholarship
from app.models.admission import Admission, Deadline
from app.models.application import Application, Interview
from app.models.calendar_event import (
    CalendarEvent,
    Reminder,
    EventType,
    CompletionStatus,
)
from app.models.essay import EssayPrompt, EssaySubmission, EssayStatus

__all__ = [
    'BaseModel',
    'User',
    'University',
    'Program',
    'Scholarship',
    'Admission',
    'Deadline',
    'Application',
    'Interview',
    'CalendarEvent',
    'Reminder',
    'EventType',
    'CompletionStatus',
    'EssayPrompt',
    'EssaySubmission',
    'EssayStatus',
]
