"""Shared column mixin for all models."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Uuid


def utcnow() -> datetime:
    """Timezone-aware current UTC time for column defaults."""
    return datetime.now(timezone.utc)


class BaseModel:
    """
    Mixin providing the primary key and audit timestamps.

    Attributes:
        id: UUID primary key
        created_at: Row creation time (UTC)
        updated_at: Last modification time (UTC)
    """

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    def __repr__(self):
        return f"<{self.__class__.__name__}(id='{self.id}')>"
