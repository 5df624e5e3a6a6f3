"""Shared model mixins and helpers."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime


def generate_uuid() -> str:
    """Generate a string UUID primary key."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """Adds created_at/updated_at columns maintained by the ORM."""

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )
