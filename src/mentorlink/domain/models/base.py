"""Shared helpers for domain entities."""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (some drivers drop tzinfo)."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def new_id() -> str:
    """Opaque identifier for persisted entities."""
    return str(uuid4())


def iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
