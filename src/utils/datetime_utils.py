"""Datetime utilities for timezone-aware UTC timestamps.

Usage:
    from src.utils.datetime_utils import utc_now, to_iso

    # For SQLAlchemy Column defaults
    created_at = Column(DateTime, default=utc_now)

    # For JSON output
    payload["createdAt"] = to_iso(material.created_at)
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """
    Format a stored timestamp as an ISO-8601 UTC string.

    SQLite drops tzinfo on the round trip, so naive values are treated as UTC.

    Args:
        value: Datetime to format (may be None)

    Returns:
        ISO string such as "2024-05-01T09:30:00+00:00", or None
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()
