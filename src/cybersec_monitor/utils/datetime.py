"""Datetime utilities for consistent timestamp handling."""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(tz=timezone.utc)


def format_iso(dt: Optional[datetime] = None) -> str:
    """Format datetime as ISO 8601 string.

    Args:
        dt: datetime object, or None for current time

    Returns:
        ISO 8601 formatted string
    """
    if dt is None:
        dt = utc_now()
    return dt.isoformat()


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 string back into a datetime (None passes through)."""
    if not value:
        return None
    return datetime.fromisoformat(value)


def to_millis(dt: datetime) -> int:
    """Convert a datetime to Unix milliseconds."""
    return int(dt.timestamp() * 1000)
