"""
Time helpers for the Clubhouse team manager.

All timestamps handled by the core are timezone-aware UTC datetimes and are
persisted as ISO-8601 strings.
"""
from datetime import date, datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """
    Get the current time as an aware UTC datetime.

    Returns:
        Current time in UTC
    """
    return datetime.now(timezone.utc)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime to an ISO-8601 string (None passes through)."""
    if value is None:
        return None
    return value.isoformat()


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts the trailing "Z" form written by JavaScript clients. Naive
    values are assumed to be UTC.

    Args:
        value: ISO string, or None

    Returns:
        Parsed datetime, or None when value is empty

    Raises:
        ValueError: If the string is not a valid timestamp
    """
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def day_of(value: datetime) -> str:
    """
    Get the calendar day (YYYY-MM-DD) of a timestamp.

    Example:
        >>> day_of(datetime(2025, 3, 14, 19, 30, tzinfo=timezone.utc))
        '2025-03-14'
    """
    return value.date().isoformat()


def fmt_short_date(value: datetime) -> str:
    """
    Format a timestamp the way invite messages show it.

    Example:
        >>> fmt_short_date(datetime(2025, 3, 14, tzinfo=timezone.utc))
        'Fri, Mar 14'
    """
    return f"{value:%a, %b} {value.day}"


def parse_day(value: Optional[str]) -> Optional[date]:
    """Parse a YYYY-MM-DD day string (None passes through)."""
    if not value:
        return None
    return date.fromisoformat(value[:10])
