"""
UTC timestamp helpers.

The store speaks ISO-8601 strings (``timestamptz`` columns) and plain
``YYYY-MM-DD`` for ``date`` columns; everything in-process is a
timezone-aware :class:`datetime`.
"""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def to_iso8601(dt: datetime | None) -> str | None:
    """Convert datetime to ISO 8601 string."""
    if dt is None:
        return None
    return dt.isoformat()


def from_iso8601(s: str | None) -> datetime | None:
    """Parse an ISO 8601 string; naive values are taken as UTC."""
    if s is None or s == "":
        return None
    dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def parse_date(s: str | None) -> date | None:
    """Parse a ``date`` column, tolerating a full timestamp."""
    if s is None or s == "":
        return None
    return date.fromisoformat(s[:10])
