"""Time helpers.

Timestamps are timezone-aware UTC and stored in TIMESTAMP WITH TIME ZONE
columns. SQLite hands them back naive; `as_utc` reads those as UTC.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Normalize a datetime to aware UTC. Naive values are assumed to be UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def isoformat_utc(dt: datetime) -> str:
    """ISO-8601 with a trailing Z, e.g. 2026-10-18T14:00:00.000Z"""
    return as_utc(dt).isoformat(timespec="milliseconds").replace("+00:00", "Z")
