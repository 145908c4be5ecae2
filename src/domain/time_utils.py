"""
domain.time_utils - Canonical timestamp handling.

All stored timestamps are timezone-aware UTC ISO-8601 strings with
microsecond precision, so they compare correctly as plain text in SQL.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from domain.exceptions import InvalidActionError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    """Serialize *dt* in the canonical stored format. Naive values are UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="microseconds")


def utcnow_iso() -> str:
    return to_iso(utcnow())


def days_ago_iso(days: int) -> str:
    return to_iso(utcnow() - timedelta(days=days))


def parse_iso_datetime(value: Optional[str]) -> Optional[str]:
    """Normalize a caller-supplied date or datetime to the stored format.

    - None / "" -> None
    - "YYYY-MM-DD" -> midnight UTC of that day
    - naive datetimes are interpreted as UTC, "Z" suffix accepted
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        raise InvalidActionError(
            f'Invalid date "{value}". Use the YYYY-MM-DD format.'
        ) from None
    return to_iso(dt)
