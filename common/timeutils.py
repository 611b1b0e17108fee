"""
Time utilities: UTC now, ISO string to datetime, timestamp profile check.

All functions use timezone-aware UTC datetimes.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

# 4-digit year, 2-digit month/day, T separator, HH:MM:SS, optional fraction,
# and a Z or +/-HH:MM offset.
_TIMESTAMP_RE = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})",
    re.ASCII,
)


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def iso_to_dt(s: str) -> datetime:
    """
    Parse ISO 8601 string to timezone-aware datetime.
    Assumes UTC if no timezone in string (e.g. suffix Z or +00:00).

    >>> dt = iso_to_dt("2024-02-15T10:30:00.000000Z")
    >>> dt.tzinfo is not None
    True
    >>> iso_to_dt("2024-02-15T10:30:00").tzinfo == timezone.utc
    True
    """
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def is_valid_timestamp(s: str) -> bool:
    """
    True if s matches the date-time profile and names a real instant.

    >>> is_valid_timestamp("2024-02-15T10:30:00Z")
    True
    >>> is_valid_timestamp("2024-02-15T10:30:00.123+05:30")
    True
    >>> is_valid_timestamp("2024-02-30T10:30:00Z")
    False
    >>> is_valid_timestamp("2024-02-15 10:30:00Z")
    False
    >>> is_valid_timestamp("2024-02-15T10:30:00")
    False
    """
    if not _TIMESTAMP_RE.fullmatch(s):
        return False
    try:
        iso_to_dt(s)
    except ValueError:
        return False
    return True
