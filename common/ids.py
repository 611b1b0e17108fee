"""
ID generation and timestamp utilities.

Provides new_order_id(), new_notification_id(), and now_iso() with
deterministic UTC ISO 8601 formatting. IDs are ULIDs, so they sort by
creation time.
"""

from __future__ import annotations

from datetime import datetime, timezone

from ulid import ULID


def new_order_id() -> str:
    """
    Generate a new order ID (ULID, lexicographically sortable).

    >>> id_ = new_order_id()
    >>> isinstance(id_, str) and len(id_) == 26
    True
    >>> new_order_id() != new_order_id()
    True
    """
    return str(ULID())


def new_notification_id() -> str:
    """
    Generate an ID for one analytics publish attempt. Same strategy as
    new_order_id().

    >>> len(new_notification_id())
    26
    """
    return str(ULID())


def now_iso() -> str:
    """
    Return current UTC time as ISO 8601 string with Z suffix.
    Deterministic format: YYYY-MM-DDTHH:MM:SS.ffffffZ

    Strings in this format compare lexicographically in chronological order.

    >>> s = now_iso()
    >>> s.endswith('Z') and 'T' in s and len(s) == 27
    True
    """
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
