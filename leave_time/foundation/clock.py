"""Clock utilities.

Instants in leave-time are integer seconds since the Unix epoch.  This
module is the single source of "now" so tests can monkey-patch it trivially.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def now_instant() -> int:
    """Return the current time as whole epoch seconds."""
    return int(utc_now().timestamp())


def hour_floor(instant: int) -> int:
    """Truncate an instant to the start of its UTC hour."""
    return instant - instant % 3600
