"""Calendar clock utilities.

Label histories are tracked at day resolution.  This module is the single
source of "today" so tests can monkey-patch it trivially.
"""

from __future__ import annotations

from datetime import date, datetime, timezone


def today() -> date:
    """Return the current UTC calendar date."""
    return datetime.now(timezone.utc).date()


def date_from_timestamp(timestamp: int) -> date:
    """Convert unix seconds to a UTC calendar date.

    Raises:
        ValueError: If the timestamp is outside the representable range.
    """
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc).date()
    except (OverflowError, OSError) as exc:
        raise ValueError(f"timestamp {timestamp} is not a valid date") from exc
