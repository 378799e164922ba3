"""
Clock utilities for cache freshness and date keys.

Freshness is always measured on a monotonic clock so wall-clock adjustments
can neither expire nor resurrect cache entries.
"""

import re
import time
from datetime import date, datetime
from typing import Callable, Union

Clock = Callable[[], float]

# Extended (YYYY-MM-DD) or basic (YYYYMMDD) day, optionally followed by a time
DATE_ID_PATTERN = re.compile(
    r"(?P<year>\d{4})(?P<sep>-?)(?P<month>\d{2})(?P=sep)(?P<day>\d{2})"
    r"(?:T\d{2}:\d{2}(?::\d{2}(?:\.\d{1,6})?)?(?:Z|[+-]\d{2}:\d{2})?)?$"
)


def monotonic_now() -> float:
    """Default clock: seconds from an arbitrary, never-decreasing origin."""
    return time.monotonic()


def elapsed_seconds(since: float, now: float) -> float:
    """
    Seconds elapsed between two readings of the same clock.

    Args:
        since: Earlier clock reading
        now: Later clock reading

    Returns:
        Elapsed seconds, never negative
    """
    return max(0.0, now - since)


class ManualClock:
    """Substitutable clock advanced explicitly by the caller."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        """Move the clock forward and return the new reading."""
        if seconds < 0:
            raise ValueError("clock cannot move backwards")
        self.now += seconds
        return self.now


def to_date_key(value: Union[str, date, datetime]) -> str:
    """
    Convert a document id or date object into a "YYYY-MM-DD" key.

    Keys in this format sort lexicographically in chronological order.

    Accepted document ids:
        2024-10-21                  extended calendar day
        20241021                    basic calendar day
        2024-10-21T16:00:00[.fff]   timestamp, optional "Z" or +HH:MM offset;
                                    the calendar day is kept as written

    Raises:
        ValueError: if the value is not a valid calendar day
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    match = DATE_ID_PATTERN.match(str(value).strip())
    if match is None:
        raise ValueError(f"unrecognized date id: {value!r}")
    return date(int(match["year"]), int(match["month"]), int(match["day"])).isoformat()
