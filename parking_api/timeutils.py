"""
Parking API — UTC Helpers
==========================

All timestamps are stored and compared in UTC. PostgreSQL returns aware
datetimes for TIMESTAMP WITH TIME ZONE; SQLite (dev/tests) returns naive ones
holding the same UTC wall-clock value. `as_utc` makes both look the same.
"""

from datetime import date, datetime, time, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max, tzinfo=timezone.utc)
