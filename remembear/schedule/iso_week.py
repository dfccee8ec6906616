"""
Remembear - ISO Week Boundaries

Resolves an ISO week into the start instant a Schedule is anchored to.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from .models import as_utc


class ScheduleError(Exception):
    """Base exception for schedule errors."""
    pass


class InvalidStartWeekError(ScheduleError):
    """The starting week for a schedule does not exist."""

    def __init__(self, year: int, week: int):
        super().__init__(f"Invalid starting week: week {week} of year {year}")
        self.year = year
        self.week = week


def start_of_iso_week(year: int, week: int) -> datetime:
    """
    Midnight UTC on the Monday of an ISO week.

    Args:
        year: ISO year
        week: ISO week number, 1 to 53

    Returns:
        Aware UTC datetime

    Raises:
        InvalidStartWeekError: The year has no such week
    """
    try:
        day = datetime.fromisocalendar(year, week, 1)
    except (ValueError, OverflowError) as e:
        raise InvalidStartWeekError(year, week) from e
    return day.replace(tzinfo=timezone.utc)


def start_of_this_week(now: Optional[datetime] = None) -> datetime:
    """Midnight UTC on the Monday of the ISO week containing `now`."""
    if now is None:
        now = datetime.now(timezone.utc)
    now = as_utc(now)
    monday = now.date() - timedelta(days=now.isoweekday() - 1)
    return datetime(monday.year, monday.month, monday.day, tzinfo=timezone.utc)
