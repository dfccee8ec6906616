"""
Remembear - Schedule

Stateless weekly schedules with rotating assignees.
"""
from .models import Schedule, Weekday, WeeklyTimes, as_utc
from .iso_week import (
    ScheduleError,
    InvalidStartWeekError,
    start_of_iso_week,
    start_of_this_week,
)

__all__ = [
    "Schedule",
    "Weekday",
    "WeeklyTimes",
    "as_utc",
    "ScheduleError",
    "InvalidStartWeekError",
    "start_of_iso_week",
    "start_of_this_week",
]
