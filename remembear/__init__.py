"""
Remembear

Recurring weekly reminders with rotating assignees.
"""
from .reminders import Reminder
from .schedule import Schedule, Weekday, WeeklyTimes
from .scheduler import Scheduler
from .users import User, UserDirectory

__version__ = "0.1.0"

__all__ = [
    "Reminder",
    "Schedule",
    "Weekday",
    "WeeklyTimes",
    "Scheduler",
    "User",
    "UserDirectory",
]
