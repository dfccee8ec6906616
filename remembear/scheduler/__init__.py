"""
Remembear - Scheduler

Real-time delivery loop for weekly reminders.
"""
from .errors import SchedulerError, TimerError, ConsistencyError, AssigneeLookupError
from .queue import ReminderQueue, ScheduledReminder
from .scheduler import Scheduler, utc_now

__all__ = [
    "Scheduler",
    "ReminderQueue",
    "ScheduledReminder",
    "SchedulerError",
    "TimerError",
    "ConsistencyError",
    "AssigneeLookupError",
    "utc_now",
]
