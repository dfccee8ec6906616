"""
Remembear - Scheduler Errors
"""


class SchedulerError(Exception):
    """Base exception for real-time scheduler failures."""
    pass


class TimerError(SchedulerError):
    """The timer wait failed while reminders were queued."""
    pass


class ConsistencyError(SchedulerError):
    """A queued reminder uid has no tracked reminder."""

    def __init__(self, uid: int):
        super().__init__(f"Reminder {uid} was scheduled but is not tracked by the scheduler")
        self.uid = uid


class AssigneeLookupError(SchedulerError):
    """The on-duty assignee could not be resolved to a user."""

    def __init__(self, reminder_uid: int, assignee_uid: int):
        super().__init__(
            f"Failed to resolve assignee {assignee_uid} for reminder {reminder_uid}"
        )
        self.reminder_uid = reminder_uid
        self.assignee_uid = assignee_uid
