"""
Base Integration

Abstract base class for all notification integrations.
Each external service (console, chat, e-mail) implements this interface.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Sequence

from ..reminders import Reminder
from ..users import User


class IntegrationError(Exception):
    """Base exception for integration errors."""
    pass


class Integration(ABC):
    """
    Abstract base class for notification integrations.

    Each integration implements:
    - A unique name used in settings and logs
    - Delivery of a triggered reminder to its service

    Usage:
        console = ConsoleIntegration()
        console.notify(reminder, [user], timestamp)
    """

    # Integration metadata (override in subclass)
    name: str = "base"

    @abstractmethod
    def notify(
        self,
        reminder: Reminder,
        assignees: Sequence[User],
        timestamp: datetime,
    ) -> None:
        """
        Notify the service of a triggered reminder.

        Args:
            reminder: The reminder that fired
            assignees: Users on duty for this occurrence
            timestamp: When the reminder fired (UTC)

        Raises:
            Exception: Delivery failed; callers isolate the failure
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.name!r})>"
