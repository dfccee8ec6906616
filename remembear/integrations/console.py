"""
Console Integration

Writes triggered reminders as single lines to a text stream.
"""

import sys
from datetime import datetime
from typing import Dict, Optional, Sequence, TextIO

from .base import Integration, IntegrationError
from ..reminders import Reminder
from ..schedule import as_utc
from ..users import User


class ConsoleIntegration(Integration):
    """
    Prints reminders to the console.

    Output format:
        [2020-01-01 00:01:02 +0000] Reminder: Laura, Donna

    Each user may have a color preference; unknown colors are ignored.
    """

    name = "console"

    COLORS = {
        "black": "\033[30m",
        "red": "\033[31m",
        "green": "\033[32m",
        "yellow": "\033[33m",
        "blue": "\033[34m",
        "magenta": "\033[35m",
        "cyan": "\033[36m",
        "white": "\033[37m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        colors: Optional[Dict[int, str]] = None,
    ):
        """
        Initialize console integration.

        Args:
            stream: Output stream (default: stdout at notify time)
            colors: user uid -> color name
        """
        self._stream = stream
        self._colors = dict(colors or {})

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def set_color(self, uid: int, color: str) -> None:
        """Set the color preference for a user."""
        self._colors[uid] = color

    def remove_color(self, uid: int) -> None:
        """Remove the color preference for a user."""
        self._colors.pop(uid, None)

    def colorize(self, user: User) -> str:
        """User name wrapped in the user's color, if any."""
        code = self.COLORS.get(self._colors.get(user.uid, "").lower())
        if code is None:
            return user.name
        return f"{code}{user.name}{self.RESET}"

    def notify(
        self,
        reminder: Reminder,
        assignees: Sequence[User],
        timestamp: datetime,
    ) -> None:
        names = ", ".join(self.colorize(user) for user in assignees)
        line = f"[{format_timestamp(timestamp)}] {reminder.name}: {names}\n"

        try:
            self.stream.write(line)
            self.stream.flush()
        except (OSError, ValueError) as e:
            raise IntegrationError(f"Failed to write to console: {e}") from e


def format_timestamp(timestamp: datetime) -> str:
    """Human-readable timestamp in the local timezone."""
    return as_utc(timestamp).astimezone().strftime("%Y-%m-%d %H:%M:%S %z")
