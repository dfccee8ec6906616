"""
Remembear - Snapshot Models (Pydantic)

Validated input for a one-shot load of users, reminders and
per-user integration preferences.

Example:
    {
      "users": [{"uid": 1, "name": "Laura"}],
      "reminders": [{
        "uid": 1,
        "name": "Take out the bins",
        "schedule": {"mon": ["10:30:00", "22:30:00"], "wed": ["12:30:00"]},
        "start_week": {"year": 2020, "week": 3},
        "assignees": [1]
      }],
      "preferences": {"console": {"1": {"color": "red"}}}
    }
"""

import json
from datetime import datetime, time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from .reminders import Reminder
from .schedule import Schedule, Weekday, start_of_iso_week, start_of_this_week
from .users import User, UserDirectory


class SnapshotError(Exception):
    """The snapshot file could not be loaded."""
    pass


# =============================================================================
# Records
# =============================================================================

class UserRecord(BaseModel):
    """Stored user."""
    uid: int
    name: str = Field(..., min_length=1)

    def to_user(self) -> User:
        return User(uid=self.uid, name=self.name)


class IsoWeekRecord(BaseModel):
    """ISO week a schedule starts in."""
    year: int
    week: int = Field(..., ge=1, le=53)

    def to_datetime(self) -> datetime:
        return start_of_iso_week(self.year, self.week)


class ReminderRecord(BaseModel):
    """Stored reminder with its weekly times keyed by day name."""
    uid: int
    name: str = Field(..., min_length=1)
    schedule: Dict[str, List[time]] = Field(default_factory=dict)
    start_week: Optional[IsoWeekRecord] = None
    assignees: List[int] = Field(..., min_length=1)

    @field_validator("schedule")
    @classmethod
    def check_day_names(cls, value: Dict[str, List[time]]) -> Dict[str, List[time]]:
        days = [Weekday.parse(name) for name in value]
        if len(set(days)) != len(days):
            raise ValueError("each weekday may appear only once")
        return value

    def to_reminder(self, today: Optional[datetime] = None) -> Reminder:
        """
        Build the Reminder.

        Times are sorted per day. Without a start week the schedule
        starts in the week containing `today`.

        Raises:
            InvalidStartWeekError: start_week does not exist
        """
        weekly_times = {
            Weekday.parse(name): sorted(times)
            for name, times in self.schedule.items()
        }
        if self.start_week is not None:
            start_date = self.start_week.to_datetime()
        else:
            start_date = start_of_this_week(today)

        return Reminder(
            uid=self.uid,
            name=self.name,
            schedule=Schedule(
                weekly_times=weekly_times,
                start_date=start_date,
                assignees=tuple(self.assignees),
            ),
        )


class Snapshot(BaseModel):
    """Everything the scheduler needs at start-up."""
    users: List[UserRecord] = Field(default_factory=list)
    reminders: List[ReminderRecord] = Field(default_factory=list)
    # integration name -> user uid -> preference key -> value
    preferences: Dict[str, Dict[int, Dict[str, Any]]] = Field(default_factory=dict)

    def user_directory(self) -> UserDirectory:
        return UserDirectory(record.to_user() for record in self.users)

    def to_reminders(self, today: Optional[datetime] = None) -> List[Reminder]:
        return [record.to_reminder(today) for record in self.reminders]


def load_snapshot(path: Union[str, Path]) -> Snapshot:
    """
    Load and validate a snapshot file.

    Args:
        path: JSON file path

    Returns:
        Validated Snapshot

    Raises:
        SnapshotError: Missing file, invalid JSON or failed validation
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SnapshotError(f"Failed to read snapshot {path}: {e}") from e

    try:
        return Snapshot.model_validate(json.loads(raw))
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Invalid JSON in snapshot {path}: {e}") from e
    except ValidationError as e:
        raise SnapshotError(f"Invalid snapshot {path}: {e}") from e
