"""
Remembear - Reminder Model
"""
from dataclasses import dataclass
from typing import Any, Dict

from .schedule import Schedule


@dataclass(frozen=True)
class Reminder:
    """A named reminder with its weekly schedule."""
    uid: int
    name: str
    schedule: Schedule

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"uid": self.uid, "name": self.name, **self.schedule.to_dict()}
