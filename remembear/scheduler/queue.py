"""
Remembear - Reminder Queue

Tracked reminders and their due order, kept together so the index
and the heap never disagree.
"""
import heapq
import itertools
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Tuple

from ..reminders import Reminder


@dataclass
class ScheduledReminder:
    """A tracked reminder and its current place in the queue."""
    reminder: Reminder
    key: Optional[int] = None           # heap sequence, None when not queued
    deadline: Optional[float] = None    # monotonic clock seconds
    due_at: Optional[datetime] = None   # wall-clock instant of the occurrence

    @property
    def is_queued(self) -> bool:
        return self.key is not None


class ReminderQueue:
    """
    Index of uid -> ScheduledReminder plus a min-heap of due deadlines.

    Heap entries are (deadline, sequence, uid); the sequence makes ties
    pop in insertion order and doubles as the queue key. Re-arming a
    reminder invalidates its previous key, and stale heap entries are
    dropped lazily.
    """

    def __init__(self):
        self._entries: Dict[int, ScheduledReminder] = {}
        self._heap: List[Tuple[float, int, int]] = []
        self._sequence = itertools.count()

    def add(
        self,
        reminder: Reminder,
        deadline: Optional[float] = None,
        due_at: Optional[datetime] = None,
    ) -> ScheduledReminder:
        """Track a reminder, queueing it when a deadline is given."""
        entry = ScheduledReminder(reminder=reminder)
        self._entries[reminder.uid] = entry
        if deadline is not None:
            self.rearm(reminder.uid, deadline, due_at)
        return entry

    def rearm(self, uid: int, deadline: float, due_at: Optional[datetime] = None) -> int:
        """
        Queue a tracked reminder for a new deadline.

        Returns:
            New queue key

        Raises:
            KeyError: uid is not tracked
        """
        entry = self._entries[uid]
        key = next(self._sequence)
        heapq.heappush(self._heap, (deadline, key, uid))
        entry.key = key
        entry.deadline = deadline
        entry.due_at = due_at
        return key

    def park(self, uid: int) -> None:
        """Leave a tracked reminder out of the queue for good."""
        entry = self._entries[uid]
        entry.key = None
        entry.deadline = None
        entry.due_at = None

    def _drop_stale(self) -> None:
        while self._heap:
            _, key, uid = self._heap[0]
            entry = self._entries.get(uid)
            # Untracked uids stay so the caller sees the inconsistency
            if entry is None or entry.key == key:
                return
            heapq.heappop(self._heap)

    def peek(self) -> Optional[Tuple[int, float]]:
        """(uid, deadline) of the earliest entry, or None when empty."""
        self._drop_stale()
        if not self._heap:
            return None
        deadline, _, uid = self._heap[0]
        return uid, deadline

    def pop(self) -> int:
        """
        Remove the earliest entry and return its uid.

        Raises:
            IndexError: Queue is empty
        """
        self._drop_stale()
        _, _, uid = heapq.heappop(self._heap)
        entry = self._entries.get(uid)
        if entry is not None:
            entry.key = None
        return uid

    def get(self, uid: int) -> Optional[ScheduledReminder]:
        return self._entries.get(uid)

    def pending(self) -> List[Tuple[int, Optional[datetime]]]:
        """(uid, due_at) of queued reminders in due order."""
        queued = [entry for entry in self._entries.values() if entry.is_queued]
        queued.sort(key=lambda entry: (entry.deadline, entry.key))
        return [(entry.reminder.uid, entry.due_at) for entry in queued]

    def __contains__(self, uid: int) -> bool:
        return uid in self._entries

    def __iter__(self) -> Iterator[ScheduledReminder]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        """True when nothing is queued, dormant reminders aside."""
        return self.peek() is None
