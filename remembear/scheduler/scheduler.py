"""
Remembear - Scheduler Service

Real-time loop that fires reminders when they come due.
"""
import asyncio
import time
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .errors import AssigneeLookupError, ConsistencyError, TimerError
from .queue import ReminderQueue, ScheduledReminder
from ..config import get_logger
from ..integrations import FanOutResult, Integration, IntegrationManager
from ..reminders import Reminder
from ..schedule import Schedule
from ..users import UserProvider

logger = get_logger("scheduler")

# Smallest step past an occurrence, so it is never fired twice
RESOLUTION = timedelta(microseconds=1)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Scheduler:
    """
    Scheduler - fires reminders at their next occurrence.

    States:
        idle    - nothing queued, run() returns
        armed   - waiting for the earliest due reminder
        firing  - notifying integrations and re-arming

    Operations:
        - next(): Wait for and process the next due reminder
        - run(): Process reminders until the queue is empty
    """

    def __init__(
        self,
        reminders: Iterable[Reminder],
        users: Optional[UserProvider] = None,
        integrations: Union[IntegrationManager, Sequence[Integration], None] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = utc_now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize Scheduler.

        Args:
            reminders: Reminders to track, loaded once
            users: Lookup for resolving assignees (required with integrations)
            integrations: Sinks notified when a reminder fires
            clock: Monotonic clock in seconds
            now: Current wall-clock time (UTC)
            sleep: Timer wait primitive

        Raises:
            ValueError: Integrations given without a user lookup
        """
        if not isinstance(integrations, IntegrationManager):
            integrations = IntegrationManager(integrations or ())
        if integrations and users is None:
            raise ValueError("A user provider is required to notify integrations")

        self._users = users
        self._integrations = integrations
        self._clock = clock
        self._now = now
        self._sleep = sleep
        self._queue = ReminderQueue()

        for reminder in reminders:
            entry = self._queue.add(reminder)
            self._arm(entry)

    # ==================== QUERIES ====================

    @property
    def reminders(self) -> Dict[int, Reminder]:
        """All tracked reminders by uid, dormant ones included."""
        return {entry.reminder.uid: entry.reminder for entry in self._queue}

    @property
    def integrations(self) -> IntegrationManager:
        return self._integrations

    def pending(self) -> List[Tuple[int, Optional[datetime]]]:
        """(uid, due instant) of queued reminders, earliest first."""
        return self._queue.pending()

    def is_idle(self) -> bool:
        return self._queue.is_empty()

    # ==================== PROCESSING ====================

    async def next(self, stop_event: Optional[asyncio.Event] = None) -> Optional[int]:
        """
        Process the next scheduled reminder.

        Applications will likely want to call run() instead.

        Args:
            stop_event: Ends the wait early without firing when set

        Returns:
            uid of the fired reminder, or None when idle or stopped

        Raises:
            TimerError: The timer wait failed
            ConsistencyError: A queued uid is not tracked
            AssigneeLookupError: The assignee could not be resolved
        """
        head = self._queue.peek()
        if head is None:
            return None
        if stop_event is not None and stop_event.is_set():
            return None

        _, deadline = head
        if not await self._wait_until(deadline, stop_event):
            return None

        uid = self._queue.pop()
        entry = self._queue.get(uid)
        if entry is None:
            raise ConsistencyError(uid)

        fired_at = self._now()
        if entry.due_at is not None and fired_at < entry.due_at:
            fired_at = entry.due_at

        logger.info(f"Reminder {uid} ({entry.reminder.name}) is due")

        if self._integrations:
            self._notify(entry.reminder, fired_at)

        self._arm(entry, after=fired_at)
        return uid

    async def run(self, stop_event: Optional[asyncio.Event] = None) -> None:
        """
        Run for as long as there are scheduled reminders.

        Args:
            stop_event: Stops the loop at its next wait when set

        Raises:
            SchedulerError: See next()
        """
        while await self.next(stop_event) is not None:
            pass

        if self.is_idle():
            logger.info("Scheduler queue is empty")
        else:
            logger.info("Scheduler stopped with reminders still queued")

    # ==================== HELPERS ====================

    def _notify(self, reminder: Reminder, fired_at: datetime) -> FanOutResult:
        """Resolve the assignee and notify every integration."""
        assignee_uid = reminder.schedule.get_assignee(fired_at)
        try:
            assignee = self._users.get_by_uid(assignee_uid)
        except Exception as e:
            raise AssigneeLookupError(reminder.uid, assignee_uid) from e

        result = self._integrations.notify_all(reminder, [assignee], fired_at)
        if result.failed:
            logger.warning(f"Reminder {reminder.uid}: {result.summary()}")
        else:
            logger.debug(f"Reminder {reminder.uid}: {result.summary()}")
        return result

    def _arm(self, entry: ScheduledReminder, after: Optional[datetime] = None) -> None:
        """Queue the reminder's next occurrence, or leave it dormant."""
        uid = entry.reminder.uid
        due = self._next_due(entry.reminder.schedule, after)
        if due is None:
            self._queue.park(uid)
            logger.info(f"Reminder {uid} has no upcoming occurrences")
            return

        deadline, due_at = due
        self._queue.rearm(uid, deadline, due_at)
        logger.debug(f"Reminder {uid} armed for {due_at.isoformat()}")

    def _next_due(
        self,
        schedule: Schedule,
        after: Optional[datetime] = None,
    ) -> Optional[Tuple[float, datetime]]:
        """
        Next (monotonic deadline, wall instant) for a schedule.

        Args:
            schedule: Schedule to query
            after: Occurrence just fired; the search starts past it
        """
        now = self._now()
        reference = now
        if after is not None and reference <= after:
            reference = after + RESOLUTION

        duration = schedule.get_next_duration(reference)
        if duration is None:
            return None

        due_at = reference + duration
        delay = max((due_at - now).total_seconds(), 0.0)
        return self._clock() + delay, due_at

    async def _wait_until(
        self,
        deadline: float,
        stop_event: Optional[asyncio.Event] = None,
    ) -> bool:
        """
        Wait until the monotonic deadline.

        Returns:
            False if stop_event was set first, True otherwise

        Raises:
            TimerError: The sleep primitive failed
        """
        delay = max(deadline - self._clock(), 0.0)

        if stop_event is None:
            try:
                await self._sleep(delay)
            except Exception as e:
                raise TimerError(f"Timer failed while reminders were queued: {e}") from e
            return True

        sleeper = None
        stopper = asyncio.ensure_future(stop_event.wait())
        try:
            sleeper = asyncio.ensure_future(self._sleep(delay))
            await asyncio.wait({sleeper, stopper}, return_when=asyncio.FIRST_COMPLETED)
        except Exception as e:
            raise TimerError(f"Timer failed while reminders were queued: {e}") from e
        finally:
            for task in (sleeper, stopper):
                if task is not None and not task.done():
                    task.cancel()

        if stopper.done() and not stopper.cancelled():
            return False

        try:
            sleeper.result()
        except Exception as e:
            raise TimerError(f"Timer failed while reminders were queued: {e}") from e
        return True
