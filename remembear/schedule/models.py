"""
Remembear - Schedule Models

Stateless weekly schedule with a rotating list of assignees.

The on-duty assignee and the wait until the next occurrence are both
derived from the clock alone, so no rotation counter is ever stored.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from enum import IntEnum
from itertools import takewhile
from typing import Dict, List, Optional, Sequence


# Ceiling used for saturating occurrence arithmetic (unsigned 64-bit)
MAX_COUNT = 2 ** 64 - 1

WEEK = timedelta(days=7)


class Weekday(IntEnum):
    """Day of the week, numbered from Monday = 1."""
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    @classmethod
    def parse(cls, value: str) -> "Weekday":
        """
        Parse a day name such as "mon", "Monday" or "WED".

        Raises:
            ValueError: Unknown day name
        """
        name = value.strip().lower()
        for day in cls:
            full = day.name.lower()
            if name == full or (len(name) >= 3 and full.startswith(name)):
                return day
        raise ValueError(f"Unknown weekday: {value!r}")

    @classmethod
    def of(cls, moment: datetime) -> "Weekday":
        """Weekday of a datetime."""
        return cls(moment.isoweekday())

    @property
    def short_name(self) -> str:
        return self.name[:3].lower()


# Weekday -> times of day, each list sorted ascending
WeeklyTimes = Dict[Weekday, List[time]]


def as_utc(moment: datetime) -> datetime:
    """Convert to UTC, treating naive datetimes as already UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def time_of_day(value: time) -> timedelta:
    """Offset of a time of day from midnight."""
    return timedelta(
        hours=value.hour,
        minutes=value.minute,
        seconds=value.second,
        microseconds=value.microsecond,
    )


def _saturating_add(a: int, b: int) -> int:
    return min(a + b, MAX_COUNT)


def _saturating_mul(a: int, b: int) -> int:
    return min(a * b, MAX_COUNT)


@dataclass(frozen=True)
class Schedule:
    """
    Recurring weekly schedule.

    Attributes:
        weekly_times: Scheduled times of day per weekday. Each day's list
            must be sorted ascending; unsorted input silently miscounts.
        start_date: Midnight UTC on the Monday of the starting ISO week.
        assignees: Assignee ids in order of assignment.
    """
    weekly_times: WeeklyTimes
    start_date: datetime
    assignees: Sequence[int]

    def get_assignee(self, now: datetime) -> int:
        """
        Determine who is on duty at the given instant.

        The N-th occurrence since the start week belongs to
        assignees[(N - 1) % len(assignees)]. Instants before the start
        week count as the maximum number of elapsed weeks.

        Args:
            now: Instant to evaluate

        Returns:
            Assignee id
        """
        now = as_utc(now)

        elapsed_weeks = _elapsed_weeks(as_utc(self.start_date).date(), now.date())

        times_in_full_week = sum(len(times) for times in self.weekly_times.values())

        this_week_day = Weekday.of(now)
        current = now.time().replace(tzinfo=None)
        times_in_this_week = 0
        for week_day, times in self.weekly_times.items():
            if week_day < this_week_day:
                times_in_this_week += len(times)
            elif week_day == this_week_day:
                times_in_this_week += sum(1 for _ in takewhile(lambda t: t <= current, times))

        occurrences = _saturating_add(
            _saturating_mul(elapsed_weeks, times_in_full_week),
            times_in_this_week,
        )
        index = max(occurrences - 1, 0)

        return self.assignees[index % len(self.assignees)]

    def get_next_duration(self, now: datetime) -> Optional[timedelta]:
        """
        Time until the next scheduled occurrence at or after `now`.

        Wraps into the following week when nothing is left this week.

        Args:
            now: Instant to measure from

        Returns:
            Non-negative duration, or None if nothing is ever scheduled
        """
        now = as_utc(now)
        this_week_day = Weekday.of(now)
        current = time_of_day(now.time())

        scheduled = sorted(day for day, times in self.weekly_times.items() if times)
        if not scheduled:
            return None

        candidate = None
        for day in scheduled:
            if day > this_week_day:
                candidate = day
                break
            if day == this_week_day and any(
                time_of_day(t) >= current for t in self.weekly_times[day]
            ):
                candidate = day
                break

        wrapped = candidate is None
        if wrapped:
            candidate = scheduled[0]

        times = self.weekly_times[candidate]
        first = time_of_day(times[0])

        if candidate == this_week_day:
            if wrapped:
                return WEEK - (current - first)
            upcoming = next(time_of_day(t) for t in times if time_of_day(t) >= current)
            return upcoming - current

        days = (candidate - this_week_day) % 7
        return timedelta(days=days) + (first - current)

    def to_dict(self) -> Dict:
        """Convert to a JSON-friendly dictionary."""
        return {
            "schedule": {
                day.short_name: [t.isoformat() for t in times]
                for day, times in sorted(self.weekly_times.items())
            },
            "start_date": as_utc(self.start_date).isoformat(),
            "assignees": list(self.assignees),
        }


def _elapsed_weeks(start: date, current: date) -> int:
    """Whole weeks between two dates, clamped to MAX_COUNT when negative."""
    weeks = (current - start).days // 7
    if weeks < 0:
        return MAX_COUNT
    return min(weeks, MAX_COUNT)
