"""
Shared pytest fixtures for the Remembear test suite.
"""
import logging
import os
from datetime import datetime, time, timedelta, timezone

import pytest

from remembear.reminders import Reminder
from remembear.schedule import Schedule, Weekday, start_of_iso_week
from remembear.users import User, UserDirectory

ENV_PREFIX = "REMEMBEAR_"


@pytest.fixture
def users():
    """Directory with two users."""
    return UserDirectory([User(1, "Laura"), User(2, "Donna")])


@pytest.fixture
def three_times_a_week():
    """Mon/Wed/Fri at 12:30 starting in ISO week 3 of 2020."""
    def build(assignees=(1, 2, 3)) -> Schedule:
        return Schedule(
            weekly_times={
                Weekday.MONDAY: [time(12, 30)],
                Weekday.WEDNESDAY: [time(12, 30)],
                Weekday.FRIDAY: [time(12, 30)],
            },
            start_date=start_of_iso_week(2020, 3),
            assignees=tuple(assignees),
        )
    return build


@pytest.fixture
def schedule_from_now():
    """Build a single-day schedule whose times are the given delays from now."""
    def build(*delays: timedelta, assignees=(1,)) -> Schedule:
        now = datetime.now(timezone.utc)
        weekly_times = {}
        for delay in delays:
            target = now + delay
            weekly_times.setdefault(Weekday.of(target), []).append(target.time())
        for times in weekly_times.values():
            times.sort()
        return Schedule(
            weekly_times=weekly_times,
            start_date=start_of_iso_week(2020, 1),
            assignees=tuple(assignees),
        )
    return build


@pytest.fixture
def make_reminder():
    def build(uid: int, schedule: Schedule, name: str = "") -> Reminder:
        return Reminder(uid=uid, name=name or f"Reminder {uid}", schedule=schedule)
    return build


@pytest.fixture
def clean_env():
    """Hide REMEMBEAR_* variables and drop any a .env file sets."""
    saved = {key: value for key, value in os.environ.items() if key.startswith(ENV_PREFIX)}
    for key in saved:
        del os.environ[key]
    yield
    for key in [key for key in os.environ if key.startswith(ENV_PREFIX)]:
        del os.environ[key]
    os.environ.update(saved)


@pytest.fixture
def reset_package_logger():
    """Drop handlers installed by setup_logging during a test."""
    yield
    logger = logging.getLogger("remembear")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
