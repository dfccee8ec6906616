"""
Tests for ISO week boundaries
"""
from datetime import datetime, timedelta, timezone

import pytest

from remembear.schedule import (
    InvalidStartWeekError,
    ScheduleError,
    start_of_iso_week,
    start_of_this_week,
)


class TestStartOfIsoWeek:

    def test_converts_to_utc_monday_midnight(self):
        assert start_of_iso_week(2020, 2) == datetime(2020, 1, 6, tzinfo=timezone.utc)

    def test_week_one_can_start_in_previous_year(self):
        assert start_of_iso_week(2020, 1) == datetime(2019, 12, 30, tzinfo=timezone.utc)

    def test_week_53_of_long_year(self):
        assert start_of_iso_week(2020, 53) == datetime(2020, 12, 28, tzinfo=timezone.utc)

    @pytest.mark.parametrize("year,week", [(2020, 256), (2020, 0), (2021, 53), (10000, 1)])
    def test_rejects_invalid_weeks(self, year, week):
        with pytest.raises(InvalidStartWeekError) as exc:
            start_of_iso_week(year, week)

        assert exc.value.year == year
        assert exc.value.week == week
        assert f"week {week} of year {year}" in str(exc.value)

    def test_error_is_schedule_error(self):
        with pytest.raises(ScheduleError):
            start_of_iso_week(2020, 256)


class TestStartOfThisWeek:

    def test_midweek(self):
        now = datetime(2020, 1, 15, 13, 0, tzinfo=timezone.utc)
        assert start_of_this_week(now) == datetime(2020, 1, 13, tzinfo=timezone.utc)

    def test_monday_midnight_is_its_own_week(self):
        now = datetime(2020, 1, 13, tzinfo=timezone.utc)
        assert start_of_this_week(now) == now

    def test_sunday_late(self):
        now = datetime(2020, 1, 19, 23, 59, 59, tzinfo=timezone.utc)
        assert start_of_this_week(now) == datetime(2020, 1, 13, tzinfo=timezone.utc)

    def test_uses_utc_date(self):
        # Monday 01:00 at +03:00 is still Sunday in UTC
        now = datetime(2020, 1, 20, 1, 0, tzinfo=timezone(timedelta(hours=3)))
        assert start_of_this_week(now) == datetime(2020, 1, 13, tzinfo=timezone.utc)

    def test_defaults_to_now(self):
        result = start_of_this_week()
        now = datetime.now(timezone.utc)

        assert result.weekday() == 0
        assert timedelta(0) <= now - result < timedelta(days=7)
