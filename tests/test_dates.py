"""
tests/test_dates.py — Reference-Timezone Date Helpers
=======================================================
Day keys, month keys and UTC query bounds, including the two US Eastern
DST transitions of 2024 (23-hour and 25-hour days).
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from wordstreak.engine.dates import (
    date_key,
    days_in_month,
    in_month,
    local_date,
    local_day_bounds_utc,
    local_month_bounds_utc,
    month_key,
    next_day_key,
    next_month_start,
    previous_day_key,
    previous_month_start,
    to_utc,
    today,
    week_start,
)

EASTERN = ZoneInfo("America/New_York")


class TestToUtc:
    def test_naive_datetime_is_treated_as_utc(self):
        assert to_utc(datetime(2024, 1, 1, 12, 0)) == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def test_aware_datetime_is_converted(self):
        aware = datetime(2024, 1, 1, 7, 0, tzinfo=EASTERN)
        assert to_utc(aware) == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def test_iso_string_without_offset(self):
        assert to_utc("2024-01-01T12:00:00") == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def test_iso_string_with_offset(self):
        assert to_utc("2024-01-01T12:00:00-05:00") == datetime(2024, 1, 1, 17, 0, tzinfo=UTC)


class TestDayKeys:
    def test_late_evening_utc_rolls_back_a_day(self):
        # 03:00 UTC on Jan 2 is 22:00 Eastern on Jan 1
        assert date_key(datetime(2024, 1, 2, 3, 0), EASTERN) == "2024-01-01"

    def test_plain_date_passes_through(self):
        assert local_date(date(2024, 5, 5), EASTERN) == date(2024, 5, 5)

    def test_today_uses_reference_zone(self):
        now = datetime(2024, 1, 2, 3, 0, tzinfo=UTC)
        assert today(EASTERN, now) == date(2024, 1, 1)

    def test_previous_and_next_cross_month(self):
        assert previous_day_key("2024-03-01") == "2024-02-29"
        assert next_day_key("2024-12-31") == "2025-01-01"

    def test_spring_forward_day_is_one_calendar_day(self):
        # 23:30 EST Mar 9 and 00:30 EST Mar 10, one hour apart in UTC
        assert date_key(datetime(2024, 3, 10, 4, 30), EASTERN) == "2024-03-09"
        assert date_key(datetime(2024, 3, 10, 5, 30), EASTERN) == "2024-03-10"
        assert previous_day_key("2024-03-10") == "2024-03-09"

    def test_fall_back_day_is_one_calendar_day(self):
        # 23:30 EST on Nov 3 (a 25-hour day)
        assert date_key(datetime(2024, 11, 4, 4, 30), EASTERN) == "2024-11-03"
        assert previous_day_key("2024-11-04") == "2024-11-03"


class TestMonths:
    def test_month_key_is_first_of_month(self):
        assert month_key(date(2024, 1, 15)) == "2024-01-01"

    def test_previous_month_wraps_year(self):
        assert previous_month_start(date(2024, 1, 15)) == date(2023, 12, 1)

    def test_next_month_wraps_year(self):
        assert next_month_start(date(2024, 12, 31)) == date(2025, 1, 1)

    def test_days_in_leap_february(self):
        assert days_in_month(date(2024, 2, 10)) == 29
        assert days_in_month(date(2023, 2, 10)) == 28

    def test_in_month(self):
        assert in_month("2024-02-29", date(2024, 2, 1))
        assert not in_month("2024-03-01", date(2024, 2, 1))


class TestWeeks:
    def test_week_starts_on_sunday(self):
        assert week_start(date(2024, 1, 3)) == date(2023, 12, 31)

    def test_sunday_is_its_own_week_start(self):
        assert week_start(date(2024, 1, 7)) == date(2024, 1, 7)

    def test_saturday_belongs_to_previous_sunday(self):
        assert week_start(date(2024, 1, 6)) == date(2023, 12, 31)


class TestUtcBounds:
    def test_regular_day(self):
        start, end = local_day_bounds_utc(date(2024, 1, 15), EASTERN)
        assert start == datetime(2024, 1, 15, 5, 0)
        assert end == datetime(2024, 1, 16, 5, 0)

    def test_spring_forward_day_is_23_hours(self):
        start, end = local_day_bounds_utc(date(2024, 3, 10), EASTERN)
        assert start == datetime(2024, 3, 10, 5, 0)
        assert end == datetime(2024, 3, 11, 4, 0)
        assert (end - start).total_seconds() == 23 * 3600

    def test_fall_back_day_is_25_hours(self):
        start, end = local_day_bounds_utc(date(2024, 11, 3), EASTERN)
        assert (end - start).total_seconds() == 25 * 3600

    def test_month_bounds_are_naive(self):
        start, end = local_month_bounds_utc(date(2024, 7, 20), EASTERN)
        assert start == datetime(2024, 7, 1, 4, 0)
        assert end == datetime(2024, 8, 1, 4, 0)
        assert start.tzinfo is None
