"""Tests for week window date arithmetic."""

from datetime import date, timedelta

import pytest

from grocerygo.normalize.dates import format_plan_date, parse_plan_date
from grocerygo.plan.calendar import (
    DAY_NAMES,
    date_for_offset,
    dates_overlap,
    day_index,
    is_date_within_plan,
    next_week_start,
    resolve_date,
    week_dates,
    week_window,
    weekday_name,
)


class TestDayIndex:
    def test_sunday_first(self):
        assert day_index("Sunday") == 0
        assert day_index("Saturday") == 6

    def test_case_and_whitespace(self):
        assert day_index("  wednesday ") == 3

    def test_abbreviations(self):
        assert day_index("Thu") == 4

    def test_unknown(self):
        assert day_index("Funday") is None
        assert day_index("") is None
        assert day_index(None) is None


class TestResolveDate:
    """Tests for resolve_date function."""

    def test_day_after_week_start_wraps_forward(self):
        """A Wednesday plan's Monday is the one after it starts."""
        assert resolve_date("2024-06-05", "Monday") == date(2024, 6, 10)

    def test_start_day_itself(self):
        assert resolve_date("2024-06-05", "Wednesday") == date(2024, 6, 5)

    def test_monday_plan(self):
        assert resolve_date(date(2024, 1, 1), "Wednesday") == date(2024, 1, 3)
        assert resolve_date(date(2024, 1, 1), "Sunday") == date(2024, 1, 7)

    def test_every_day_in_window(self):
        for start in (date(2024, 6, 2) + timedelta(days=i) for i in range(7)):
            low, high = week_window(start)
            resolved = {resolve_date(start, name) for name in DAY_NAMES}
            assert len(resolved) == 7
            assert all(low <= d <= high for d in resolved)
            assert all(weekday_name(resolve_date(start, name)) == name for name in DAY_NAMES)

    def test_unknown_day(self):
        assert resolve_date("2024-06-05", "Someday") is None

    def test_invalid_week_of(self):
        assert resolve_date("June 5", "Monday") is None

    def test_crosses_month_and_year(self):
        assert resolve_date("2024-12-30", "Wednesday") == date(2025, 1, 1)


class TestDateForOffset:
    def test_offsets(self):
        assert date_for_offset("2024-06-05", 0) == date(2024, 6, 5)
        assert date_for_offset("2024-06-05", 6) == date(2024, 6, 11)

    def test_wraps(self):
        assert date_for_offset("2024-06-05", 8) == date(2024, 6, 6)

    def test_invalid_week_of(self):
        assert date_for_offset("bad", 1) is None


class TestWeekWindow:
    def test_inclusive_seven_days(self):
        assert week_window("2024-06-05") == (date(2024, 6, 5), date(2024, 6, 11))
        assert len(week_dates("2024-06-05")) == 7

    def test_leap_day(self):
        assert week_dates("2024-02-26")[3] == date(2024, 2, 29)

    def test_invalid(self):
        with pytest.raises(ValueError):
            week_window("not a date")


class TestDatesOverlap:
    """Tests for dates_overlap function."""

    def test_same_week(self):
        assert dates_overlap("2024-06-03", "2024-06-03")

    def test_last_day_touches(self):
        assert dates_overlap("2024-06-03", "2024-06-09")

    def test_adjacent_weeks(self):
        assert not dates_overlap("2024-06-03", "2024-06-10")

    def test_symmetric(self):
        base = date(2024, 6, 3)
        for delta in range(-10, 11):
            other = base + timedelta(days=delta)
            assert dates_overlap(base, other) == dates_overlap(other, base)


class TestIsDateWithinPlan:
    def test_bounds(self):
        assert is_date_within_plan("2024-06-05", today=date(2024, 6, 5))
        assert is_date_within_plan("2024-06-05", today=date(2024, 6, 11))
        assert not is_date_within_plan("2024-06-05", today=date(2024, 6, 12))
        assert not is_date_within_plan("2024-06-05", today=date(2024, 6, 4))

    def test_unreadable_today_is_outside(self):
        assert not is_date_within_plan("2024-06-05", today="not-a-date")
        assert is_date_within_plan("2024-06-05", today="2024-06-06")


class TestNextWeekStart:
    def test_next_monday(self):
        # 2024-06-05 is a Wednesday
        assert next_week_start("Monday", today=date(2024, 6, 5)) == date(2024, 6, 10)

    def test_strictly_future(self):
        assert next_week_start("Monday", today=date(2024, 6, 10)) == date(2024, 6, 17)

    def test_unknown_day_falls_back_to_monday(self):
        assert next_week_start("Caturday", today=date(2024, 6, 5)) == date(2024, 6, 10)

    def test_sunday(self):
        assert next_week_start("Sunday", today=date(2024, 6, 5)) == date(2024, 6, 9)


class TestPlanDates:
    def test_parse_variants(self):
        assert parse_plan_date("2024-06-05") == date(2024, 6, 5)
        assert parse_plan_date("2024-06-05T00:00:00Z") == date(2024, 6, 5)
        assert parse_plan_date("2024-06-05 08:00") == date(2024, 6, 5)

    def test_parse_rejects(self):
        assert parse_plan_date("2024-6-5") is None
        assert parse_plan_date("2024-06-05x") is None
        assert parse_plan_date(20240605) is None

    def test_format(self):
        assert format_plan_date(date(2024, 1, 3)) == "2024-01-03"
