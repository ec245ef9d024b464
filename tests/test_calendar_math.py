from __future__ import annotations

from datetime import date

import pytest

from planner.domain.calendar_math import (
    add_months,
    days_between,
    each_day,
    format_date_for_display,
    format_date_for_input,
    format_month_year,
    is_same_month,
    month_end,
    month_start,
    months_between,
    next_month,
    previous_month,
    shift_days,
    week_end,
    week_start,
    weekday_index,
)


class TestWeekdays:
    def test_sunday_is_zero(self):
        assert weekday_index(date(2024, 3, 3)) == 0

    def test_saturday_is_six(self):
        assert weekday_index(date(2024, 3, 9)) == 6

    def test_friday(self):
        assert weekday_index(date(2024, 3, 1)) == 5

    def test_week_bounds_start_on_sunday(self):
        assert week_start(date(2024, 3, 1)) == date(2024, 2, 25)
        assert week_end(date(2024, 3, 31)) == date(2024, 4, 6)

    def test_week_bounds_of_sunday_and_saturday(self):
        assert week_start(date(2024, 3, 3)) == date(2024, 3, 3)
        assert week_end(date(2024, 3, 9)) == date(2024, 3, 9)

    def test_week_bounds_stop_at_calendar_edges(self):
        assert week_start(date(1, 1, 3)) == date.min
        assert week_end(date(9999, 12, 30)) == date.max

    def test_shift_days_saturates(self):
        assert shift_days(date(1, 1, 2), -5) == date.min
        assert shift_days(date(9999, 12, 30), 5) == date.max
        assert shift_days(date(2024, 2, 28), 2) == date(2024, 3, 1)


class TestMonthArithmetic:
    def test_month_bounds_leap_year(self):
        assert month_start(date(2024, 2, 17)) == date(2024, 2, 1)
        assert month_end(date(2024, 2, 17)) == date(2024, 2, 29)

    def test_month_end_december(self):
        assert month_end(date(2023, 12, 5)) == date(2023, 12, 31)

    def test_add_months_clamps_day(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)

    def test_add_months_crosses_years(self):
        assert next_month(date(2024, 12, 15)) == date(2025, 1, 15)
        assert previous_month(date(2024, 1, 10)) == date(2023, 12, 10)

    def test_add_months_outside_year_range_overflows(self):
        with pytest.raises(OverflowError):
            previous_month(date(1, 1, 1))
        with pytest.raises(OverflowError):
            next_month(date(9999, 12, 1))

    def test_months_between(self):
        assert months_between(date(2023, 11, 30), date(2024, 2, 1)) == 3
        assert months_between(date(2024, 2, 1), date(2024, 2, 29)) == 0

    def test_days_between(self):
        assert days_between(date(2024, 2, 28), date(2024, 3, 1)) == 2

    def test_is_same_month(self):
        assert is_same_month(date(2024, 3, 1), date(2024, 3, 31))
        assert not is_same_month(date(2024, 3, 1), date(2023, 3, 1))


def test_each_day_is_closed_range():
    days = list(each_day(date(2024, 2, 28), date(2024, 3, 1)))
    assert days == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]


def test_each_day_stops_at_last_representable_date():
    assert list(each_day(date.max, date.max)) == [date.max]
    assert list(each_day(date(9999, 12, 30), date.max)) == [date(9999, 12, 30), date.max]


def test_each_day_empty_when_reversed():
    assert list(each_day(date(2024, 3, 2), date(2024, 3, 1))) == []


def test_formatting():
    assert format_month_year(date(2024, 3, 1)) == "March 2024"
    assert format_date_for_display(date(2024, 3, 1)) == "March 1, 2024"
    assert format_date_for_input(date(2024, 3, 1)) == "2024-03-01"
