from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Iterator

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def weekday_index(value: date) -> int:
    """Return the weekday with Sunday as 0 and Saturday as 6."""
    return (value.weekday() + 1) % 7


def month_start(value: date) -> date:
    return value.replace(day=1)


def month_end(value: date) -> date:
    last_day = calendar.monthrange(value.year, value.month)[1]
    return value.replace(day=last_day)


def shift_days(value: date, days: int) -> date:
    """Add ``days`` to ``value``, saturating at ``date.min`` and ``date.max``."""
    if days >= 0:
        if days > (date.max - value).days:
            return date.max
    elif -days > (value - date.min).days:
        return date.min
    return value + timedelta(days=days)


def week_start(value: date) -> date:
    return shift_days(value, -weekday_index(value))


def week_end(value: date) -> date:
    return shift_days(value, 6 - weekday_index(value))


def each_day(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        if current == end:
            return
        current += timedelta(days=1)


def days_between(start: date, end: date) -> int:
    return (end - start).days


def months_between(start: date, end: date) -> int:
    return (end.year - start.year) * 12 + (end.month - start.month)


def add_months(value: date, months: int) -> date:
    month_index = value.year * 12 + (value.month - 1) + months
    year, month_zero = divmod(month_index, 12)
    if not date.min.year <= year <= date.max.year:
        raise OverflowError("date value out of range")
    last_day = calendar.monthrange(year, month_zero + 1)[1]
    return date(year, month_zero + 1, min(value.day, last_day))


def next_month(value: date) -> date:
    return add_months(value, 1)


def previous_month(value: date) -> date:
    return add_months(value, -1)


def is_same_month(left: date, right: date) -> bool:
    return left.year == right.year and left.month == right.month


def format_month_year(value: date) -> str:
    return f"{MONTH_NAMES[value.month - 1]} {value.year}"


def format_date_for_display(value: date) -> str:
    return f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"


def format_date_for_input(value: date) -> str:
    return value.isoformat()
