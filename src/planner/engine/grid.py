from __future__ import annotations

from datetime import date
from typing import Sequence

from ..domain.calendar_math import (
    each_day,
    format_month_year,
    is_same_month,
    month_end,
    month_start,
    week_end,
    week_start,
)
from ..domain.models import CalendarDay, CalendarMonth, Event
from .projector import occurrences_on_day


def grid_bounds(anchor_date: date) -> tuple[date, date]:
    """First Sunday and last Saturday of the week-aligned grid for a month."""
    return week_start(month_start(anchor_date)), week_end(month_end(anchor_date))


def build_month(anchor_date: date, events: Sequence[Event], *, today: date) -> CalendarMonth:
    first_day, last_day = grid_bounds(anchor_date)
    days = tuple(
        CalendarDay(
            date=day,
            is_in_target_month=is_same_month(day, anchor_date),
            is_today=day == today,
            occurrences=tuple(occurrences_on_day(day, events)),
        )
        for day in each_day(first_day, last_day)
    )
    return CalendarMonth(
        year=anchor_date.year,
        month=anchor_date.month,
        label=format_month_year(anchor_date),
        days=days,
    )
