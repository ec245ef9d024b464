from __future__ import annotations

from datetime import date

from ..domain.calendar_math import days_between, each_day, months_between, weekday_index
from ..domain.models import (
    CustomRecurrence,
    DailyRecurrence,
    Event,
    MonthlyRecurrence,
    NoRecurrence,
    Occurrence,
    WeekDay,
    WeeklyRecurrence,
    weekday_name,
)


def effective_week_days(event: Event, rule: WeeklyRecurrence) -> frozenset[WeekDay]:
    """Weekdays a weekly rule fires on; an empty set means the anchor's weekday."""
    if rule.week_days:
        return rule.week_days
    return frozenset({weekday_name(weekday_index(event.date))})


def occurs_on(event: Event, target_date: date) -> bool:
    rule = event.recurrence
    if isinstance(rule, NoRecurrence):
        return target_date == event.date

    if target_date < event.date:
        return False
    if rule.end_date is not None and target_date > rule.end_date:
        return False

    elapsed_days = days_between(event.date, target_date)

    if isinstance(rule, DailyRecurrence):
        return elapsed_days % rule.interval == 0

    if isinstance(rule, WeeklyRecurrence):
        week_delta = elapsed_days // 7
        day_name = weekday_name(weekday_index(target_date))
        return day_name in effective_week_days(event, rule) and week_delta % rule.interval == 0

    if isinstance(rule, MonthlyRecurrence):
        if target_date.day != event.date.day:
            return False
        return months_between(event.date, target_date) % rule.interval == 0

    if isinstance(rule, CustomRecurrence):
        if rule.interval_days < 1:
            return False
        return elapsed_days % rule.interval_days == 0

    return False


def expand(event: Event, range_start: date, range_end: date) -> list[Occurrence]:
    if range_end < range_start:
        return []

    if not event.is_recurring:
        if range_start <= event.date <= range_end:
            return [Occurrence(event=event, occurrence_date=event.date)]
        return []

    first_day = max(range_start, event.date)
    last_day = range_end
    end_date = event.recurrence.end_date
    if end_date is not None:
        last_day = min(last_day, end_date)

    return [
        Occurrence(
            event=event,
            occurrence_date=day,
            is_instance=True,
            source_event_id=event.id,
        )
        for day in each_day(first_day, last_day)
        if occurs_on(event, day)
    ]
