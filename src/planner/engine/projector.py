from __future__ import annotations

from datetime import date
from typing import Sequence

from ..domain.calendar_math import each_day
from ..domain.models import Event, Occurrence
from .recurrence import occurs_on


def occurrences_on_day(target_date: date, events: Sequence[Event]) -> list[Occurrence]:
    """One-off events first, then recurring instances, each in collection order."""
    day_occurrences = [
        Occurrence(event=event, occurrence_date=target_date)
        for event in events
        if not event.is_recurring and event.date == target_date
    ]
    day_occurrences.extend(
        Occurrence(
            event=event,
            occurrence_date=target_date,
            is_instance=True,
            source_event_id=event.id,
        )
        for event in events
        if event.is_recurring and occurs_on(event, target_date)
    )
    return day_occurrences


def occurrences_between(events: Sequence[Event], start: date, end: date) -> list[Occurrence]:
    occurrences: list[Occurrence] = []
    for day in each_day(start, end):
        occurrences.extend(occurrences_on_day(day, events))
    return occurrences


def filter_events(events: Sequence[Event], term: str | None) -> list[Event]:
    text = (term or "").strip().lower()
    if not text:
        return list(events)
    return [
        event
        for event in events
        if text in event.title.lower() or text in event.description.lower()
    ]
