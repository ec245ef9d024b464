from __future__ import annotations

import uuid
from datetime import date
from typing import Callable, Sequence

from ..domain.calendar_math import shift_days
from ..domain.models import (
    DEFAULT_EVENT_COLORS,
    Event,
    EventFormData,
    MutationApplied,
    MutationConflict,
    MutationResult,
    Occurrence,
)
from .conflicts import find_conflict
from .projector import occurrences_on_day
from .recurrence import expand

IdFactory = Callable[[], str]


class EventNotFoundError(LookupError):
    """Raised when a mutation targets an event id that is not in the collection."""


def new_event_id() -> str:
    return str(uuid.uuid4())


def resolve_series_id(target: str | Occurrence) -> str:
    if isinstance(target, Occurrence):
        return target.series_id
    return target


def _index_of(event_id: str, events: Sequence[Event]) -> int:
    for index, event in enumerate(events):
        if event.id == event_id:
            return index
    raise EventNotFoundError(f"Unknown event id: {event_id}")


def build_event(form: EventFormData, *, event_id: str, default_color: str) -> Event:
    return Event(
        id=event_id,
        title=form.title,
        date=form.date,
        start_time=form.start_time,
        end_time=form.end_time,
        description=form.description,
        color=form.color or default_color,
        recurrence=form.recurrence,
    )


def detect_conflict(
    candidate: Event,
    events: Sequence[Event],
    *,
    horizon_days: int = 0,
) -> Occurrence | None:
    """First occurrence of another event overlapping one of the candidate's occurrences.

    The candidate is expanded from its base date over ``horizon_days`` extra days.
    Occurrences of the candidate's own id are never compared.
    """
    others = [event for event in events if event.id != candidate.id]
    horizon_end = shift_days(candidate.date, max(horizon_days, 0))
    for occurrence in expand(candidate, candidate.date, horizon_end):
        pool = occurrences_on_day(occurrence.occurrence_date, others)
        conflict = find_conflict(occurrence, pool)
        if conflict is not None:
            return conflict
    return None


def create_event(
    form: EventFormData,
    events: Sequence[Event],
    *,
    id_factory: IdFactory = new_event_id,
    default_color: str = DEFAULT_EVENT_COLORS[0],
    horizon_days: int = 0,
) -> MutationResult:
    proposed = build_event(form, event_id=id_factory(), default_color=default_color)
    conflict = detect_conflict(proposed, events, horizon_days=horizon_days)
    if conflict is not None:
        return MutationConflict(conflicting=conflict, proposed=proposed)
    return MutationApplied(events=(*events, proposed), event=proposed)


def update_event(
    event_id: str,
    form: EventFormData,
    events: Sequence[Event],
    *,
    horizon_days: int = 0,
) -> MutationResult:
    index = _index_of(event_id, events)
    current = events[index]
    proposed = build_event(form, event_id=current.id, default_color=current.color)
    conflict = detect_conflict(proposed, events, horizon_days=horizon_days)
    if conflict is not None:
        return MutationConflict(conflicting=conflict, proposed=proposed)

    updated = list(events)
    updated[index] = proposed
    return MutationApplied(events=tuple(updated), event=proposed)


def delete_event(
    target: str | Occurrence,
    events: Sequence[Event],
    *,
    delete_all_in_series: bool = False,
) -> MutationApplied:
    """Remove an event by id.

    Instances are derived rather than stored, so removing the whole series and
    removing the base event are the same operation. Unknown ids leave the
    collection unchanged.
    """
    if delete_all_in_series:
        event_id = resolve_series_id(target)
    else:
        event_id = target.id if isinstance(target, Occurrence) else target

    removed: Event | None = None
    remaining: list[Event] = []
    for event in events:
        if event.id == event_id:
            removed = event
            continue
        remaining.append(event)
    return MutationApplied(events=tuple(remaining), event=removed)


def move_event(
    target: str | Occurrence,
    new_date: date,
    events: Sequence[Event],
    *,
    horizon_days: int = 0,
) -> MutationResult:
    """Move an event, or the whole series when given a recurring instance."""
    series_id = resolve_series_id(target)
    index = _index_of(series_id, events)
    proposed = events[index].model_copy(update={"date": new_date})
    conflict = detect_conflict(proposed, events, horizon_days=horizon_days)
    if conflict is not None:
        return MutationConflict(conflicting=conflict, proposed=proposed)

    updated = list(events)
    updated[index] = proposed
    return MutationApplied(events=tuple(updated), event=proposed)


def force_apply(proposed: Event, events: Sequence[Event]) -> MutationApplied:
    """Store ``proposed`` without a conflict check, in place when its id exists."""
    updated = list(events)
    for index, event in enumerate(updated):
        if event.id == proposed.id:
            updated[index] = proposed
            break
    else:
        updated.append(proposed)
    return MutationApplied(events=tuple(updated), event=proposed)
