from __future__ import annotations

import logging
from datetime import date

from ..domain.models import (
    DEFAULT_EVENT_COLORS,
    CalendarMonth,
    Event,
    EventFormData,
    MutationApplied,
    MutationConflict,
    MutationResult,
    Occurrence,
)
from ..engine import (
    build_month,
    create_event,
    delete_event,
    filter_events,
    force_apply,
    move_event,
    occurrences_between,
    occurrences_on_day,
    update_event,
)
from ..engine.mutations import IdFactory, new_event_id
from ..settings import AppSettings
from ..storage import EventStore, SqliteEventStore

LOGGER = logging.getLogger(__name__)


class EventService:
    """Runs engine transitions against an injected store, saving only applied results."""

    def __init__(
        self,
        *,
        store: EventStore,
        default_color: str = DEFAULT_EVENT_COLORS[0],
        horizon_days: int = 0,
        id_factory: IdFactory = new_event_id,
    ) -> None:
        self._store = store
        self._default_color = default_color
        self._horizon_days = horizon_days
        self._id_factory = id_factory

    @property
    def store(self) -> EventStore:
        return self._store

    def list_events(self, term: str | None = None) -> list[Event]:
        return filter_events(self._store.load(), term)

    def month_view(self, anchor_date: date, *, today: date, term: str | None = None) -> CalendarMonth:
        return build_month(anchor_date, self.list_events(term), today=today)

    def day_view(self, target_date: date, term: str | None = None) -> list[Occurrence]:
        return occurrences_on_day(target_date, self.list_events(term))

    def agenda(self, start: date, end: date, term: str | None = None) -> list[Occurrence]:
        return occurrences_between(self.list_events(term), start, end)

    def create(self, form: EventFormData) -> MutationResult:
        result = create_event(
            form,
            self._store.load(),
            id_factory=self._id_factory,
            default_color=self._default_color,
            horizon_days=self._horizon_days,
        )
        return self._commit("create", result)

    def update(self, event_id: str, form: EventFormData) -> MutationResult:
        result = update_event(event_id, form, self._store.load(), horizon_days=self._horizon_days)
        return self._commit("update", result)

    def delete(self, target: str | Occurrence, *, delete_all_in_series: bool = False) -> MutationApplied:
        result = delete_event(target, self._store.load(), delete_all_in_series=delete_all_in_series)
        if result.event is None:
            LOGGER.info("Delete skipped, no stored event matched %s", target)
            return result
        return self._commit("delete", result)

    def move(self, target: str | Occurrence, new_date: date) -> MutationResult:
        result = move_event(target, new_date, self._store.load(), horizon_days=self._horizon_days)
        return self._commit("move", result)

    def force_apply(self, proposed: Event) -> MutationApplied:
        result = force_apply(proposed, self._store.load())
        return self._commit("force_apply", result)

    def _commit(self, action: str, result: MutationResult) -> MutationResult:
        if isinstance(result, MutationConflict):
            LOGGER.warning(
                "%s of event '%s' conflicts with '%s' on %s",
                action,
                result.proposed.id,
                result.conflicting.id,
                result.conflicting.occurrence_date,
            )
            return result

        self._store.save(result.events)
        LOGGER.info(
            "%s applied to event '%s' (%d events stored)",
            action,
            result.event.id if result.event else None,
            len(result.events),
        )
        return result


def build_event_service(settings: AppSettings) -> EventService:
    return EventService(
        store=SqliteEventStore(db_path=settings.db_path),
        default_color=settings.yaml.events.default_color,
        horizon_days=settings.yaml.conflicts.horizon_days,
    )
