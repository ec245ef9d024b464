from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError

from ..domain.models import Event
from .base import EventStoreError
from .db import fetch_event_rows, open_db, replace_event_rows

LOGGER = logging.getLogger(__name__)


def encode_event(event: Event) -> str:
    return event.model_dump_json()


def parse_events(rows: Sequence[str]) -> list[Event]:
    """Decode stored JSON rows, raising ``EventStoreError`` on the first malformed one."""
    try:
        return [Event.model_validate_json(row) for row in rows]
    except ValidationError as exc:
        raise EventStoreError(f"Stored events could not be decoded: {exc}") from exc


class SqliteEventStore:
    def __init__(self, *, db_path: Path) -> None:
        self._db_path = Path(db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def read_events(self) -> list[Event]:
        """Return the stored collection or raise ``EventStoreError`` if it cannot be read."""
        try:
            with open_db(self._db_path) as connection:
                rows = fetch_event_rows(connection)
        except sqlite3.Error as exc:
            raise EventStoreError(f"Unable to read events from {self._db_path}") from exc
        return parse_events(rows)

    def load(self) -> list[Event]:
        try:
            return self.read_events()
        except EventStoreError:
            LOGGER.exception("Unable to load events, using an empty calendar")
            return []

    def save(self, events: Sequence[Event]) -> None:
        records = [(position, event.id, encode_event(event)) for position, event in enumerate(events)]
        try:
            with open_db(self._db_path, write=True) as connection:
                replace_event_rows(connection, records)
        except sqlite3.Error as exc:
            raise EventStoreError(f"Unable to write events to {self._db_path}") from exc
        LOGGER.debug("Saved %d events to %s", len(records), self._db_path)


class InMemoryEventStore:
    def __init__(self, events: Sequence[Event] = ()) -> None:
        self._events: tuple[Event, ...] = tuple(events)

    def load(self) -> list[Event]:
        return list(self._events)

    def save(self, events: Sequence[Event]) -> None:
        if any(not isinstance(event, Event) for event in events):
            raise EventStoreError("Only base events can be stored")
        self._events = tuple(events)
