from .backup import list_backups, prune_backups, write_backup
from .base import EventStore, EventStoreError
from .db import initialize_database
from .events import InMemoryEventStore, SqliteEventStore, encode_event, parse_events

__all__ = [
    "EventStore",
    "EventStoreError",
    "InMemoryEventStore",
    "SqliteEventStore",
    "encode_event",
    "initialize_database",
    "list_backups",
    "parse_events",
    "prune_backups",
    "write_backup",
]
