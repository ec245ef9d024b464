from __future__ import annotations

from typing import Protocol, Sequence

from ..domain.models import Event


class EventStoreError(RuntimeError):
    """Raised when the event collection cannot be read from or written to a store."""


class EventStore(Protocol):
    def load(self) -> list[Event]:
        """Return the stored events in insertion order, or an empty list if unreadable."""

    def save(self, events: Sequence[Event]) -> None:
        """Replace the stored collection with ``events``."""
