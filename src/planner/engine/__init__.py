from .conflicts import find_conflict, overlaps
from .grid import build_month, grid_bounds
from .mutations import (
    EventNotFoundError,
    create_event,
    delete_event,
    detect_conflict,
    force_apply,
    move_event,
    resolve_series_id,
    update_event,
)
from .projector import filter_events, occurrences_between, occurrences_on_day
from .recurrence import effective_week_days, expand, occurs_on

__all__ = [
    "EventNotFoundError",
    "build_month",
    "create_event",
    "delete_event",
    "detect_conflict",
    "effective_week_days",
    "expand",
    "filter_events",
    "find_conflict",
    "force_apply",
    "grid_bounds",
    "move_event",
    "occurrences_between",
    "occurrences_on_day",
    "occurs_on",
    "overlaps",
    "resolve_series_id",
    "update_event",
]
