from __future__ import annotations

from typing import Iterable

from ..domain.models import Occurrence


def overlaps(left: Occurrence, right: Occurrence) -> bool:
    """Closed-interval overlap on the same day; touching endpoints conflict."""
    if left.occurrence_date != right.occurrence_date:
        return False
    return left.start_time <= right.end_time and right.start_time <= left.end_time


def find_conflict(candidate: Occurrence, pool: Iterable[Occurrence]) -> Occurrence | None:
    for occurrence in pool:
        if occurrence.series_id == candidate.series_id:
            continue
        if overlaps(candidate, occurrence):
            return occurrence
    return None
