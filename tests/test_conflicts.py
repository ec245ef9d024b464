from __future__ import annotations

from datetime import date, time

import pytest

from planner.domain.models import Event, Occurrence
from planner.engine.conflicts import find_conflict, overlaps

DAY = date(2024, 3, 1)


def _occurrence(
    start: tuple[int, int],
    end: tuple[int, int],
    *,
    event_id: str,
    on: date = DAY,
    source_event_id: str | None = None,
) -> Occurrence:
    event = Event(
        id=event_id,
        title=f"Event {event_id}",
        date=on,
        start_time=time(*start),
        end_time=time(*end),
    )
    return Occurrence(
        event=event,
        occurrence_date=on,
        is_instance=source_event_id is not None,
        source_event_id=source_event_id,
    )


class TestOverlaps:
    def test_nested_interval(self):
        a = _occurrence((9, 0), (10, 0), event_id="a")
        b = _occurrence((9, 30), (9, 45), event_id="b")
        assert overlaps(a, b)

    def test_touching_endpoints_conflict(self):
        a = _occurrence((9, 0), (10, 0), event_id="a")
        c = _occurrence((10, 0), (11, 0), event_id="c")
        assert overlaps(a, c)

    def test_disjoint_intervals(self):
        a = _occurrence((9, 0), (10, 0), event_id="a")
        d = _occurrence((10, 1), (11, 0), event_id="d")
        assert not overlaps(a, d)

    def test_different_days_never_conflict(self):
        a = _occurrence((9, 0), (10, 0), event_id="a")
        b = _occurrence((9, 0), (10, 0), event_id="b", on=date(2024, 3, 2))
        assert not overlaps(a, b)

    @pytest.mark.parametrize(
        ("first", "second"),
        [
            (((9, 0), (10, 0)), ((9, 30), (9, 45))),
            (((9, 0), (10, 0)), ((10, 0), (11, 0))),
            (((9, 0), (10, 0)), ((11, 0), (12, 0))),
            (((8, 0), (9, 15)), ((9, 0), (10, 0))),
        ],
    )
    def test_symmetric(self, first, second):
        a = _occurrence(*first, event_id="a")
        b = _occurrence(*second, event_id="b")
        assert overlaps(a, b) == overlaps(b, a)


class TestFindConflict:
    def test_returns_first_overlap_in_pool_order(self):
        candidate = _occurrence((9, 0), (10, 0), event_id="new")
        pool = [
            _occurrence((7, 0), (8, 0), event_id="early"),
            _occurrence((9, 30), (10, 30), event_id="first"),
            _occurrence((9, 0), (9, 15), event_id="second"),
        ]
        assert find_conflict(candidate, pool).id == "first"

    def test_skips_own_series(self):
        candidate = _occurrence((9, 0), (10, 0), event_id="series", source_event_id="series")
        pool = [_occurrence((9, 0), (10, 0), event_id="series", source_event_id="series")]
        assert find_conflict(candidate, pool) is None

    def test_empty_pool(self):
        assert find_conflict(_occurrence((9, 0), (10, 0), event_id="a"), []) is None
