from __future__ import annotations

from datetime import date, time

from planner.domain.models import DailyRecurrence, Event, NoRecurrence, WeeklyRecurrence
from planner.engine.projector import filter_events, occurrences_between, occurrences_on_day


def _event(event_id: str, event_date: date, recurrence=None, **fields) -> Event:
    return Event(
        id=event_id,
        title=fields.pop("title", f"Event {event_id}"),
        date=event_date,
        start_time=time(9, 0),
        end_time=time(10, 0),
        recurrence=recurrence or NoRecurrence(),
        **fields,
    )


class TestOccurrencesOnDay:
    def test_one_off_events_come_before_instances(self):
        events = [
            _event("series", date(2024, 3, 1), DailyRecurrence()),
            _event("x", date(2024, 3, 5)),
            _event("y", date(2024, 3, 5)),
        ]
        occurrences = occurrences_on_day(date(2024, 3, 5), events)
        assert [item.id for item in occurrences] == ["x", "y", "series"]

    def test_instances_are_stamped(self):
        events = [_event("series", date(2024, 3, 1), DailyRecurrence())]
        [instance] = occurrences_on_day(date(2024, 3, 5), events)
        assert instance.is_instance
        assert instance.source_event_id == "series"
        assert instance.occurrence_date == date(2024, 3, 5)
        assert instance.event.date == date(2024, 3, 1)

    def test_one_off_is_not_an_instance(self):
        [item] = occurrences_on_day(date(2024, 3, 5), [_event("x", date(2024, 3, 5))])
        assert not item.is_instance
        assert item.source_event_id is None

    def test_recurring_instances_keep_collection_order(self):
        events = [
            _event("b", date(2024, 3, 1), DailyRecurrence()),
            _event("a", date(2024, 3, 1), WeeklyRecurrence()),
        ]
        assert [item.id for item in occurrences_on_day(date(2024, 3, 8), events)] == ["b", "a"]

    def test_empty_day(self):
        assert occurrences_on_day(date(2024, 3, 5), [_event("x", date(2024, 3, 6))]) == []


def test_occurrences_between_concatenates_days():
    events = [
        _event("series", date(2024, 3, 1), DailyRecurrence(interval=2)),
        _event("x", date(2024, 3, 2)),
    ]
    occurrences = occurrences_between(events, date(2024, 3, 1), date(2024, 3, 3))
    assert [(item.occurrence_date.day, item.id) for item in occurrences] == [
        (1, "series"),
        (2, "x"),
        (3, "series"),
    ]


class TestFilterEvents:
    def test_matches_title_case_insensitively(self):
        events = [_event("a", date(2024, 3, 1), title="Gym"), _event("b", date(2024, 3, 1), title="Work")]
        assert [event.id for event in filter_events(events, "GYM")] == ["a"]

    def test_matches_description(self):
        events = [
            _event("a", date(2024, 3, 1), description="Bring the slides"),
            _event("b", date(2024, 3, 1)),
        ]
        assert [event.id for event in filter_events(events, "slides")] == ["a"]

    def test_blank_term_returns_everything(self):
        events = [_event("a", date(2024, 3, 1)), _event("b", date(2024, 3, 2))]
        assert filter_events(events, "   ") == events
        assert filter_events(events, None) == events
