from __future__ import annotations

from datetime import date, time
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

WeekDay = Literal["sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]

WEEKDAY_NAMES: tuple[WeekDay, ...] = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

DEFAULT_EVENT_COLORS: tuple[str, ...] = (
    "#3B82F6",
    "#8B5CF6",
    "#EC4899",
    "#EF4444",
    "#F59E0B",
    "#10B981",
    "#06B6D4",
    "#6366F1",
)


def weekday_name(index: int) -> WeekDay:
    return WEEKDAY_NAMES[index]


class _RuleBase(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    end_date: date | None = None


class NoRecurrence(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    pattern: Literal["none"] = "none"


class DailyRecurrence(_RuleBase):
    pattern: Literal["daily"] = "daily"
    interval: int = Field(default=1, ge=1)


class WeeklyRecurrence(_RuleBase):
    pattern: Literal["weekly"] = "weekly"
    interval: int = Field(default=1, ge=1)
    week_days: frozenset[WeekDay] = Field(default_factory=frozenset)

    @field_serializer("week_days")
    def serialize_week_days(self, value: frozenset[str]) -> list[str]:
        return sorted(value, key=WEEKDAY_NAMES.index)


class MonthlyRecurrence(_RuleBase):
    pattern: Literal["monthly"] = "monthly"
    interval: int = Field(default=1, ge=1)


class CustomRecurrence(_RuleBase):
    """Every ``interval_days`` days; a non-positive interval never recurs."""

    pattern: Literal["custom"] = "custom"
    interval_days: int = 1


RecurrenceRule = Annotated[
    Union[NoRecurrence, DailyRecurrence, WeeklyRecurrence, MonthlyRecurrence, CustomRecurrence],
    Field(discriminator="pattern"),
]


def _require_text(value: str, message: str) -> str:
    text = value.strip()
    if not text:
        raise ValueError(message)
    return text


class Event(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    title: str
    date: date
    start_time: time
    end_time: time
    description: str = ""
    color: str = DEFAULT_EVENT_COLORS[0]
    recurrence: RecurrenceRule = Field(default_factory=NoRecurrence)

    @field_validator("id")
    @classmethod
    def validate_id(cls, value: str) -> str:
        return _require_text(value, "event id must not be empty")

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        return _require_text(value, "event title must not be empty")

    @property
    def is_recurring(self) -> bool:
        return self.recurrence.pattern != "none"


class Occurrence(BaseModel):
    """A concrete placement of an event on one day. Derived, never stored."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    event: Event
    occurrence_date: date
    is_instance: bool = False
    source_event_id: str | None = None

    @property
    def id(self) -> str:
        return self.event.id

    @property
    def series_id(self) -> str:
        return self.source_event_id or self.event.id

    @property
    def title(self) -> str:
        return self.event.title

    @property
    def start_time(self) -> time:
        return self.event.start_time

    @property
    def end_time(self) -> time:
        return self.event.end_time


class CalendarDay(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    date: date
    is_in_target_month: bool
    is_today: bool
    occurrences: tuple[Occurrence, ...] = ()


class CalendarMonth(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    year: int
    month: int = Field(ge=1, le=12)
    label: str
    days: tuple[CalendarDay, ...] = ()


class EventFormData(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    title: str
    date: date
    start_time: time
    end_time: time
    description: str = ""
    color: str | None = None
    recurrence: RecurrenceRule = Field(default_factory=NoRecurrence)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        return _require_text(value, "title must not be empty")

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: str) -> str:
        return value.strip()

    @field_validator("color")
    @classmethod
    def validate_color(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        return text or None


class MutationApplied(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    events: tuple[Event, ...]
    event: Event | None = None


class MutationConflict(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    conflicting: Occurrence
    proposed: Event


MutationResult = Union[MutationApplied, MutationConflict]
