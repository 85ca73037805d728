"""Value types consumed and produced by the optimizer.

Everything here is an immutable dataclass. Constructors validate their own
invariants and raise ``InvalidInputError`` so that malformed input from the
integration layer fails at the boundary instead of producing wrong slots.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from types import MappingProxyType
from typing import Union

from .exceptions import InvalidInputError


class Category(str, Enum):
    """Activity category; drives anchor hours and the category curve."""

    WORK = "work"
    FITNESS = "fitness"
    PERSONAL = "personal"
    STUDY = "study"
    HEALTH = "health"
    SOCIAL = "social"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Category | str) -> Category:
        if isinstance(value, Category):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidInputError(f"unknown category {value!r}", "category") from None


class TimeOfDay(str, Enum):
    """Coarse per-category preference stored with the user's settings."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    ANY = "any"


def _check_hour(value: int, field_name: str) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= 23:
        raise InvalidInputError(f"hour must be in 0..23, got {value!r}", field_name)


@dataclass(frozen=True, order=True)
class ClockTime:
    """Wall-clock time of day with validated hour and minute."""

    hour: int
    minute: int = 0

    def __post_init__(self):
        _check_hour(self.hour, "hour")
        if not isinstance(self.minute, int) or not 0 <= self.minute <= 59:
            raise InvalidInputError(
                f"minute must be in 0..59, got {self.minute!r}", "minute"
            )

    def on(self, day: date, tzinfo=None) -> datetime:
        return datetime(day.year, day.month, day.day, self.hour, self.minute, tzinfo=tzinfo)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


# Task time preferences. One variant per kind, each carrying only its own data.


@dataclass(frozen=True)
class MorningPreference:
    before_hour: int = 9

    def __post_init__(self):
        _check_hour(self.before_hour, "before_hour")

    def matches(self, hour: int) -> bool:
        return hour < self.before_hour


@dataclass(frozen=True)
class AfternoonPreference:
    start_hour: int = 12
    end_hour: int = 17

    def __post_init__(self):
        _check_hour(self.start_hour, "start_hour")
        _check_hour(self.end_hour, "end_hour")
        if self.start_hour > self.end_hour:
            raise InvalidInputError("start_hour must not be after end_hour", "end_hour")

    def matches(self, hour: int) -> bool:
        return self.start_hour <= hour <= self.end_hour


@dataclass(frozen=True)
class EveningPreference:
    after_hour: int = 18

    def __post_init__(self):
        _check_hour(self.after_hour, "after_hour")

    def matches(self, hour: int) -> bool:
        return hour >= self.after_hour


@dataclass(frozen=True)
class AnyTimePreference:
    def matches(self, hour: int) -> bool:
        return True


TimePreference = Union[
    MorningPreference, AfternoonPreference, EveningPreference, AnyTimePreference
]


# Recurrence. Only the request layer looks at these.


@dataclass(frozen=True)
class Daily:
    pass


@dataclass(frozen=True)
class WeeklyTimes:
    times: int

    def __post_init__(self):
        if self.times <= 0:
            raise InvalidInputError("times must be positive", "times")


@dataclass(frozen=True)
class SpecificDays:
    weekdays: tuple[int, ...]  # datetime.weekday() numbers, Monday == 0

    def __post_init__(self):
        if not self.weekdays:
            raise InvalidInputError("at least one weekday is required", "weekdays")
        for day in self.weekdays:
            if not 0 <= day <= 6:
                raise InvalidInputError(f"weekday must be in 0..6, got {day}", "weekdays")
        object.__setattr__(self, "weekdays", tuple(sorted(set(self.weekdays))))


TaskFrequency = Union[Daily, WeeklyTimes, SpecificDays]


@dataclass(frozen=True)
class FixedEvent:
    """An existing commitment that candidates must not overlap."""

    title: str
    start: datetime
    duration_minutes: int
    category: Category = Category.OTHER

    def __post_init__(self):
        if self.duration_minutes <= 0:
            raise InvalidInputError("duration must be positive", "duration_minutes")

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.duration_minutes)


@dataclass(frozen=True)
class FlexibleTask:
    """The activity being scheduled."""

    title: str
    duration_minutes: int
    category: Category = Category.OTHER
    preferred_times: tuple[TimePreference, ...] = ()
    suggestion_count: int | None = None
    deadline: datetime | None = None
    frequency: TaskFrequency | None = None

    def __post_init__(self):
        if self.duration_minutes <= 0:
            raise InvalidInputError("duration must be positive", "duration_minutes")
        if self.suggestion_count is not None and self.suggestion_count <= 0:
            raise InvalidInputError("suggestion count must be positive", "suggestion_count")
        object.__setattr__(self, "category", Category.parse(self.category))
        object.__setattr__(self, "preferred_times", tuple(self.preferred_times))

    @property
    def duration(self) -> timedelta:
        return timedelta(minutes=self.duration_minutes)


@dataclass(frozen=True)
class UserSchedulePreferences:
    working_hours_start: int = 9
    working_hours_end: int = 17
    category_preferences: Mapping[Category, TimeOfDay] = field(default_factory=dict)
    buffer_minutes: int = 30

    def __post_init__(self):
        _check_hour(self.working_hours_start, "working_hours_start")
        _check_hour(self.working_hours_end, "working_hours_end")
        if self.working_hours_start > self.working_hours_end:
            raise InvalidInputError(
                "working hours must start before they end", "working_hours_end"
            )
        if self.buffer_minutes < 0:
            raise InvalidInputError("buffer must not be negative", "buffer_minutes")
        prefs = {
            Category.parse(category): TimeOfDay(value)
            for category, value in self.category_preferences.items()
        }
        object.__setattr__(self, "category_preferences", MappingProxyType(prefs))

    def in_working_hours(self, hour: int) -> bool:
        return self.working_hours_start <= hour <= self.working_hours_end


@dataclass(frozen=True)
class DateRange:
    """Half-open ``[start, end)`` interval of instants."""

    start: datetime
    end: datetime

    def __post_init__(self):
        if (self.start.tzinfo is None) != (self.end.tzinfo is None):
            raise InvalidInputError(
                "range start and end must be both timezone-aware or both naive", "end"
            )
        if self.end <= self.start:
            raise InvalidInputError("range end must be after its start", "end")

    @classmethod
    def days_from(cls, start: datetime, days: int) -> DateRange:
        return cls(start, start + timedelta(days=days))

    def days(self) -> Iterator[date]:
        current = self.start
        while current < self.end:
            yield current.date()
            current += timedelta(days=1)


@dataclass(frozen=True)
class CandidateSlot:
    start: datetime
    end: datetime
    category: Category

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)


@dataclass(frozen=True)
class ScoredSlot:
    start: datetime
    end: datetime
    score: float
    reasoning: str
    category: Category

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)
