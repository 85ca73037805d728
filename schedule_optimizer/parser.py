"""Deterministic parsing of short calendar requests.

Handles the common phrasings ("add gym tomorrow at 7am", "cancel dentist on
friday", "what's on today") without a language model. Anything it cannot
classify comes back as ``UnknownAction`` so the caller can fall back to a
smarter collaborator.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Union

from .exceptions import InvalidInputError, ParseError
from .models import Category, FixedEvent, FlexibleTask
from .timeutils import find_conflicts, start_of_day

logger = logging.getLogger(__name__)

__all__ = [
    "AddAction",
    "CalendarRequestParser",
    "ParsedAction",
    "ParsedEvent",
    "QueryAction",
    "RemoveAction",
    "UnknownAction",
]

REMOVE_WORDS = ("remove", "delete", "cancel")
QUERY_WORDS = ("what", "show")
QUERY_PHRASES = ("my schedule",)

# Checked in order; first match wins
EVENT_KEYWORDS: tuple[tuple[tuple[str, ...], str, Category], ...] = (
    (("work", "office"), "Work", Category.WORK),
    (("meeting",), "Meeting", Category.WORK),
    (("gym",), "Gym", Category.FITNESS),
    (("workout", "exercise"), "Workout", Category.FITNESS),
    (("run",), "Run", Category.FITNESS),
    (("dentist",), "Dentist Appointment", Category.HEALTH),
    (("doctor",), "Doctor Appointment", Category.HEALTH),
    (("appointment",), "Appointment", Category.HEALTH),
    (("study",), "Study", Category.STUDY),
    (("class",), "Class", Category.STUDY),
    (("homework",), "Homework", Category.STUDY),
    (("dinner",), "Dinner", Category.SOCIAL),
    (("lunch",), "Lunch", Category.SOCIAL),
    (("party",), "Party", Category.SOCIAL),
)

REMOVAL_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("work",), "work"),
    (("gym", "workout"), "gym"),
    (("dentist",), "dentist"),
    (("doctor",), "doctor"),
    (("meeting",), "meeting"),
)

# Minutes used when a single start time is given without a duration
DEFAULT_DURATIONS: tuple[tuple[str, int], ...] = (
    ("meeting", 60),
    ("appointment", 30),
    ("gym", 60),
    ("workout", 60),
    ("lunch", 60),
    ("dinner", 90),
)

WEEKDAYS = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}

MONTHS = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}

TITLE_STOP_WORDS = {
    "at", "on", "from", "for", "to", "until", "every", "next", "this",
    "today", "tonight", "tomorrow", "noon", "midnight", *WEEKDAYS, *MONTHS,
}

TIME_RE = re.compile(r"\b(\d{1,2})(?::(\d{2}))?\s*(am|pm)?\b")
HOURS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:hours?|hrs?)\b")
MINUTES_RE = re.compile(r"(\d+)\s*(?:minutes?|mins?)\b")
MONTH_DAY_RE = re.compile(
    r"\b(" + "|".join(MONTHS) + r")\s+(\d{1,2})(?:st|nd|rd|th)?\b"
)
SPECIAL_TIMES = (("noon", 12), ("midnight", 0))


def _has_word(text: str, word: str) -> bool:
    return re.search(rf"\b{re.escape(word)}\b", text) is not None


@dataclass(frozen=True)
class ParsedEvent:
    title: str
    start: datetime | None
    end: datetime | None
    category: Category
    is_recurring: bool = False
    recurrence_days: tuple[int, ...] = ()  # date.weekday() numbers

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None

    @property
    def duration_minutes(self) -> int | None:
        if not self.is_complete:
            return None
        return int((self.end - self.start).total_seconds() // 60)

    def to_fixed_event(self) -> FixedEvent:
        if not self.is_complete:
            raise InvalidInputError(f"'{self.title}' has no start or end time", "start")
        return FixedEvent(
            title=self.title,
            start=self.start,
            duration_minutes=self.duration_minutes,
            category=self.category,
        )

    def conflicts_with(self, events: Iterable[FixedEvent]) -> list[FixedEvent]:
        """Existing events overlapping this one; empty while it has no times."""
        if not self.is_complete:
            return []
        return find_conflicts(self.start, self.end, events)

    def to_task(self, default_duration: int = 60) -> FlexibleTask:
        """Flexible task for an event the user gave no concrete time for."""
        return FlexibleTask(
            title=self.title,
            duration_minutes=self.duration_minutes or default_duration,
            category=self.category,
        )


@dataclass(frozen=True)
class AddAction:
    event: ParsedEvent


@dataclass(frozen=True)
class RemoveAction:
    title: str
    date: date | None = None


@dataclass(frozen=True)
class QueryAction:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class UnknownAction:
    text: str


ParsedAction = Union[AddAction, RemoveAction, QueryAction, UnknownAction]


class CalendarRequestParser:
    """Keyword and pattern based request parser.

    ``now`` pins the reference instant so results are reproducible; when it
    is omitted the current local time is read once per ``parse`` call.
    """

    def __init__(self, now: datetime | None = None):
        self._now = now

    def parse(self, text: str) -> ParsedAction:
        normalized = " ".join(text.lower().split()) if text else ""
        if not normalized:
            raise ParseError("Request text is empty")

        now = self._now or datetime.now()

        if any(_has_word(normalized, word) for word in REMOVE_WORDS):
            action = self._parse_removal(normalized, now)
        elif any(_has_word(normalized, word) for word in QUERY_WORDS) or any(
            phrase in normalized for phrase in QUERY_PHRASES
        ):
            action = self._parse_query(normalized, now)
        else:
            action = self._parse_add(normalized, now)

        logger.debug(f"Parsed {text!r} as {type(action).__name__}")
        return action

    # Actions

    def _parse_add(self, text: str, now: datetime) -> AddAction:
        title, category = self.extract_event_details(text)
        start, end = self.extract_times(text, now)
        is_recurring, days = self.extract_recurrence(text)
        return AddAction(
            ParsedEvent(
                title=title,
                start=start,
                end=end,
                category=category,
                is_recurring=is_recurring,
                recurrence_days=days,
            )
        )

    def _parse_removal(self, text: str, now: datetime) -> RemoveAction:
        title = ""
        for keywords, name in REMOVAL_KEYWORDS:
            if any(_has_word(text, keyword) for keyword in keywords):
                title = name
                break
        else:
            title = self._words_after(text, REMOVE_WORDS)
        return RemoveAction(title=title, date=self.extract_date(text, now))

    def _parse_query(self, text: str, now: datetime) -> QueryAction | UnknownAction:
        today = start_of_day(now)
        if _has_word(text, "today") or _has_word(text, "tonight"):
            return QueryAction(today, today + timedelta(days=1))
        if _has_word(text, "tomorrow"):
            start = today + timedelta(days=1)
            return QueryAction(start, start + timedelta(days=1))
        if _has_word(text, "week"):
            return QueryAction(today, today + timedelta(days=7))
        return UnknownAction(text)

    # Extraction helpers

    def extract_event_details(self, text: str) -> tuple[str, Category]:
        for keywords, title, category in EVENT_KEYWORDS:
            if any(_has_word(text, keyword) for keyword in keywords):
                return title, category

        custom = self._words_after(text, ("add", "schedule", "book"))
        if custom:
            return custom.title(), Category.PERSONAL
        return "Event", Category.PERSONAL

    def extract_date(self, text: str, now: datetime) -> date | None:
        today = now.date()

        if "day after tomorrow" in text:
            return today + timedelta(days=2)
        if _has_word(text, "today") or _has_word(text, "tonight"):
            return today
        if _has_word(text, "tomorrow"):
            return today + timedelta(days=1)

        if not _has_word(text, "every"):
            for name, weekday in WEEKDAYS.items():
                if not _has_word(text, name):
                    continue
                days_ahead = weekday - today.weekday()
                if f"next {name}" in text:
                    days_ahead += 7
                elif days_ahead <= 0:
                    days_ahead += 7
                return today + timedelta(days=days_ahead)

        match = MONTH_DAY_RE.search(text)
        if match:
            month, day = MONTHS[match.group(1)], int(match.group(2))
            try:
                candidate = date(today.year, month, day)
                if candidate < today:
                    candidate = date(today.year + 1, month, day)
            except ValueError:
                return None
            return candidate

        return None

    def extract_duration(self, text: str) -> int | None:
        match = HOURS_RE.search(text)
        if match:
            return int(float(match.group(1)) * 60)
        match = MINUTES_RE.search(text)
        if match:
            return int(match.group(1))
        return None

    def extract_times(
        self, text: str, now: datetime
    ) -> tuple[datetime | None, datetime | None]:
        base = self.extract_date(text, now) or now.date()

        # Numbers that belong to durations or dates are not clock times
        clock_text = HOURS_RE.sub(" ", text)
        clock_text = MINUTES_RE.sub(" ", clock_text)
        clock_text = MONTH_DAY_RE.sub(" ", clock_text)

        found: list[tuple[int, datetime]] = []
        for word, hour in SPECIAL_TIMES:
            match = re.search(rf"\b{word}\b", clock_text)
            if match:
                found.append((match.start(), self._at(base, hour, 0, now.tzinfo)))

        for match in TIME_RE.finditer(clock_text):
            hour = int(match.group(1))
            minute = int(match.group(2) or 0)
            meridiem = match.group(3)
            if meridiem == "pm" and hour < 12:
                hour += 12
            elif meridiem == "am" and hour == 12:
                hour = 0
            elif meridiem is None and 1 <= hour <= 7:
                # "at 3" almost always means the afternoon
                hour += 12
            if hour > 23 or minute > 59:
                continue
            found.append((match.start(), self._at(base, hour, minute, now.tzinfo)))

        times = [moment for _, moment in sorted(found, key=lambda item: item[0])]

        if len(times) >= 2 and (" to " in text or "-" in text or " until " in text):
            start, end = times[0], times[1]
            if end <= start:
                end += timedelta(days=1)
            return start, end

        if len(times) == 1:
            start = times[0]
            duration = self.extract_duration(text)
            if duration is None:
                duration = next(
                    (minutes for word, minutes in DEFAULT_DURATIONS if _has_word(text, word)),
                    None,
                )
            end = start + timedelta(minutes=duration) if duration else None
            return start, end

        return None, None

    def extract_recurrence(self, text: str) -> tuple[bool, tuple[int, ...]]:
        if "every day" in text or _has_word(text, "everyday") or _has_word(text, "daily"):
            return True, tuple(range(7))
        if _has_word(text, "weekday") or _has_word(text, "weekdays"):
            return True, (0, 1, 2, 3, 4)
        if _has_word(text, "weekend") or _has_word(text, "weekends"):
            return True, (5, 6)
        if _has_word(text, "every"):
            days = tuple(
                weekday
                for name, weekday in WEEKDAYS.items()
                if _has_word(text, name) or _has_word(text, name + "s")
            )
            if days:
                return True, days
        return False, ()

    @staticmethod
    def _at(day: date, hour: int, minute: int, tzinfo=None) -> datetime:
        return datetime(day.year, day.month, day.day, hour, minute, tzinfo=tzinfo)

    @staticmethod
    def _words_after(text: str, verbs: tuple[str, ...]) -> str:
        words = text.split()
        for index, word in enumerate(words):
            if word in verbs:
                title_words = []
                for following in words[index + 1 :]:
                    if following in TITLE_STOP_WORDS or following[0].isdigit():
                        break
                    if following in ("a", "an", "the", "my") and not title_words:
                        continue
                    title_words.append(following)
                return " ".join(title_words)
        return ""
