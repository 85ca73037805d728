"""Calendar arithmetic shared by the generator, scorer and parser.

Every helper is a pure function over naive or aware ``datetime`` values; the
caller decides which clock the values belong to.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import FixedEvent

WEEKEND_DAYS = (5, 6)  # datetime.weekday(): Saturday, Sunday


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def day_start(day: date, tzinfo=None) -> datetime:
    """Midnight at the beginning of ``day``."""
    return datetime.combine(day, time.min, tzinfo=tzinfo)


def next_midnight(moment: datetime) -> datetime:
    return start_of_day(moment) + timedelta(days=1)


def hour_of(moment: datetime) -> int:
    return moment.hour


def weekday_of(moment: datetime | date) -> int:
    return moment.weekday()


def is_weekend(moment: datetime | date) -> bool:
    return moment.weekday() in WEEKEND_DAYS


def same_day(first: datetime, second: datetime | date) -> bool:
    other = second.date() if isinstance(second, datetime) else second
    return first.date() == other


def overlaps(
    start: datetime, end: datetime, other_start: datetime, other_end: datetime
) -> bool:
    """Half-open interval overlap: touching intervals do not overlap."""
    return start < other_end and end > other_start


def minutes_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / 60


def is_aware(moment: datetime) -> bool:
    return moment.tzinfo is not None and moment.utcoffset() is not None


def local_date(moment: datetime, tzinfo=None) -> date:
    """Calendar date of ``moment`` on the clock of ``tzinfo``.

    Naive values, or a missing ``tzinfo``, keep their own wall-clock date.
    """
    if tzinfo is not None and is_aware(moment):
        return moment.astimezone(tzinfo).date()
    return moment.date()


def events_on_day(
    events: Iterable[FixedEvent], day: date, tzinfo=None
) -> list[FixedEvent]:
    """Events starting on ``day`` in ``tzinfo``, ordered by start."""
    return sorted(
        (event for event in events if local_date(event.start, tzinfo) == day),
        key=lambda event: event.start,
    )


def find_conflicts(
    start: datetime, end: datetime, events: Iterable[FixedEvent]
) -> list[FixedEvent]:
    return [event for event in events if overlaps(start, end, event.start, event.end)]
