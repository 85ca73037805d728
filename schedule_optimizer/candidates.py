"""Candidate start times for a single day.

Each category proposes a handful of anchor hours; every anchor is expanded by
a fixed set of minute offsets and the resulting windows are kept only when
they stay on the same calendar day and do not overlap a fixed event.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date

from .models import (
    CandidateSlot,
    Category,
    ClockTime,
    FixedEvent,
    FlexibleTask,
    UserSchedulePreferences,
)
from .timeutils import local_date, overlaps

logger = logging.getLogger(__name__)

MINUTE_OFFSETS: tuple[int, ...] = (0, 15, 30, 45)

# Work follows the user's configured working hours and is resolved at call time.
ANCHOR_HOURS: dict[Category, tuple[int, ...]] = {
    Category.FITNESS: (6, 7, 8, 12, 13, 17, 18, 19),  # early morning, lunch, after work
    Category.STUDY: (8, 9, 10, 11, 14, 15, 19, 20),  # morning focus, afternoon, review
    Category.SOCIAL: (12, 13, 17, 18, 19, 20, 21),
    Category.HEALTH: tuple(range(9, 17)),  # appointment hours
    Category.PERSONAL: tuple(range(8, 21)),
    Category.OTHER: tuple(range(8, 21)),
}


def anchor_hours(category: Category, preferences: UserSchedulePreferences) -> tuple[int, ...]:
    if category == Category.WORK:
        return tuple(
            range(preferences.working_hours_start, preferences.working_hours_end + 1)
        )
    return ANCHOR_HOURS[category]


def candidate_times(
    category: Category,
    preferences: UserSchedulePreferences,
    minute_offsets: Sequence[int] = MINUTE_OFFSETS,
) -> list[ClockTime]:
    return [
        ClockTime(hour, minute)
        for hour in anchor_hours(category, preferences)
        for minute in minute_offsets
    ]


def generate_candidates(
    day: date,
    task: FlexibleTask,
    preferences: UserSchedulePreferences,
    fixed_events: Sequence[FixedEvent],
    *,
    minute_offsets: Sequence[int] = MINUTE_OFFSETS,
    tzinfo=None,
) -> list[CandidateSlot]:
    """Conflict-free candidate windows for ``task`` on ``day``.

    Args:
        day: Calendar day to generate for
        task: Task whose duration and category shape the windows
        preferences: User preferences (working hours feed the work anchors)
        fixed_events: Commitments on that day; events starting on other days
            (on the clock of ``tzinfo``) are ignored
        minute_offsets: Offsets applied to every anchor hour
        tzinfo: Timezone attached to generated instants

    Returns:
        Candidates in chronological order
    """
    busy = [
        (event.start, event.end)
        for event in fixed_events
        if local_date(event.start, tzinfo) == day
    ]
    candidates: list[CandidateSlot] = []
    rejected = 0

    for clock in candidate_times(task.category, preferences, minute_offsets):
        start = clock.on(day, tzinfo)
        end = start + task.duration

        # A window ending at midnight already belongs to the next day
        if end.date() != day:
            rejected += 1
            continue

        if any(overlaps(start, end, busy_start, busy_end) for busy_start, busy_end in busy):
            rejected += 1
            continue

        candidates.append(CandidateSlot(start=start, end=end, category=task.category))

    logger.debug(
        f"{day.isoformat()}: {len(candidates)} candidates for '{task.title}' "
        f"({rejected} rejected)"
    )
    return candidates
