"""Schedule optimization entry point.

Drives candidate generation, scoring, reasoning and diverse selection across
a date range. Pure: no I/O beyond logging and no state kept between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Sequence
from dataclasses import dataclass, field

from .candidates import MINUTE_OFFSETS, generate_candidates
from .exceptions import InvalidInputError
from .models import (
    DateRange,
    FixedEvent,
    FlexibleTask,
    ScoredSlot,
    UserSchedulePreferences,
)
from .reasoning import explain
from .scoring import ScoringWeights, score_candidate
from .selection import DEFAULT_MAX_COUNT, select_diverse
from .timeutils import events_on_day, is_aware

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptimizerConfig:
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    minute_offsets: tuple[int, ...] = MINUTE_OFFSETS
    default_suggestion_count: int = DEFAULT_MAX_COUNT

    def __post_init__(self):
        if not self.minute_offsets:
            raise InvalidInputError("at least one minute offset is required", "minute_offsets")
        for offset in self.minute_offsets:
            if not 0 <= offset <= 59:
                raise InvalidInputError(
                    f"minute offset must be in 0..59, got {offset}", "minute_offsets"
                )
        if self.default_suggestion_count <= 0:
            raise InvalidInputError(
                "default suggestion count must be positive", "default_suggestion_count"
            )


def check_timezones(date_range: DateRange, fixed_events: Sequence[FixedEvent]) -> None:
    """Range and events must be all timezone-aware or all naive."""
    aware = is_aware(date_range.start)
    for event in fixed_events:
        if is_aware(event.start) != aware:
            raise InvalidInputError(
                f"'{event.title}' starts at {event.start.isoformat()}; fixed events and "
                "the date range must be all timezone-aware or all naive",
                "fixed_events",
            )


def collect_scored_slots(
    task: FlexibleTask,
    date_range: DateRange,
    fixed_events: Sequence[FixedEvent],
    preferences: UserSchedulePreferences,
    *,
    config: OptimizerConfig | None = None,
    weekdays: Collection[int] | None = None,
) -> list[ScoredSlot]:
    """Score every conflict-free candidate in the range, chronologically.

    ``weekdays`` optionally restricts generation to those ``date.weekday()``
    values.
    """
    if config is None:
        config = OptimizerConfig()

    check_timezones(date_range, fixed_events)
    tzinfo = date_range.start.tzinfo
    scored: list[ScoredSlot] = []
    for day in date_range.days():
        if weekdays is not None and day.weekday() not in weekdays:
            continue
        day_events = events_on_day(fixed_events, day, tzinfo)
        for candidate in generate_candidates(
            day,
            task,
            preferences,
            day_events,
            minute_offsets=config.minute_offsets,
            tzinfo=tzinfo,
        ):
            score = score_candidate(candidate, task, preferences, day_events, config.weights)
            scored.append(
                ScoredSlot(
                    start=candidate.start,
                    end=candidate.end,
                    score=score,
                    reasoning=explain(candidate, task, score),
                    category=candidate.category,
                )
            )
    return scored


def find_optimal_times(
    task: FlexibleTask,
    date_range: DateRange,
    fixed_events: Sequence[FixedEvent],
    preferences: UserSchedulePreferences | None = None,
    *,
    max_count: int | None = None,
    config: OptimizerConfig | None = None,
) -> list[ScoredSlot]:
    """
    Find ranked, conflict-free time slots for a flexible task.

    Args:
        task: Task to place
        date_range: Half-open range whose calendar days are searched
        fixed_events: Commitments to avoid
        preferences: User preferences, defaults when omitted
        max_count: Number of suggestions; falls back to the task's
            suggestion count, then the config default
        config: Weights, minute offsets and defaults

    Returns:
        Chronologically ordered suggestions. Empty when nothing fits.
    """
    if preferences is None:
        preferences = UserSchedulePreferences()
    if config is None:
        config = OptimizerConfig()

    if max_count is None:
        max_count = task.suggestion_count or config.default_suggestion_count
    if max_count <= 0:
        raise InvalidInputError("max_count must be positive", "max_count")
    count = max_count

    logger.info(
        f"Finding {count} slots for '{task.title}' ({task.duration_minutes} min, "
        f"{task.category.value}) between {date_range.start} and {date_range.end}, "
        f"avoiding {len(fixed_events)} fixed events"
    )

    scored = collect_scored_slots(
        task, date_range, fixed_events, preferences, config=config
    )
    if not scored:
        logger.info(f"No available times for '{task.title}'")
        return []

    selected = select_diverse(scored, count)
    logger.info(f"Selected {len(selected)} of {len(scored)} scored candidates")
    return selected
