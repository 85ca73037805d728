"""Composite slot scoring.

score = clamp(0, 1, base + sum(weight * factor)) over five factors, each in
[0, 1] before weighting:

    category    how well the hour suits the task's category
    preference  task-declared windows, else the user's category preference,
                else working-hours membership
    buffer      breathing room around same-day fixed events
    energy      category-independent energy curve
    diversity   mild bonus spreading suggestions across the day

The per-category data lives in ``CATEGORY_CURVES``; the weighting lives in
``ScoringWeights``. Keep the two apart so each can be tested on its own.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .models import (
    AnyTimePreference,
    CandidateSlot,
    Category,
    FixedEvent,
    FlexibleTask,
    TimeOfDay,
    UserSchedulePreferences,
)
from .timeutils import is_weekend, local_date, minutes_between

# (first_hour, last_hour, value), inclusive on both ends, first match wins
Band = tuple[int, int, float]


@dataclass(frozen=True)
class HourCurve:
    bands: tuple[Band, ...]
    default: float

    def __call__(self, hour: int) -> float:
        for first, last, value in self.bands:
            if first <= hour <= last:
                return value
        return self.default


@dataclass(frozen=True)
class CategoryCurve:
    weekday: HourCurve
    weekend: HourCurve | None = None

    def __call__(self, hour: int, weekend: bool) -> float:
        if weekend and self.weekend is not None:
            return self.weekend(hour)
        return self.weekday(hour)


_GENERAL = CategoryCurve(HourCurve(((9, 18, 0.7), (7, 21, 0.5)), 0.3))

CATEGORY_CURVES: dict[Category, CategoryCurve] = {
    Category.FITNESS: CategoryCurve(
        HourCurve(((6, 8, 0.9), (12, 13, 0.7), (17, 19, 0.8), (9, 11, 0.5)), 0.3)
    ),
    Category.WORK: CategoryCurve(HourCurve(((9, 17, 1.0), (8, 18, 0.7)), 0.3)),
    Category.STUDY: CategoryCurve(
        HourCurve(((8, 11, 0.9), (19, 21, 0.8), (14, 17, 0.6)), 0.4)
    ),
    Category.SOCIAL: CategoryCurve(
        weekday=HourCurve(((17, 22, 0.8), (12, 16, 0.6)), 0.4),
        weekend=HourCurve(((10, 22, 0.9),), 0.4),
    ),
    Category.HEALTH: CategoryCurve(HourCurve(((9, 16, 0.9), (8, 17, 0.7)), 0.3)),
    Category.PERSONAL: _GENERAL,
    Category.OTHER: _GENERAL,
}

ENERGY_CURVE = HourCurve(
    (
        (6, 8, 0.9),  # high morning energy
        (9, 11, 1.0),  # peak
        (12, 13, 0.6),  # post-lunch dip
        (14, 16, 0.8),
        (17, 19, 0.7),
        (20, 21, 0.5),  # wind-down
    ),
    0.3,
)

DIVERSITY_CURVE = HourCurve(
    ((6, 8, 0.8), (9, 11, 0.9), (12, 13, 0.7), (14, 16, 0.9), (17, 19, 0.8), (20, 21, 0.6)),
    0.4,
)

INSIDE_WINDOW_SCORE = 1.0
OUTSIDE_WINDOW_SCORE = 0.3
ANY_TIME_SCORE = 0.7
WORKING_HOURS_SCORE = 0.8
OFF_HOURS_SCORE = 0.6

SHORT_BUFFER_PENALTY = 0.3
TIGHT_BUFFER_PENALTY = 0.1


@dataclass(frozen=True)
class ScoringWeights:
    base: float = 0.5
    category: float = 0.40
    preference: float = 0.25
    buffer: float = 0.20
    energy: float = 0.10
    diversity: float = 0.05


@dataclass(frozen=True)
class ScoreBreakdown:
    category: float
    preference: float
    buffer: float
    energy: float
    diversity: float
    total: float


def category_score(category: Category, hour: int, weekend: bool = False) -> float:
    return CATEGORY_CURVES[category](hour, weekend)


def energy_score(hour: int) -> float:
    return ENERGY_CURVE(hour)


def diversity_score(hour: int) -> float:
    return DIVERSITY_CURVE(hour)


def _time_of_day_matches(preference: TimeOfDay, hour: int) -> bool:
    if preference == TimeOfDay.MORNING:
        return hour <= 12
    if preference == TimeOfDay.AFTERNOON:
        return 12 <= hour <= 17
    if preference == TimeOfDay.EVENING:
        return hour >= 17
    return True


def preference_score(
    hour: int, task: FlexibleTask, preferences: UserSchedulePreferences
) -> float:
    if task.preferred_times:
        best = 0.0
        for preferred in task.preferred_times:
            if isinstance(preferred, AnyTimePreference):
                value = ANY_TIME_SCORE
            elif preferred.matches(hour):
                value = INSIDE_WINDOW_SCORE
            else:
                value = OUTSIDE_WINDOW_SCORE
            best = max(best, value)
        return best

    time_of_day = preferences.category_preferences.get(task.category)
    if time_of_day is not None:
        if time_of_day == TimeOfDay.ANY:
            return ANY_TIME_SCORE
        if _time_of_day_matches(time_of_day, hour):
            return INSIDE_WINDOW_SCORE
        return OUTSIDE_WINDOW_SCORE

    if preferences.in_working_hours(hour):
        return WORKING_HOURS_SCORE
    return OFF_HOURS_SCORE


def _gap_penalty(gap_minutes: float, buffer_minutes: int) -> float:
    if gap_minutes < buffer_minutes:
        return SHORT_BUFFER_PENALTY
    if gap_minutes < 2 * buffer_minutes:
        return TIGHT_BUFFER_PENALTY
    return 0.0


def buffer_score(
    candidate: CandidateSlot, fixed_events: Sequence[FixedEvent], buffer_minutes: int
) -> float:
    """Start at 1.0 and subtract for each same-day event that sits too close.

    The gap before the candidate and the gap after it are checked
    independently for every event.
    """
    score = 1.0
    day = candidate.start.date()
    for event in fixed_events:
        if local_date(event.start, candidate.start.tzinfo) != day:
            continue
        if event.end <= candidate.start:
            score -= _gap_penalty(minutes_between(event.end, candidate.start), buffer_minutes)
        if event.start >= candidate.end:
            score -= _gap_penalty(minutes_between(candidate.end, event.start), buffer_minutes)
    return max(0.0, score)


def score_breakdown(
    candidate: CandidateSlot,
    task: FlexibleTask,
    preferences: UserSchedulePreferences,
    fixed_events: Sequence[FixedEvent],
    weights: ScoringWeights | None = None,
) -> ScoreBreakdown:
    if weights is None:
        weights = ScoringWeights()

    hour = candidate.start.hour
    factors = {
        "category": category_score(task.category, hour, is_weekend(candidate.start)),
        "preference": preference_score(hour, task, preferences),
        "buffer": buffer_score(candidate, fixed_events, preferences.buffer_minutes),
        "energy": energy_score(hour),
        "diversity": diversity_score(hour),
    }
    raw = weights.base + sum(
        getattr(weights, name) * value for name, value in factors.items()
    )
    return ScoreBreakdown(total=max(0.0, min(1.0, raw)), **factors)


def score_candidate(
    candidate: CandidateSlot,
    task: FlexibleTask,
    preferences: UserSchedulePreferences,
    fixed_events: Sequence[FixedEvent],
    weights: ScoringWeights | None = None,
) -> float:
    return score_breakdown(candidate, task, preferences, fixed_events, weights).total
