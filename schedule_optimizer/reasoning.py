"""Human-readable explanations for suggested slots."""

from __future__ import annotations

from .models import CandidateSlot, Category, FlexibleTask

# (first_hour, last_hour, phrase), inclusive
HOUR_PHRASES: tuple[tuple[int, int, str], ...] = (
    (6, 8, "Early morning energy and focus"),
    (9, 11, "Prime morning productivity hours"),
    (12, 13, "Convenient lunch break timing"),
    (14, 16, "Post-lunch active period"),
    (17, 19, "After-work availability"),
    (20, 21, "Evening relaxation time"),
)
DEFAULT_HOUR_PHRASE = "Available time slot"

CATEGORY_PHRASES: dict[Category, tuple[tuple[int, int, str], ...]] = {
    Category.FITNESS: (
        (6, 8, "Ideal for morning workouts"),
        (17, 19, "Perfect for after-work exercise"),
    ),
    Category.STUDY: ((8, 11, "Optimal focus and concentration time"),),
    Category.WORK: ((9, 17, "Standard business hours"),),
}

EXCELLENT_THRESHOLD = 0.8
GOOD_THRESHOLD = 0.6


def _lookup(table, hour: int) -> str | None:
    for first, last, phrase in table:
        if first <= hour <= last:
            return phrase
    return None


def hour_phrase(hour: int) -> str:
    return _lookup(HOUR_PHRASES, hour) or DEFAULT_HOUR_PHRASE


def category_phrase(category: Category, hour: int) -> str | None:
    return _lookup(CATEGORY_PHRASES.get(category, ()), hour)


def score_phrase(score: float) -> str:
    if score >= EXCELLENT_THRESHOLD:
        return "Excellent fit for your schedule"
    if score >= GOOD_THRESHOLD:
        return "Good option with no conflicts"
    return "Available but not ideal timing"


def explain(candidate: CandidateSlot, task: FlexibleTask, score: float) -> str:
    hour = candidate.start.hour
    reasons = [hour_phrase(hour)]
    extra = category_phrase(task.category, hour)
    if extra:
        reasons.append(extra)
    reasons.append(score_phrase(score))
    return ", ".join(reasons)
