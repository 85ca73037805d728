"""
Tests for slot explanations.
"""

from datetime import datetime, timedelta

from schedule_optimizer.models import CandidateSlot, Category, FlexibleTask
from schedule_optimizer.reasoning import category_phrase, explain, hour_phrase, score_phrase


def candidate(hour: int, category: Category) -> CandidateSlot:
    start = datetime(2025, 6, 23, hour, 0)
    return CandidateSlot(start, start + timedelta(hours=1), category)


class TestReasoning:
    """Test cases for reasoning phrases."""

    def test_hour_phrases(self):
        """Test phrases for the hour bands and the fallback."""
        assert hour_phrase(7) == "Early morning energy and focus"
        assert hour_phrase(12) == "Convenient lunch break timing"
        assert hour_phrase(23) == "Available time slot"

    def test_category_phrase(self):
        """Test category phrases exist only where a category has one."""
        assert category_phrase(Category.FITNESS, 18) == "Perfect for after-work exercise"
        assert category_phrase(Category.FITNESS, 12) is None
        assert category_phrase(Category.SOCIAL, 18) is None

    def test_score_phrases(self):
        """Test score thresholds are inclusive."""
        assert score_phrase(0.8) == "Excellent fit for your schedule"
        assert score_phrase(0.6) == "Good option with no conflicts"
        assert score_phrase(0.59) == "Available but not ideal timing"

    def test_explain_fitness_morning(self):
        """Test the full explanation for an early workout."""
        task = FlexibleTask("Gym", 60, Category.FITNESS)
        assert explain(candidate(7, Category.FITNESS), task, 1.0) == (
            "Early morning energy and focus, Ideal for morning workouts, "
            "Excellent fit for your schedule"
        )

    def test_explain_without_category_phrase(self):
        """Test an explanation with no category-specific phrase."""
        task = FlexibleTask("Errand", 60)
        assert explain(candidate(23, Category.OTHER), task, 0.5) == (
            "Available time slot, Available but not ideal timing"
        )
