"""
Tests for diverse slot selection.
"""

from datetime import datetime, timedelta

import pytest

from schedule_optimizer.exceptions import InvalidInputError
from schedule_optimizer.models import Category, ScoredSlot
from schedule_optimizer.selection import select_diverse


def scored(day: int, hour: int, score: float) -> ScoredSlot:
    start = datetime(2025, 6, day, hour, 0)
    return ScoredSlot(start, start + timedelta(hours=1), score, "", Category.OTHER)


class TestSelectDiverse:
    """Test cases for select_diverse."""

    def test_one_per_day_first(self):
        """Test that distinct days are preferred over higher scores on the same day."""
        slots = [
            scored(23, 9, 0.95),
            scored(23, 10, 0.94),
            scored(24, 9, 0.7),
            scored(25, 9, 0.6),
        ]
        result = select_diverse(slots, 3)
        assert [slot.start.day for slot in result] == [23, 24, 25]

    def test_backfill_with_best_remaining(self):
        """Test that remaining places are filled by score regardless of day."""
        slots = [
            scored(23, 9, 0.95),
            scored(23, 10, 0.94),
            scored(23, 11, 0.5),
            scored(24, 9, 0.7),
        ]
        result = select_diverse(slots, 3)
        assert result == [slots[0], slots[1], slots[3]]

    def test_chronological_output(self):
        """Test that the selection is returned in chronological order."""
        slots = [scored(25, 9, 0.9), scored(23, 9, 0.5), scored(24, 9, 0.7)]
        result = select_diverse(slots, 3)
        assert [slot.start for slot in result] == sorted(slot.start for slot in slots)

    def test_ties_keep_input_order(self):
        """Test that equal scores are taken in input order."""
        slots = [scored(23, hour, 1.0) for hour in (6, 7, 8)]
        assert select_diverse(slots, 1) == [slots[0]]
        assert select_diverse(slots, 2) == [slots[0], slots[1]]

    def test_fewer_slots_than_requested(self):
        """Test that all slots are returned when fewer exist than requested."""
        slots = [scored(23, 9, 0.9), scored(23, 10, 0.8)]
        assert len(select_diverse(slots, 4)) == 2

    def test_empty_input(self):
        """Test that nothing in gives nothing out."""
        assert select_diverse([], 4) == []

    def test_duplicate_slots_both_selectable(self):
        """Test that equal slot values are tracked by position, not value."""
        slot = scored(23, 9, 0.9)
        assert select_diverse([slot, slot], 2) == [slot, slot]

    @pytest.mark.parametrize("count", [0, -1])
    def test_non_positive_count(self, count):
        """Test that the count must be positive."""
        with pytest.raises(InvalidInputError):
            select_diverse([scored(23, 9, 0.9)], count)
