from __future__ import annotations

from collections.abc import Sequence

from .exceptions import InvalidInputError
from .models import ScoredSlot

DEFAULT_MAX_COUNT = 4


def select_diverse(
    scored_slots: Sequence[ScoredSlot], max_count: int = DEFAULT_MAX_COUNT
) -> list[ScoredSlot]:
    """Pick the best slots, spreading them over distinct days first.

    The first pass takes the top slot of each calendar day; if that leaves
    room, the second pass backfills with the best remaining slots regardless
    of day. The selection is returned in chronological order.
    """
    if max_count <= 0:
        raise InvalidInputError("max_count must be positive", "max_count")

    # sorted() is stable, so equal scores keep their input order
    ranked = sorted(scored_slots, key=lambda slot: slot.score, reverse=True)

    selected: list[ScoredSlot] = []
    chosen: set[int] = set()
    used_days = set()

    for index, slot in enumerate(ranked):
        if len(selected) >= max_count:
            break
        day = slot.start.date()
        if day not in used_days:
            selected.append(slot)
            chosen.add(index)
            used_days.add(day)

    for index, slot in enumerate(ranked):
        if len(selected) >= max_count:
            break
        if index not in chosen:
            selected.append(slot)
            chosen.add(index)

    return sorted(selected, key=lambda slot: slot.start)
