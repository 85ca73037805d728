"""
Schedule Optimizer

Suggests conflict-free, ranked time slots for flexible activities around a
user's fixed calendar commitments.
"""

from .api import optimize_schedule_api
from .core import OptimizerConfig, collect_scored_slots, find_optimal_times
from .exceptions import InvalidInputError, ParseError, ScheduleOptimizerError
from .models import (
    AfternoonPreference,
    AnyTimePreference,
    CandidateSlot,
    Category,
    ClockTime,
    Daily,
    DateRange,
    EveningPreference,
    FixedEvent,
    FlexibleTask,
    MorningPreference,
    ScoredSlot,
    SpecificDays,
    TimeOfDay,
    UserSchedulePreferences,
    WeeklyTimes,
)
from .parser import CalendarRequestParser
from .scoring import ScoringWeights
from .selection import select_diverse
from .timeutils import find_conflicts

__version__ = "0.1.0"
__all__ = [
    "AfternoonPreference",
    "AnyTimePreference",
    "CalendarRequestParser",
    "CandidateSlot",
    "Category",
    "ClockTime",
    "Daily",
    "DateRange",
    "EveningPreference",
    "find_conflicts",
    "find_optimal_times",
    "collect_scored_slots",
    "FixedEvent",
    "FlexibleTask",
    "InvalidInputError",
    "MorningPreference",
    "optimize_schedule_api",
    "OptimizerConfig",
    "ParseError",
    "ScheduleOptimizerError",
    "ScoredSlot",
    "ScoringWeights",
    "select_diverse",
    "SpecificDays",
    "TimeOfDay",
    "UserSchedulePreferences",
    "WeeklyTimes",
]
