"""
Pydantic request/response models for the suggestion API.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from .models import (
    AfternoonPreference,
    AnyTimePreference,
    Category,
    Daily,
    EveningPreference,
    FixedEvent,
    FlexibleTask,
    MorningPreference,
    ScoredSlot,
    SpecificDays,
    TaskFrequency,
    TimeOfDay,
    TimePreference,
    UserSchedulePreferences,
    WeeklyTimes,
)


class TimePreferenceModel(BaseModel):
    """Preferred window for a task."""

    kind: Literal["morning", "afternoon", "evening", "any"] = Field(
        ..., description="Window kind"
    )
    before_hour: int = Field(9, ge=0, le=23, description="Morning: start before this hour")
    start_hour: int = Field(12, ge=0, le=23, description="Afternoon: first hour")
    end_hour: int = Field(17, ge=0, le=23, description="Afternoon: last hour")
    after_hour: int = Field(18, ge=0, le=23, description="Evening: start at or after this hour")

    def to_domain(self) -> TimePreference:
        if self.kind == "morning":
            return MorningPreference(before_hour=self.before_hour)
        if self.kind == "afternoon":
            return AfternoonPreference(start_hour=self.start_hour, end_hour=self.end_hour)
        if self.kind == "evening":
            return EveningPreference(after_hour=self.after_hour)
        return AnyTimePreference()


class FrequencyModel(BaseModel):
    """How often the task should happen."""

    kind: Literal["daily", "weekly", "specific"] = Field(..., description="Frequency kind")
    times: int | None = Field(None, gt=0, description="Weekly: occurrences per week")
    weekdays: list[int] = Field(
        default_factory=list, description="Specific: weekdays, Monday=0 ... Sunday=6"
    )

    @model_validator(mode="after")
    def check_payload(self) -> "FrequencyModel":
        if self.kind == "weekly" and self.times is None:
            raise ValueError("Weekly frequency needs 'times'")
        if self.kind == "specific" and not self.weekdays:
            raise ValueError("Specific frequency needs 'weekdays'")
        return self

    def to_domain(self) -> TaskFrequency:
        if self.kind == "daily":
            return Daily()
        if self.kind == "weekly":
            return WeeklyTimes(times=self.times)
        return SpecificDays(weekdays=tuple(self.weekdays))


class TaskModel(BaseModel):
    """Flexible task to find times for."""

    title: str = Field(..., min_length=1, description="Task title")
    duration_minutes: int = Field(..., gt=0, le=24 * 60, description="Duration in minutes")
    category: Category = Field(Category.OTHER, description="Task category")
    preferred_times: list[TimePreferenceModel] = Field(default_factory=list)
    count: int | None = Field(None, gt=0, description="Number of suggestions wanted")
    deadline: datetime | None = Field(None, description="Latest day the task may happen")
    frequency: FrequencyModel | None = Field(None, description="Recurrence")

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def to_domain(self) -> FlexibleTask:
        return FlexibleTask(
            title=self.title,
            duration_minutes=self.duration_minutes,
            category=self.category,
            preferred_times=tuple(p.to_domain() for p in self.preferred_times),
            suggestion_count=self.count,
            deadline=self.deadline,
            frequency=self.frequency.to_domain() if self.frequency else None,
        )


class FixedEventModel(BaseModel):
    """Existing commitment."""

    title: str = Field("Busy", description="Event title")
    start: datetime = Field(..., description="Start instant")
    duration_minutes: int = Field(..., gt=0, description="Duration in minutes")
    category: Category = Field(Category.OTHER, description="Event category")

    def to_domain(self) -> FixedEvent:
        return FixedEvent(
            title=self.title,
            start=self.start,
            duration_minutes=self.duration_minutes,
            category=self.category,
        )


class PreferencesModel(BaseModel):
    """User schedule preferences; omitted fields fall back to settings."""

    working_hours_start: int | None = Field(None, ge=0, le=23)
    working_hours_end: int | None = Field(None, ge=0, le=23)
    category_preferences: dict[Category, TimeOfDay] = Field(default_factory=dict)
    buffer_minutes: int | None = Field(None, ge=0)

    def to_domain(self, settings) -> UserSchedulePreferences:
        return UserSchedulePreferences(
            working_hours_start=(
                self.working_hours_start
                if self.working_hours_start is not None
                else settings.default_working_hours_start
            ),
            working_hours_end=(
                self.working_hours_end
                if self.working_hours_end is not None
                else settings.default_working_hours_end
            ),
            category_preferences=self.category_preferences,
            buffer_minutes=(
                self.buffer_minutes
                if self.buffer_minutes is not None
                else settings.default_buffer_minutes
            ),
        )


class SuggestionRequest(BaseModel):
    """Request model for the suggestion API."""

    task: TaskModel = Field(..., description="Task to schedule")
    range_start: datetime | None = Field(None, description="Search range start (inclusive)")
    range_end: datetime | None = Field(None, description="Search range end (exclusive)")
    fixed_events: list[FixedEventModel] = Field(default_factory=list)
    preferences: PreferencesModel = Field(default_factory=PreferencesModel)
    now: datetime | None = Field(None, description="Reference instant for default ranges")

    @model_validator(mode="after")
    def check_range(self) -> "SuggestionRequest":
        # Ordering comparisons below need a consistent kind of datetime
        aware = {moment.tzinfo is not None for moment in self._moments()}
        if len(aware) > 1:
            raise ValueError("Datetimes must be all timezone-aware or all naive")

        if (
            self.range_start is not None
            and self.range_end is not None
            and self.range_end <= self.range_start
        ):
            raise ValueError("range_end must be after range_start")
        return self

    def _moments(self) -> list[datetime]:
        moments = [self.range_start, self.range_end, self.now, self.task.deadline]
        moments.extend(event.start for event in self.fixed_events)
        return [moment for moment in moments if moment is not None]

    @property
    def tzinfo(self):
        """Timezone of the request's instants, None when they are naive."""
        return next(
            (moment.tzinfo for moment in self._moments() if moment.tzinfo is not None), None
        )


class SuggestionModel(BaseModel):
    """One suggested slot."""

    start: datetime
    end: datetime
    duration_minutes: int
    score: float = Field(..., ge=0.0, le=1.0)
    reasoning: str
    category: Category

    @classmethod
    def from_slot(cls, slot: ScoredSlot) -> "SuggestionModel":
        return cls(
            start=slot.start,
            end=slot.end,
            duration_minutes=slot.duration_minutes,
            score=round(slot.score, 4),
            reasoning=slot.reasoning,
            category=slot.category,
        )


class SuggestionResult(BaseModel):
    """Result of a suggestion run."""

    success: bool = Field(..., description="Whether the request could be processed")
    suggestions: list[SuggestionModel] = Field(default_factory=list)
    status: str = Field("", description="OK, NO_AVAILABLE_TIMES or ERROR: ...")
    searched_days: int = Field(0, description="Calendar days searched")
    solve_time_seconds: float = Field(0.0, description="Time taken")


class SuggestionResponse(BaseModel):
    """Response model for the suggestion API."""

    result: SuggestionResult = Field(..., description="Suggestion result")
    request_id: str | None = Field(None, description="Request identifier")
    generated_at: datetime = Field(default_factory=datetime.now)
