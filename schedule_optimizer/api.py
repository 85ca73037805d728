"""
API wrapper functions for time slot suggestions.

Accepts JSON-compatible dictionaries, applies the request-level policies the
optimizer core leaves to its caller (default ranges, deadlines, recurrence)
and returns JSON-compatible dictionaries.
"""

import logging
import time
import uuid
from datetime import datetime, timedelta
from typing import Any

from pydantic import ValidationError

from .config import Settings, get_settings
from .core import OptimizerConfig, collect_scored_slots, find_optimal_times
from .exceptions import InvalidInputError, ScheduleOptimizerError
from .models import DateRange, Daily, FlexibleTask, ScoredSlot, SpecificDays, WeeklyTimes
from .schemas import (
    SuggestionModel,
    SuggestionRequest,
    SuggestionResponse,
    SuggestionResult,
    TaskModel,
)
from .selection import select_diverse
from .timeutils import next_midnight, start_of_day

logger = logging.getLogger(__name__)


def resolve_date_range(
    request: SuggestionRequest,
    task: FlexibleTask,
    settings: Settings,
    now: datetime,
) -> DateRange | None:
    """Search range for a request, or None when the deadline leaves nothing.

    Raises:
        InvalidInputError: If ``range_end`` is not after the resolved start
    """
    start = request.range_start or start_of_day(now)
    end = request.range_end or start + timedelta(days=settings.default_horizon_days)
    if end <= start:
        raise InvalidInputError(
            f"range_end {end.isoformat()} must be after range start {start.isoformat()}",
            "range_end",
        )

    if task.deadline is not None:
        end = min(end, next_midnight(task.deadline))

    if end <= start:
        return None
    return DateRange(start, end)


def resolve_suggestion_count(
    task: FlexibleTask, date_range: DateRange, settings: Settings
) -> int:
    if task.suggestion_count:
        return task.suggestion_count
    if isinstance(task.frequency, WeeklyTimes):
        return task.frequency.times
    if isinstance(task.frequency, Daily):
        return len(list(date_range.days()))
    return settings.default_suggestion_count


def suggest_times(
    request: SuggestionRequest, settings: Settings | None = None
) -> tuple[list[ScoredSlot], int]:
    """Run the optimizer for a validated request.

    Returns:
        Selected slots and the number of calendar days searched
    """
    if settings is None:
        settings = get_settings()

    task = request.task.to_domain()
    preferences = request.preferences.to_domain(settings)
    fixed_events = [event.to_domain() for event in request.fixed_events]
    now = request.now or datetime.now(request.tzinfo)

    date_range = resolve_date_range(request, task, settings, now)
    if date_range is None:
        logger.info(f"Deadline for '{task.title}' leaves no days to search")
        return [], 0

    count = resolve_suggestion_count(task, date_range, settings)
    config = OptimizerConfig(default_suggestion_count=settings.default_suggestion_count)

    if isinstance(task.frequency, SpecificDays):
        weekdays = set(task.frequency.weekdays)
        days = [day for day in date_range.days() if day.weekday() in weekdays]
        scored = collect_scored_slots(
            task, date_range, fixed_events, preferences, config=config, weekdays=weekdays
        )
        return (select_diverse(scored, count) if scored else []), len(days)

    slots = find_optimal_times(
        task, date_range, fixed_events, preferences, max_count=count, config=config
    )
    return slots, len(list(date_range.days()))


def optimize_schedule_api(
    request_data: dict[str, Any], settings: Settings | None = None
) -> dict[str, Any]:
    """
    API wrapper for time slot suggestions.

    Args:
        request_data: Dictionary containing suggestion request data
        settings: Optional settings override

    Returns:
        Dictionary containing suggestion response data. Invalid requests yield
        ``success: False`` with an ``ERROR: ...`` status instead of raising.
    """
    request_id = str(uuid.uuid4())
    start_time = time.time()

    try:
        request = SuggestionRequest.model_validate(request_data)
        slots, searched_days = suggest_times(request, settings)
    except (ValidationError, ScheduleOptimizerError, ValueError) as e:
        logger.warning(f"Suggestion request {request_id} rejected: {e}")
        result = SuggestionResult(
            success=False,
            suggestions=[],
            status=f"ERROR: {str(e)}",
            solve_time_seconds=time.time() - start_time,
        )
    else:
        result = SuggestionResult(
            success=True,
            suggestions=[SuggestionModel.from_slot(slot) for slot in slots],
            status="OK" if slots else "NO_AVAILABLE_TIMES",
            searched_days=searched_days,
            solve_time_seconds=time.time() - start_time,
        )

    response = SuggestionResponse(
        result=result,
        request_id=request_id,
        generated_at=datetime.now(),
    )
    return response.model_dump(mode="json")


def create_task_from_dict(task_data: dict[str, Any]) -> FlexibleTask:
    """
    Create FlexibleTask instance from dictionary data.

    Raises:
        pydantic.ValidationError: If the data is not a valid task
    """
    return TaskModel.model_validate(task_data).to_domain()


def format_suggestions(slots: list[ScoredSlot]) -> list[dict[str, Any]]:
    """
    Format slots for display, e.g. ``"Monday 7:00 AM"``.
    """
    formatted = []
    for slot in slots:
        hour = slot.start.hour % 12 or 12
        formatted.append(
            {
                "label": f"{slot.start:%A} {hour}:{slot.start:%M %p}",
                "date": slot.start.date().isoformat(),
                "start_time": slot.start.strftime("%H:%M"),
                "end_time": slot.end.strftime("%H:%M"),
                "score": round(slot.score, 2),
                "reasoning": slot.reasoning,
            }
        )
    return formatted


def validate_suggestion_request(request_data: dict[str, Any]) -> str | None:
    """
    Validate suggestion request data.

    Returns:
        Error message if validation fails, None if valid
    """
    if not isinstance(request_data, dict):
        return "Request must be a dictionary"
    if "task" not in request_data:
        return "Missing required field: task"

    task = request_data["task"]
    if not isinstance(task, dict):
        return "Task must be a dictionary"
    for field in ("title", "duration_minutes"):
        if field not in task:
            return f"Task missing required field: {field}"

    events = request_data.get("fixed_events", [])
    if not isinstance(events, list):
        return "Fixed events must be a list"
    for i, event in enumerate(events):
        if not isinstance(event, dict):
            return f"Fixed event {i} must be a dictionary"
        for field in ("start", "duration_minutes"):
            if field not in event:
                return f"Fixed event {i} missing required field: {field}"

    try:
        SuggestionRequest.model_validate(request_data)
    except ValidationError as e:
        first = e.errors()[0]
        location = " -> ".join(str(loc) for loc in first["loc"]) or "request"
        return f"Validation error for {location}: {first['msg']}"

    return None
