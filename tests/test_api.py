"""
Tests for suggestion API wrapper functions.
"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from schedule_optimizer.api import (
    create_task_from_dict,
    format_suggestions,
    optimize_schedule_api,
    validate_suggestion_request,
)
from schedule_optimizer.config import Settings
from schedule_optimizer.models import Category, ScoredSlot, WeeklyTimes

NOW = "2025-06-23T08:00:00"  # Monday


def request(**task_fields) -> dict:
    task = {"title": "Gym", "duration_minutes": 60, "category": "fitness"}
    task.update(task_fields)
    return {"task": task, "now": NOW}


def suggestion_starts(response: dict) -> list[datetime]:
    return [
        datetime.fromisoformat(suggestion["start"])
        for suggestion in response["result"]["suggestions"]
    ]


class TestOptimizeScheduleAPI:
    """Test cases for optimize_schedule_api."""

    def test_success(self):
        """Test a successful request with defaults."""
        response = optimize_schedule_api(request())

        assert "request_id" in response
        assert "generated_at" in response
        result = response["result"]
        assert result["success"] is True
        assert result["status"] == "OK"
        assert result["searched_days"] == 7
        assert len(result["suggestions"]) == 4
        for suggestion in result["suggestions"]:
            assert suggestion["duration_minutes"] == 60
            assert suggestion["category"] == "fitness"
            assert 0.0 <= suggestion["score"] <= 1.0
            assert suggestion["reasoning"]

    def test_fixed_events_avoided(self):
        """Test that suggestions avoid the request's fixed events."""
        data = request(count=7)
        data["range_start"] = "2025-06-23T00:00:00"
        data["range_end"] = "2025-06-24T00:00:00"
        data["fixed_events"] = [
            {"title": "Early", "start": "2025-06-23T06:00:00", "duration_minutes": 180},
        ]

        response = optimize_schedule_api(data)

        starts = suggestion_starts(response)
        assert len(starts) == 7
        assert all(start.hour >= 9 for start in starts)

    def test_validation_error(self):
        """Test an invalid duration is reported instead of raised."""
        response = optimize_schedule_api(request(duration_minutes=0))

        assert response["result"]["success"] is False
        assert response["result"]["status"].startswith("ERROR")
        assert response["result"]["suggestions"] == []

    def test_unknown_category(self):
        """Test an unknown category is reported as an error."""
        response = optimize_schedule_api(request(category="gardening"))
        assert response["result"]["success"] is False

    def test_reversed_range(self):
        """Test a range ending before it starts is rejected."""
        data = request()
        data["range_start"] = "2025-06-25T00:00:00"
        data["range_end"] = "2025-06-24T00:00:00"
        response = optimize_schedule_api(data)
        assert response["result"]["success"] is False

    def test_mixed_timezones_rejected(self):
        """Test that aware and naive datetimes cannot be mixed in one request."""
        data = request()
        data["fixed_events"] = [
            {"start": "2025-06-23T09:00:00+09:00", "duration_minutes": 60},
        ]
        response = optimize_schedule_api(data)

        assert response["result"]["success"] is False
        assert "timezone" in response["result"]["status"]

    def test_mixed_range_bounds_rejected(self):
        """Test an aware range start with a naive range end is reported, not raised."""
        data = request()
        del data["now"]
        data["range_start"] = "2025-06-23T00:00:00+00:00"
        data["range_end"] = "2025-06-24T00:00:00"

        response = optimize_schedule_api(data)

        assert response["result"]["success"] is False
        assert "timezone" in response["result"]["status"]

    def test_range_end_before_default_start(self):
        """Test a lone range_end before the default start is an error."""
        data = request()
        data["range_end"] = "2025-06-20T00:00:00"

        response = optimize_schedule_api(data)

        assert response["result"]["success"] is False
        assert "range_end" in response["result"]["status"]

    def test_aware_events_in_other_offset(self):
        """Test suggestions avoid an event given in a different UTC offset."""
        data = request(count=10)
        data["now"] = "2025-06-24T00:00:00+09:00"
        data["range_start"] = "2025-06-24T00:00:00+09:00"
        data["range_end"] = "2025-06-25T00:00:00+09:00"
        data["fixed_events"] = [
            {"title": "Early call", "start": "2025-06-23T21:00:00Z", "duration_minutes": 180},
        ]

        starts = suggestion_starts(optimize_schedule_api(data))

        assert starts
        assert all(start.hour >= 9 for start in starts)

    def test_category_case_insensitive(self):
        """Test category names are accepted in any case."""
        response = optimize_schedule_api(request(category="Fitness"))
        assert response["result"]["success"] is True

    def test_explicit_count(self):
        """Test an explicit count wins over frequency."""
        data = request(count=2, frequency={"kind": "weekly", "times": 5})
        assert len(optimize_schedule_api(data)["result"]["suggestions"]) == 2

    def test_weekly_frequency_count(self):
        """Test weekly frequency sets the number of suggestions."""
        data = request(frequency={"kind": "weekly", "times": 3})
        assert len(optimize_schedule_api(data)["result"]["suggestions"]) == 3

    def test_daily_frequency_count(self):
        """Test daily frequency asks for one suggestion per searched day."""
        response = optimize_schedule_api(request(frequency={"kind": "daily"}))

        starts = suggestion_starts(response)
        assert len(starts) == 7
        assert len({start.date() for start in starts}) == 7

    def test_specific_days(self):
        """Test specific-day frequency restricts suggestions to those weekdays."""
        response = optimize_schedule_api(
            request(frequency={"kind": "specific", "weekdays": [0, 2]})
        )

        assert response["result"]["searched_days"] == 2
        starts = suggestion_starts(response)
        assert starts
        assert {start.weekday() for start in starts} <= {0, 2}

    def test_specific_days_requires_weekdays(self):
        """Test specific-day frequency without weekdays is rejected."""
        response = optimize_schedule_api(request(frequency={"kind": "specific"}))
        assert response["result"]["success"] is False

    def test_specific_days_out_of_range(self):
        """Test weekday numbers outside 0..6 are reported as errors."""
        response = optimize_schedule_api(
            request(frequency={"kind": "specific", "weekdays": [9]})
        )
        assert response["result"]["success"] is False
        assert "weekdays" in response["result"]["status"]

    def test_deadline_clips_range(self):
        """Test no suggestion lands after the deadline's day."""
        response = optimize_schedule_api(request(deadline="2025-06-25T10:00:00"))

        assert response["result"]["searched_days"] == 3
        starts = suggestion_starts(response)
        assert len(starts) == 4
        assert all(start < datetime(2025, 6, 26) for start in starts)

    def test_deadline_already_passed(self):
        """Test a deadline before the range leaves nothing to search."""
        response = optimize_schedule_api(request(deadline="2025-06-20T10:00:00"))

        result = response["result"]
        assert result["success"] is True
        assert result["status"] == "NO_AVAILABLE_TIMES"
        assert result["searched_days"] == 0
        assert result["suggestions"] == []

    def test_fully_booked(self):
        """Test a fully booked range reports no available times."""
        data = request()
        data["range_start"] = "2025-06-23T00:00:00"
        data["range_end"] = "2025-06-24T00:00:00"
        data["fixed_events"] = [
            {"start": "2025-06-23T00:00:00", "duration_minutes": 24 * 60 - 1},
        ]

        result = optimize_schedule_api(data)["result"]

        assert result["success"] is True
        assert result["status"] == "NO_AVAILABLE_TIMES"

    def test_settings_override(self):
        """Test settings supply the default count and horizon."""
        settings = Settings(default_suggestion_count=2, default_horizon_days=3)
        result = optimize_schedule_api(request(), settings)["result"]

        assert len(result["suggestions"]) == 2
        assert result["searched_days"] == 3

    def test_preferences_override_settings(self):
        """Test request preferences take priority over settings defaults."""
        data = request(category="work")
        data["preferences"] = {"working_hours_start": 13, "working_hours_end": 14}
        starts = suggestion_starts(optimize_schedule_api(data))
        assert starts
        assert all(13 <= start.hour <= 14 for start in starts)


class TestHelpers:
    """Test cases for API helper functions."""

    def test_create_task_from_dict(self):
        """Test task creation from dictionary."""
        task = create_task_from_dict(
            {
                "title": "Run",
                "duration_minutes": 45,
                "category": "FITNESS",
                "count": 3,
                "deadline": "2025-06-25T10:00:00",
                "frequency": {"kind": "weekly", "times": 3},
            }
        )

        assert task.title == "Run"
        assert task.duration_minutes == 45
        assert task.category == Category.FITNESS
        assert task.suggestion_count == 3
        assert task.deadline == datetime(2025, 6, 25, 10, 0)
        assert task.frequency == WeeklyTimes(times=3)

    def test_create_task_from_dict_minimal(self):
        """Test task creation with minimal data."""
        task = create_task_from_dict({"title": "Errand", "duration_minutes": 20})

        assert task.category == Category.OTHER
        assert task.preferred_times == ()
        assert task.frequency is None

    def test_create_task_invalid(self):
        """Test task creation with missing duration."""
        with pytest.raises(ValidationError):
            create_task_from_dict({"title": "Errand"})

    def test_format_suggestions(self):
        """Test compact presentation of slots."""
        slot = ScoredSlot(
            start=datetime(2025, 6, 23, 7, 0),
            end=datetime(2025, 6, 23, 8, 0),
            score=0.876,
            reasoning="Early morning energy and focus",
            category=Category.FITNESS,
        )

        formatted = format_suggestions([slot])

        assert formatted == [
            {
                "label": "Monday 7:00 AM",
                "date": "2025-06-23",
                "start_time": "07:00",
                "end_time": "08:00",
                "score": 0.88,
                "reasoning": "Early morning energy and focus",
            }
        ]

    def test_validate_suggestion_request_valid(self):
        """Test validation of a valid request."""
        assert validate_suggestion_request(request()) is None

    def test_validate_suggestion_request_missing_task(self):
        """Test validation with the task missing."""
        assert validate_suggestion_request({}) == "Missing required field: task"

    def test_validate_suggestion_request_missing_task_field(self):
        """Test validation with a task field missing."""
        error = validate_suggestion_request({"task": {"title": "Gym"}})
        assert error == "Task missing required field: duration_minutes"

    def test_validate_suggestion_request_bad_events(self):
        """Test validation of fixed events."""
        data = request()
        data["fixed_events"] = "busy"
        assert validate_suggestion_request(data) == "Fixed events must be a list"

        data["fixed_events"] = [{"start": "2025-06-23T09:00:00"}]
        assert (
            validate_suggestion_request(data)
            == "Fixed event 0 missing required field: duration_minutes"
        )

    def test_validate_suggestion_request_model_error(self):
        """Test validation errors from the request model are reported."""
        data = request()
        data["range_start"] = "2025-06-25T00:00:00"
        data["range_end"] = "2025-06-24T00:00:00"

        error = validate_suggestion_request(data)

        assert error.startswith("Validation error for request")
        assert "range_end must be after range_start" in error
