"""Tests for the timeline data model."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from phase_scheduler.timeline.errors import PastDateError, SequencingViolationError
from phase_scheduler.timeline.types import BufferPolicy, Phase, ProjectWindow, ScheduleResult, Window


def _window(day: int) -> Window:
    return Window(start=datetime(2025, 1, day), end=datetime(2025, 1, day, 23, 59))


def test_phase_rejects_end_before_start():
    with pytest.raises(ValidationError):
        Phase(
            index=0,
            name="Broken",
            start=datetime(2025, 1, 10),
            end=datetime(2025, 1, 10),
            evaluation_window=_window(11),
            breathe_window=_window(12),
        )


def test_models_are_frozen():
    policy = BufferPolicy(evaluation_days=1)
    with pytest.raises(ValidationError):
        policy.evaluation_days = 3  # type: ignore[misc]


def test_buffer_policy_rejects_negative_days():
    with pytest.raises(ValidationError):
        BufferPolicy(evaluation_days=-1)


def test_project_window_rejects_aware_datetimes():
    with pytest.raises(ValidationError):
        ProjectWindow(start=datetime(2025, 1, 1, tzinfo=timezone.utc))


def test_window_duration_counts_inclusive_end():
    assert _window(5).duration == timedelta(days=1)
    empty = Window(start=datetime(2025, 1, 5), end=datetime(2025, 1, 4, 23, 59))
    assert empty.is_empty
    assert empty.duration == timedelta(0)


def test_phase_to_record(allocated_phases):
    record = allocated_phases[0].to_record()

    assert record == {
        "phase_number": 1,
        "name": "Phase 1",
        "description": "",
        "start_date": "2025-01-01T00:00",
        "end_date": "2025-01-17T23:59",
        "evaluation_available_from": "2025-01-18T00:00",
        "evaluation_due_date": "2025-01-19T23:59",
        "breathe_phase_end": "2025-01-20T23:59",
    }


def test_schedule_result_success():
    result = ScheduleResult.success([1, 2])
    assert result.ok
    assert result.error_codes == []
    assert result.unwrap() == [1, 2]


def test_schedule_result_failure_keeps_every_error():
    now = datetime(2025, 1, 1)
    errors = [
        PastDateError("start", datetime(2024, 1, 1), now, index=0),
        SequencingViolationError(1, minimum=datetime(2025, 1, 21)),
    ]

    result = ScheduleResult.failure(errors)

    assert not result.ok
    assert result.error_codes == ["PAST_DATE", "SEQUENCING_VIOLATION"]
    with pytest.raises(PastDateError):
        result.unwrap()


def test_schedule_result_failure_requires_errors():
    with pytest.raises(ValueError):
        ScheduleResult.failure([])
