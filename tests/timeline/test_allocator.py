"""Tests for the fixed/auto phase allocator.

Allocated timelines must satisfy:
- Buffer after every phase, including the last
- No phase starts before the previous phase's breathe window closes
- The last breathe window closes one minute before the due date
"""

from datetime import datetime

import pytest

from phase_scheduler.timeline.allocator import allocate_phases, last_phase_end, preview_allocation
from phase_scheduler.timeline.constants import DEGENERATE_WINDOW, INSUFFICIENT_TIMELINE
from phase_scheduler.timeline.errors import InsufficientTimelineError
from phase_scheduler.timeline.types import BufferPolicy, ProjectWindow, SpacingPolicy


def test_preview_computes_day_budget(project_window, buffer_policy, spacing_policy):
    preview = preview_allocation(project_window, buffer_policy, spacing_policy)

    assert preview.normalized_due == datetime(2025, 2, 28, 23, 59)
    assert preview.buffer_days_per_phase == 3
    assert preview.total_buffer_needed == 9
    assert preview.total_days == pytest.approx(58.999, abs=1e-3)
    assert preview.available_for_phases == pytest.approx(49.999, abs=1e-3)
    assert preview.effective_phase_duration == 16
    assert preview.days_needed == 44
    assert preview.fits


def test_auto_spaced_allocation(allocated_phases):
    """Test the canonical three-phase, two-month allocation."""
    first, second, last = allocated_phases

    assert first.start == datetime(2025, 1, 1, 0, 0)
    assert first.end == datetime(2025, 1, 17, 23, 59)
    assert first.evaluation_window.start == datetime(2025, 1, 18, 0, 0)
    assert first.evaluation_window.end == datetime(2025, 1, 19, 23, 59)
    assert first.breathe_window.end == datetime(2025, 1, 20, 23, 59)

    assert second.start == datetime(2025, 1, 21, 0, 0)
    assert second.end == datetime(2025, 2, 6, 23, 59)

    assert last.start == datetime(2025, 2, 10, 0, 0)
    assert last.end == datetime(2025, 2, 25, 23, 59)
    assert last.evaluation_window.end == datetime(2025, 2, 27, 23, 59)
    assert last.breathe_window.start == datetime(2025, 2, 28, 0, 0)
    assert last.breathe_window.end == datetime(2025, 2, 28, 23, 59)


def test_allocated_phases_never_overlap(allocated_phases, project_window):
    assert [p.index for p in allocated_phases] == [0, 1, 2]
    assert [p.name for p in allocated_phases] == ["Phase 1", "Phase 2", "Phase 3"]
    for previous, current in zip(allocated_phases, allocated_phases[1:]):
        assert current.start > previous.breathe_window.end
        assert previous.end < previous.evaluation_window.start
    assert allocated_phases[-1].breathe_window.end < project_window.due


def test_too_many_phases_is_insufficient(project_window, buffer_policy):
    """Test that buffers alone exceeding the window are rejected."""
    result = allocate_phases(project_window, buffer_policy, SpacingPolicy(number_of_phases=30))

    assert not result.ok
    assert result.error_codes == [INSUFFICIENT_TIMELINE]
    error = result.errors[0]
    assert isinstance(error, InsufficientTimelineError)
    assert error.days_needed == 90
    assert error.shortfall > 30
    assert "Need 90 days for evaluation/breathe phases (3 days × 30 phases)" in error.message
    assert "Timeline is only 58 days." in error.message


def test_failure_is_logged(project_window, buffer_policy, log_messages):
    allocate_phases(project_window, buffer_policy, SpacingPolicy(number_of_phases=30))

    failures = [r for r in log_messages if r["message"] == "SCHEDULE_VALIDATION_FAILED"]
    assert len(failures) == 1
    assert failures[0]["extra"]["stage"] == "allocate"
    assert failures[0]["extra"]["codes"] == [INSUFFICIENT_TIMELINE]


def test_unwrap_raises_first_error(project_window, buffer_policy):
    result = allocate_phases(project_window, buffer_policy, SpacingPolicy(number_of_phases=30))
    with pytest.raises(InsufficientTimelineError):
        result.unwrap()


def test_fixed_duration_allocation(project_window, buffer_policy):
    spacing = SpacingPolicy(number_of_phases=3, phase_duration_days=7, auto_space_phases=False)

    phases = allocate_phases(project_window, buffer_policy, spacing).unwrap()

    assert phases[0].end == datetime(2025, 1, 8, 23, 59)
    assert phases[1].start == datetime(2025, 1, 12, 0, 0)
    # The last phase still ends so its buffer closes at the due date
    assert phases[2].end == datetime(2025, 2, 25, 23, 59)
    assert phases[2].breathe_window.end == datetime(2025, 2, 28, 23, 59)


def test_fixed_duration_that_does_not_fit(project_window, buffer_policy):
    spacing = SpacingPolicy(number_of_phases=3, phase_duration_days=20, auto_space_phases=False)

    result = allocate_phases(project_window, buffer_policy, spacing)

    assert result.error_codes == [INSUFFICIENT_TIMELINE]
    assert result.errors[0].days_needed == 69


def test_due_before_start_is_degenerate(buffer_policy, spacing_policy):
    window = ProjectWindow(start=datetime(2025, 3, 1), due=datetime(2025, 2, 1))

    result = allocate_phases(window, buffer_policy, spacing_policy)

    assert result.error_codes == [DEGENERATE_WINDOW]
    assert result.errors[0].message == "Due date must be after start date"


def test_missing_due_is_a_programming_error(buffer_policy, spacing_policy):
    with pytest.raises(ValueError):
        allocate_phases(ProjectWindow(start=datetime(2025, 1, 1)), buffer_policy, spacing_policy)


def test_single_phase_takes_whole_window(project_window, buffer_policy):
    phases = allocate_phases(project_window, buffer_policy, SpacingPolicy(number_of_phases=1)).unwrap()

    assert len(phases) == 1
    assert phases[0].start == datetime(2025, 1, 1)
    assert phases[0].end == datetime(2025, 2, 25, 23, 59)


def test_afternoon_due_without_breathe_keeps_evaluation_inside_window():
    """Test that the last evaluation window never runs past the due date."""
    due = datetime(2025, 3, 1, 12, 0)
    policy = BufferPolicy(evaluation_days=1, breathe_days=0)

    assert last_phase_end(due, policy) == datetime(2025, 2, 27, 23, 59)

    phases = allocate_phases(
        ProjectWindow(start=datetime(2025, 1, 1), due=due),
        policy,
        SpacingPolicy(number_of_phases=2),
    ).unwrap()
    assert phases[-1].evaluation_window.end < due
    assert phases[-1].breathe_window == phases[-1].evaluation_window


def test_allocation_without_buffer(project_window):
    phases = allocate_phases(project_window, BufferPolicy(), SpacingPolicy(number_of_phases=2)).unwrap()

    assert phases[0].end == datetime(2025, 1, 30, 23, 59)
    assert phases[1].start == datetime(2025, 1, 31, 0, 0)
    assert phases[1].end == datetime(2025, 2, 28, 23, 59)


def test_day_snapped_phases_count_toward_fit():
    """Test that a request failing only because phase ends snap to 23:59 is insufficient."""
    window = ProjectWindow(start=datetime(2025, 1, 1), due=datetime(2025, 1, 11, 12, 0))
    policy = BufferPolicy(evaluation_days=1, breathe_days=0)
    spacing = SpacingPolicy(number_of_phases=5)

    preview = preview_allocation(window, policy, spacing)
    result = allocate_phases(window, policy, spacing)

    assert preview.effective_phase_duration == 1
    assert preview.days_needed == 14
    assert not preview.fits
    assert result.error_codes == [INSUFFICIENT_TIMELINE]
    assert result.errors[0].shortfall == pytest.approx(3.5)
    assert "need 14 days" in result.errors[0].message


def test_tightest_fitting_request_allocates():
    window = ProjectWindow(start=datetime(2025, 1, 1), due=datetime(2025, 1, 15, 12, 0))
    policy = BufferPolicy(evaluation_days=1, breathe_days=0)
    spacing = SpacingPolicy(number_of_phases=5)

    assert preview_allocation(window, policy, spacing).fits

    phases = allocate_phases(window, policy, spacing).unwrap()

    assert [p.start.day for p in phases] == [1, 4, 7, 10, 13]
    assert phases[-1].end == datetime(2025, 1, 13, 23, 59)
    assert phases[-1].evaluation_window.end < window.due
