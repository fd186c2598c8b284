"""Tests for evaluation/breathe window derivation."""

from datetime import datetime, timedelta

from phase_scheduler.timeline.types import BufferPolicy, Window
from phase_scheduler.timeline.windows import (
    attach_windows,
    build_phase,
    compute_breathe_window,
    compute_evaluation_window,
    derive_windows,
    minimum_next_start,
)

PHASE_END = datetime(2025, 1, 17, 23, 59)


def test_evaluation_window_follows_phase_end():
    window = compute_evaluation_window(PHASE_END, 2)
    assert window.start == datetime(2025, 1, 18, 0, 0)
    assert window.end == datetime(2025, 1, 19, 23, 59)
    assert window.duration == timedelta(days=2)


def test_zero_day_evaluation_window_is_empty():
    window = compute_evaluation_window(PHASE_END, 0)
    assert window.is_empty
    assert window.end == PHASE_END
    assert window.duration == timedelta(0)


def test_zero_breathe_days_reuses_evaluation_window():
    evaluation = compute_evaluation_window(PHASE_END, 2)
    assert compute_breathe_window(evaluation, 0) == evaluation
    assert compute_breathe_window(evaluation, 0, is_last_phase=True, due=datetime(2025, 3, 1)) == evaluation


def test_fixed_breathe_window():
    evaluation = compute_evaluation_window(PHASE_END, 2)
    breathe = compute_breathe_window(evaluation, 1)
    assert breathe == Window(start=datetime(2025, 1, 20, 0, 0), end=datetime(2025, 1, 20, 23, 59))


def test_last_phase_breathe_stretches_to_due():
    """Test that the last phase's breathe window absorbs all remaining slack."""
    evaluation = compute_evaluation_window(PHASE_END, 2)
    breathe = compute_breathe_window(evaluation, 1, is_last_phase=True, due=datetime(2025, 2, 1))
    assert breathe.start == datetime(2025, 1, 20, 0, 0)
    assert breathe.end == datetime(2025, 1, 31, 23, 59)


def test_elastic_breathe_ends_on_a_whole_minute():
    evaluation = compute_evaluation_window(PHASE_END, 2)
    breathe = compute_breathe_window(evaluation, 1, is_last_phase=True, due=datetime(2025, 2, 1, 0, 0, 30))
    assert breathe.end == datetime(2025, 1, 31, 23, 59)
    assert breathe.end.second == 0


def test_last_phase_without_due_uses_fixed_breathe():
    evaluation = compute_evaluation_window(PHASE_END, 2)
    assert compute_breathe_window(evaluation, 1, is_last_phase=True) == compute_breathe_window(evaluation, 1)


def test_minimum_next_start_ignores_elastic_window():
    """Test that the next start is computed from the fixed buffer, not the stored windows."""
    policy = BufferPolicy(evaluation_days=2, breathe_days=1)
    phase = build_phase(0, "Only", datetime(2025, 1, 1), PHASE_END, policy, is_last_phase=True, due=datetime(2025, 3, 1))
    assert phase.breathe_window.end == datetime(2025, 2, 28, 23, 59)
    assert minimum_next_start(phase, 2, 1) == datetime(2025, 1, 21, 0, 0)


def test_minimum_next_start_without_breathe():
    policy = BufferPolicy(evaluation_days=1, breathe_days=0)
    phase = build_phase(0, "Only", datetime(2025, 1, 1), PHASE_END, policy)
    assert minimum_next_start(phase, 1, 0) == datetime(2025, 1, 19, 0, 0)


def test_minimum_next_start_without_buffer():
    policy = BufferPolicy()
    phase = build_phase(0, "Only", datetime(2025, 1, 1), PHASE_END, policy)
    assert minimum_next_start(phase, 0, 0) == datetime(2025, 1, 18, 0, 0)


def test_attach_windows_only_last_phase_is_elastic():
    policy = BufferPolicy(evaluation_days=1, breathe_days=1)
    due = datetime(2025, 4, 1)
    phases = [
        build_phase(0, "A", datetime(2025, 3, 1), datetime(2025, 3, 5, 23, 59), policy),
        build_phase(1, "B", datetime(2025, 3, 8), datetime(2025, 3, 20, 23, 59), policy),
    ]

    attached = attach_windows(phases, policy, due)

    assert attached[0].breathe_window.end == datetime(2025, 3, 7, 23, 59)
    assert attached[1].breathe_window.end == datetime(2025, 3, 31, 23, 59)
    assert [p.start for p in attached] == [p.start for p in phases]
    assert [p.end for p in attached] == [p.end for p in phases]


def test_derive_windows_returns_evaluation_then_breathe():
    evaluation, breathe = derive_windows(PHASE_END, BufferPolicy(evaluation_days=1, breathe_days=2))
    assert evaluation.end == datetime(2025, 1, 18, 23, 59)
    assert breathe.start == datetime(2025, 1, 19, 0, 0)
    assert breathe.end == datetime(2025, 1, 20, 23, 59)
