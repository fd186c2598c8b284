"""Fixed/auto phase allocator.

Partitions a project window into an ordered list of phases, each followed
by the project's buffer (evaluation + breathe days):

- Buffer happens AFTER EVERY phase, including the last one
- Auto-spacing divides the remaining days equally (floored, never rounded)
- Leftover fractional days are absorbed by the last phase, whose end is
  computed backwards from the due date
- Phase ends snap to 23:59, next phase starts snap to 00:00
"""

import math
from dataclasses import dataclass
from datetime import datetime

from phase_scheduler.timeline.constants import MIN_AUTO_PHASE_DAYS
from phase_scheduler.timeline.durations import (
    add_days,
    days_between,
    end_of_day,
    minute_before,
    normalize_due_date,
    start_of_day,
    truncate_to_minute,
)
from phase_scheduler.timeline.errors import (
    DegenerateWindowError,
    InsufficientTimelineError,
    SchedulingError,
)
from phase_scheduler.timeline.observability import ScheduleStage, log_event, log_schedule_failure, log_stage_event
from phase_scheduler.timeline.types import BufferPolicy, Phase, ProjectWindow, ScheduleResult, SpacingPolicy
from phase_scheduler.timeline.windows import build_phase, compute_evaluation_window, next_phase_start


@dataclass(frozen=True)
class AllocationPreview:
    """Day budget of an allocation request, computed before any phase is built.

    Attributes:
        normalized_due: Due date after midnight normalization
        total_days: Fractional days between start and normalized due
        buffer_days_per_phase: Evaluation + breathe days
        total_buffer_needed: Buffer days across all phases
        available_for_phases: Days left for phase work
        effective_phase_duration: Days per (non-last) phase
        days_needed: Minimum days the request requires, counting the calendar
            day each non-last phase gains by ending at 23:59
    """

    normalized_due: datetime
    total_days: float
    buffer_days_per_phase: int
    total_buffer_needed: int
    available_for_phases: float
    effective_phase_duration: int
    days_needed: float

    @property
    def fits(self) -> bool:
        return (
            self.available_for_phases > 0
            and self.effective_phase_duration > 0
            and self.days_needed <= self.total_days
        )


def preview_allocation(
    window: ProjectWindow,
    buffer_policy: BufferPolicy,
    spacing_policy: SpacingPolicy,
) -> AllocationPreview:
    """Compute the day budget for an allocation request.

    Args:
        window: Project window (due required)
        buffer_policy: Buffer policy
        spacing_policy: Spacing policy

    Returns:
        AllocationPreview

    Raises:
        ValueError: If the project due date is not set
    """
    if window.due is None:
        raise ValueError("Project due date must be set before allocating phases")

    normalized_due = normalize_due_date(window.due)
    total_days = days_between(window.start, normalized_due)
    number_of_phases = spacing_policy.number_of_phases

    buffer_days_per_phase = buffer_policy.buffer_days_per_phase
    total_buffer_needed = number_of_phases * buffer_days_per_phase
    available_for_phases = total_days - total_buffer_needed

    if spacing_policy.auto_space_phases:
        effective_phase_duration = (
            math.floor(available_for_phases / number_of_phases) if available_for_phases > 0 else 0
        )
        requested_days = number_of_phases * MIN_AUTO_PHASE_DAYS
    else:
        effective_phase_duration = spacing_policy.phase_duration_days
        requested_days = spacing_policy.phase_duration_days * number_of_phases

    # Non-last phases end at 23:59 of start + duration, so each spans duration + 1 calendar days
    calendar_days = (number_of_phases - 1) * (effective_phase_duration + 1) + MIN_AUTO_PHASE_DAYS
    days_needed = max(requested_days, calendar_days) + total_buffer_needed

    return AllocationPreview(
        normalized_due=normalized_due,
        total_days=total_days,
        buffer_days_per_phase=buffer_days_per_phase,
        total_buffer_needed=total_buffer_needed,
        available_for_phases=available_for_phases,
        effective_phase_duration=effective_phase_duration,
        days_needed=days_needed,
    )


def _check_fit(preview: AllocationPreview, spacing_policy: SpacingPolicy) -> InsufficientTimelineError | None:
    if preview.available_for_phases <= 0:
        return InsufficientTimelineError(
            days_needed=preview.total_buffer_needed,
            days_available=preview.total_days,
            message=(
                f"Not enough days! Need {preview.total_buffer_needed} days for evaluation/breathe phases "
                f"({preview.buffer_days_per_phase} days × {spacing_policy.number_of_phases} phases). "
                f"Timeline is only {math.floor(preview.total_days)} days."
            ),
        )
    if preview.effective_phase_duration <= 0 or preview.days_needed > preview.total_days:
        return InsufficientTimelineError(
            days_needed=preview.days_needed,
            days_available=preview.total_days,
            message=(
                f"Not enough days to create {spacing_policy.number_of_phases} phases: need "
                f"{preview.days_needed:g} days including evaluation/breathe periods, "
                f"timeline is only {math.floor(preview.total_days)} days. "
                "Try fewer phases, shorter durations, fewer eval/breathe days, or extend the project dates."
            ),
        )
    return None


def last_phase_end(due: datetime, buffer_policy: BufferPolicy) -> datetime:
    """End of the final phase, computed backwards from the due date.

    The final phase ends at 23:59 of the day that leaves the full buffer
    before the (normalized) due date. If the fixed evaluation window would
    still run past due - 1 minute (a non-midnight due without breathe days),
    the end moves back one day.

    Args:
        due: Project due instant (raw, not normalized)
        buffer_policy: Buffer policy

    Returns:
        Last phase end instant
    """
    normalized_due = normalize_due_date(due)
    candidate = end_of_day(add_days(normalized_due, -buffer_policy.buffer_days_per_phase))
    evaluation = compute_evaluation_window(candidate, buffer_policy.evaluation_days)
    if evaluation.end > minute_before(truncate_to_minute(due)):
        candidate = add_days(candidate, -1)
    return candidate


def allocate_phases(
    window: ProjectWindow,
    buffer_policy: BufferPolicy,
    spacing_policy: SpacingPolicy,
) -> ScheduleResult[list[Phase]]:
    """Partition the project window into sequential phases.

    Steps:
    1. Normalize the due date (midnight -> previous day 23:59)
    2. Compute total, buffer and available days
    3. Fail if the buffers alone (or the requested phase lengths) do not fit
    4. Build each phase; the last one ends so its buffer closes at the due date

    Args:
        window: Project window (start and due required)
        buffer_policy: Evaluation/breathe days after every phase
        spacing_policy: Phase count and spacing mode

    Returns:
        ScheduleResult with the phase list, or InsufficientTimelineError /
        DegenerateWindowError

    Raises:
        ValueError: If the project due date is not set
    """
    if window.due is None:
        raise ValueError("Project due date must be set before allocating phases")

    log_stage_event(
        ScheduleStage.ALLOCATE,
        "start",
        meta={
            "number_of_phases": spacing_policy.number_of_phases,
            "auto_space": spacing_policy.auto_space_phases,
        },
    )

    if window.due <= window.start:
        error = DegenerateWindowError(window.start, window.due, subject="project")
        log_schedule_failure(ScheduleStage.ALLOCATE, [error])
        return ScheduleResult.failure([error])

    preview = preview_allocation(window, buffer_policy, spacing_policy)
    fit_error = _check_fit(preview, spacing_policy)
    if fit_error is not None:
        log_schedule_failure(
            ScheduleStage.ALLOCATE,
            [fit_error],
            context={"days_needed": fit_error.days_needed, "days_available": fit_error.days_available},
        )
        return ScheduleResult.failure([fit_error])

    number_of_phases = spacing_policy.number_of_phases
    errors: list[SchedulingError] = []
    phases: list[Phase] = []
    current_start = window.start

    for i in range(number_of_phases):
        is_last = i == number_of_phases - 1
        if is_last:
            phase_end = last_phase_end(window.due, buffer_policy)
        else:
            phase_end = end_of_day(add_days(current_start, preview.effective_phase_duration))

        if phase_end <= current_start:
            missing_days = days_between(phase_end, current_start) + MIN_AUTO_PHASE_DAYS
            errors.append(
                InsufficientTimelineError(
                    days_needed=preview.total_days + missing_days,
                    days_available=preview.total_days,
                    message=(
                        f"Not enough days to create {number_of_phases} phases: phase {i + 1} would end "
                        f"before it starts (short by {math.ceil(missing_days)} days). "
                        "Try fewer phases, fewer eval/breathe days, or extend the project dates."
                    ),
                )
            )
            break

        phase = build_phase(
            i,
            f"Phase {i + 1}",
            current_start,
            phase_end,
            buffer_policy,
            is_last_phase=is_last,
            due=window.due,
        )
        if buffer_policy.breathe_days > 0 and phase.breathe_window.is_empty:
            errors.append(
                DegenerateWindowError(
                    phase.breathe_window.start,
                    phase.breathe_window.end,
                    index=i,
                    subject="breathe",
                )
            )
            break

        phases.append(phase)
        current_start = start_of_day(next_phase_start(phase))

    if errors:
        log_schedule_failure(ScheduleStage.ALLOCATE, errors)
        return ScheduleResult.failure(errors)

    log_event(
        "phases_allocated",
        count=len(phases),
        effective_phase_duration=preview.effective_phase_duration,
        total_days=round(preview.total_days, 3),
    )
    log_stage_event(ScheduleStage.ALLOCATE, "success")
    return ScheduleResult.success(phases)
