"""Validators for manual timeline edits.

Enforces invariants to prevent silent corruption:
- Phase end after phase start
- No past start or end dates (checked independently)
- Phase start not before the previous phase's buffer closes
- Last phase leaves room for its buffer before the due date
- Project due date after project start

Violations are collected and returned, never raised or clamped.
"""

from collections.abc import Sequence
from datetime import datetime

from phase_scheduler.timeline.allocator import last_phase_end
from phase_scheduler.timeline.errors import (
    DegenerateWindowError,
    PastDateError,
    SchedulingError,
    SequencingViolationError,
)
from phase_scheduler.timeline.observability import ScheduleStage, log_schedule_failure
from phase_scheduler.timeline.types import BufferPolicy, Phase, ProjectWindow, ScheduleResult
from phase_scheduler.timeline.windows import minimum_next_start


def maximum_last_phase_end(due: datetime, policy: BufferPolicy) -> datetime:
    """Latest end the final phase may have so its buffer completes before due.

    Args:
        due: Project due instant
        policy: Buffer policy

    Returns:
        23:59 of the last day that leaves the full buffer before the due date
    """
    return last_phase_end(due, policy)


def minimum_project_due(phases: Sequence[Phase], policy: BufferPolicy) -> datetime | None:
    """Earliest due date that still fits the final phase's full buffer.

    Args:
        phases: Phase list
        policy: Buffer policy

    Returns:
        Minimum due instant, or None when there are no phases
    """
    if not phases:
        return None
    return minimum_next_start(phases[-1], policy.evaluation_days, policy.breathe_days)


def _check_index(phases: Sequence[Phase], index: int) -> None:
    if index < 0 or index >= len(phases):
        raise ValueError(f"Phase index {index} out of range for {len(phases)} phases")


def validate_phase_edit(
    phases: Sequence[Phase],
    index: int,
    proposed_start: datetime,
    proposed_end: datetime,
    policy: BufferPolicy,
    *,
    now: datetime,
    due: datetime | None = None,
) -> ScheduleResult[None]:
    """Validate a proposed start/end for one phase against its neighbors.

    Checks, in order:
    1. proposed_end > proposed_start
    2. proposed_start >= now, then proposed_end >= now (independently)
    3. index > 0: proposed_start >= minimum next start of the previous phase
    4. last phase with a known due date: proposed_end leaves room for the buffer

    Args:
        phases: Current phase list
        index: Index of the edited phase
        proposed_start: Proposed start instant
        proposed_end: Proposed end instant
        policy: Project buffer policy
        now: Current time (injected)
        due: Project due instant, if known

    Returns:
        Empty success, or every violation found

    Raises:
        ValueError: If index is out of range
    """
    _check_index(phases, index)
    errors: list[SchedulingError] = []

    if proposed_end <= proposed_start:
        errors.append(DegenerateWindowError(proposed_start, proposed_end, index=index))

    if proposed_start < now:
        errors.append(PastDateError("start", proposed_start, now, index=index))
    if proposed_end < now:
        errors.append(PastDateError("end", proposed_end, now, index=index))

    if index > 0:
        earliest = minimum_next_start(phases[index - 1], policy.evaluation_days, policy.breathe_days)
        if proposed_start < earliest:
            errors.append(SequencingViolationError(index, minimum=earliest))

    if due is not None and index == len(phases) - 1:
        latest = maximum_last_phase_end(due, policy)
        if proposed_end > latest:
            errors.append(SequencingViolationError(index, maximum=latest))

    if errors:
        log_schedule_failure(ScheduleStage.VALIDATE_EDIT, errors, context={"index": index})
        return ScheduleResult.failure(errors)
    return ScheduleResult.success()


def validate_phase_list(
    phases: Sequence[Phase],
    policy: BufferPolicy,
    *,
    due: datetime | None = None,
    now: datetime | None = None,
) -> ScheduleResult[None]:
    """Re-check a whole phase list against every sequencing invariant.

    Args:
        phases: Phase list
        policy: Project buffer policy
        due: Project due instant, if known
        now: Current time; past-date checks are skipped when None

    Returns:
        Empty success, or every violation found

    Raises:
        ValueError: If phase indices are not 0..n-1 in order
    """
    for position, phase in enumerate(phases):
        if phase.index != position:
            raise ValueError(f"Phase at position {position} has index {phase.index}")

    errors: list[SchedulingError] = []

    for i, phase in enumerate(phases):
        if now is not None:
            if phase.start < now:
                errors.append(PastDateError("start", phase.start, now, index=i))
            if phase.end < now:
                errors.append(PastDateError("end", phase.end, now, index=i))

        if i > 0:
            earliest = minimum_next_start(phases[i - 1], policy.evaluation_days, policy.breathe_days)
            if phase.start < earliest:
                errors.append(SequencingViolationError(i, minimum=earliest))

    if phases and due is not None:
        last = phases[-1]
        latest = maximum_last_phase_end(due, policy)
        if last.end > latest:
            errors.append(SequencingViolationError(last.index, maximum=latest))

    if errors:
        log_schedule_failure(ScheduleStage.VALIDATE_LIST, errors, context={"phase_count": len(phases)})
        return ScheduleResult.failure(errors)
    return ScheduleResult.success()


def validate_project_window(window: ProjectWindow, *, now: datetime) -> ScheduleResult[None]:
    """Validate project-level dates.

    Args:
        window: Project window
        now: Current time (injected)

    Returns:
        Empty success, or every violation found
    """
    errors: list[SchedulingError] = []

    if window.start < now:
        errors.append(PastDateError("start", window.start, now))
    if window.due is not None:
        if window.due < now:
            errors.append(PastDateError("due", window.due, now))
        if window.due <= window.start:
            errors.append(DegenerateWindowError(window.start, window.due, subject="project"))

    if errors:
        log_schedule_failure(ScheduleStage.VALIDATE_LIST, errors)
        return ScheduleResult.failure(errors)
    return ScheduleResult.success()
