"""Structural phase-list edits: append and truncate.

Both operations re-attach windows to the whole list so the elastic breathe
window always belongs to whichever phase is currently last.
"""

from collections.abc import Sequence
from datetime import datetime

from phase_scheduler.timeline.edits.validators import validate_phase_list
from phase_scheduler.timeline.errors import DegenerateWindowError, SchedulingError, SequencingViolationError
from phase_scheduler.timeline.observability import ScheduleStage, log_schedule_failure
from phase_scheduler.timeline.types import BufferPolicy, Phase, ScheduleResult
from phase_scheduler.timeline.windows import attach_windows, build_phase, minimum_next_start


def append_phase(
    phases: Sequence[Phase],
    name: str,
    end: datetime,
    policy: BufferPolicy,
    *,
    start: datetime | None = None,
    description: str = "",
    due: datetime | None = None,
    project_start: datetime | None = None,
) -> ScheduleResult[list[Phase]]:
    """Append a manually authored phase to the end of the list.

    The start defaults to the earliest legal instant: the previous phase's
    minimum next start, or the project start for the first phase.

    Args:
        phases: Current phase list
        name: New phase name
        end: New phase end
        policy: Project buffer policy
        start: Explicit start (defaults as described above)
        description: New phase description
        due: Project due instant, if known
        project_start: Project start, used when the list is empty

    Returns:
        ScheduleResult with the extended list, or the violations found

    Raises:
        ValueError: If no start can be determined
    """
    earliest = minimum_next_start(phases[-1], policy.evaluation_days, policy.breathe_days) if phases else None
    if start is None:
        start = earliest if earliest is not None else project_start
    if start is None:
        raise ValueError("Either start or project_start is required for the first phase")

    index = len(phases)
    errors: list[SchedulingError] = []
    if end <= start:
        errors.append(DegenerateWindowError(start, end, index=index))
    if earliest is not None and start < earliest:
        errors.append(SequencingViolationError(index, minimum=earliest))
    if errors:
        log_schedule_failure(ScheduleStage.APPLY_EDIT, errors, context={"index": index})
        return ScheduleResult.failure(errors)

    new_phase = build_phase(index, name, start, end, policy, description=description)
    extended = attach_windows([*phases, new_phase], policy, due)

    recheck = validate_phase_list(extended, policy, due=due)
    if not recheck.ok:
        return ScheduleResult.failure(recheck.errors)
    return ScheduleResult.success(extended)


def truncate_phases(
    phases: Sequence[Phase],
    keep: int,
    policy: BufferPolicy,
    due: datetime | None = None,
) -> ScheduleResult[list[Phase]]:
    """Drop every phase from position keep onwards.

    Args:
        phases: Current phase list
        keep: Number of leading phases to keep
        policy: Project buffer policy
        due: Project due instant, if known

    Returns:
        ScheduleResult with the shortened list

    Raises:
        ValueError: If keep is negative or larger than the list
    """
    if keep < 0 or keep > len(phases):
        raise ValueError(f"Cannot keep {keep} of {len(phases)} phases")
    return ScheduleResult.success(attach_windows(phases[:keep], policy, due))
