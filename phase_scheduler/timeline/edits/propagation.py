"""Edit propagation for phase lists.

When a phase or the project's buffer policy changes, later phases may be
forced to move. Propagation is forward-only and single-pass: starts slide,
phase ends never move unless a whole phase is shifted to make room.
"""

from collections.abc import Sequence
from datetime import datetime

from phase_scheduler.timeline.edits.validators import validate_phase_edit, validate_phase_list
from phase_scheduler.timeline.errors import DegenerateWindowError, SchedulingError
from phase_scheduler.timeline.observability import ScheduleStage, log_event, log_schedule_failure
from phase_scheduler.timeline.types import BufferPolicy, Phase, ScheduleResult
from phase_scheduler.timeline.windows import attach_windows, build_phase, minimum_next_start


def propagate_buffer_change(
    phases: Sequence[Phase],
    new_policy: BufferPolicy,
    due: datetime | None = None,
) -> ScheduleResult[list[Phase]]:
    """Recompute downstream starts after a project-level buffer policy change.

    Phase 0 keeps its start (anchored to the project start) and its end.
    Every later phase starts at the minimum next start of its predecessor
    under new_policy and keeps its end. Every phase gets fresh windows.

    Args:
        phases: Current phase list
        new_policy: Buffer policy after the change
        due: Project due instant, if known (last phase keeps the elastic breathe)

    Returns:
        ScheduleResult with the new phase list, or a DegenerateWindowError for
        every phase whose new start would not precede its end
    """
    if not phases:
        return ScheduleResult.success([])

    last_index = len(phases) - 1
    first = phases[0]
    result: list[Phase] = [
        build_phase(
            first.index,
            first.name,
            first.start,
            first.end,
            new_policy,
            is_last_phase=last_index == 0,
            due=due,
            description=first.description,
        )
    ]
    errors: list[SchedulingError] = []

    for i in range(1, len(phases)):
        phase = phases[i]
        # Ends never move, so each start depends only on the previous end
        new_start = minimum_next_start(phases[i - 1], new_policy.evaluation_days, new_policy.breathe_days)
        if new_start >= phase.end:
            errors.append(DegenerateWindowError(new_start, phase.end, index=i))
            continue
        result.append(
            build_phase(
                phase.index,
                phase.name,
                new_start,
                phase.end,
                new_policy,
                is_last_phase=i == last_index,
                due=due,
                description=phase.description,
            )
        )

    if errors:
        log_schedule_failure(
            ScheduleStage.PROPAGATE,
            errors,
            context={
                "evaluation_days": new_policy.evaluation_days,
                "breathe_days": new_policy.breathe_days,
            },
        )
        return ScheduleResult.failure(errors)

    log_event(
        "buffer_change_propagated",
        phase_count=len(result),
        evaluation_days=new_policy.evaluation_days,
        breathe_days=new_policy.breathe_days,
    )
    return ScheduleResult.success(result)


def propagate_breathe_change(
    phases: Sequence[Phase],
    new_breathe_days: int,
    evaluation_days: int,
    due: datetime | None = None,
) -> ScheduleResult[list[Phase]]:
    """Slide phase starts after the project's breathe days change.

    Args:
        phases: Current phase list
        new_breathe_days: New breathe days
        evaluation_days: Unchanged evaluation days
        due: Project due instant, if known

    Returns:
        Same as propagate_buffer_change
    """
    policy = BufferPolicy(evaluation_days=evaluation_days, breathe_days=new_breathe_days)
    return propagate_buffer_change(phases, policy, due=due)


def apply_phase_edit(
    phases: Sequence[Phase],
    index: int,
    proposed_start: datetime,
    proposed_end: datetime,
    policy: BufferPolicy,
    *,
    now: datetime,
    due: datetime | None = None,
) -> ScheduleResult[list[Phase]]:
    """Validate an edit, apply it, and push later phases forward if they now overlap.

    A downstream phase that would start before its predecessor's buffer
    closes is shifted (start and end) by the overlap, keeping its duration.
    The resulting list is re-validated, including the fit before the due date.

    Args:
        phases: Current phase list
        index: Index of the edited phase
        proposed_start: New start
        proposed_end: New end
        policy: Project buffer policy
        now: Current time (injected)
        due: Project due instant, if known

    Returns:
        ScheduleResult with the updated list, or the validation errors

    Raises:
        ValueError: If index is out of range
    """
    validation = validate_phase_edit(
        phases,
        index,
        proposed_start,
        proposed_end,
        policy,
        now=now,
        due=due,
    )
    if not validation.ok:
        return ScheduleResult.failure(validation.errors)

    updated = list(phases)
    updated[index] = phases[index].model_copy(update={"start": proposed_start, "end": proposed_end})

    shifted = 0
    for j in range(index + 1, len(updated)):
        earliest = minimum_next_start(updated[j - 1], policy.evaluation_days, policy.breathe_days)
        if updated[j].start < earliest:
            delta = earliest - updated[j].start
            updated[j] = updated[j].model_copy(
                update={"start": updated[j].start + delta, "end": updated[j].end + delta}
            )
            shifted += 1

    updated = attach_windows(updated, policy, due)

    recheck = validate_phase_list(updated, policy, due=due)
    if not recheck.ok:
        log_schedule_failure(ScheduleStage.APPLY_EDIT, recheck.errors, context={"index": index, "shifted": shifted})
        return ScheduleResult.failure(recheck.errors)

    log_event("phase_edit_applied", index=index, shifted=shifted)
    return ScheduleResult.success(updated)
