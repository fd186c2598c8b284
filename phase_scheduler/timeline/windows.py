"""Window calculator.

Derives the evaluation and breathe windows that follow a phase:

    phase end -> +1 min -> evaluation (N x 24h) -> +1 min -> breathe (M x 24h)

Windows are inclusive at minute resolution, so a one-day evaluation that
starts at 00:00 ends at 23:59 of the same day.
"""

from collections.abc import Sequence
from datetime import datetime

from phase_scheduler.timeline.durations import add_hours, minute_after, minute_before, truncate_to_minute
from phase_scheduler.timeline.types import BufferPolicy, Phase, Window


def compute_evaluation_window(phase_end: datetime, evaluation_days: int) -> Window:
    """Evaluation starts one minute after the phase ends and lasts full 24-hour periods.

    Args:
        phase_end: Phase end instant
        evaluation_days: Number of evaluation days (0 yields an empty window)

    Returns:
        Evaluation window
    """
    start = minute_after(phase_end)
    end = minute_before(add_hours(start, evaluation_days * 24))
    return Window(start=start, end=end)


def elastic_breathe_window(evaluation_window: Window, due: datetime) -> Window:
    """Breathe window of the last phase: stretches to one minute before the due date.

    The last rest period absorbs all remaining slack instead of using the
    configured breathe length. Non-last phases use a fixed length. Keep this
    rule in this one function so it can be changed in one place.

    Args:
        evaluation_window: The last phase's evaluation window
        due: Project due instant

    Returns:
        Breathe window ending one minute before due (truncated to the minute)
    """
    return Window(start=minute_after(evaluation_window.end), end=minute_before(truncate_to_minute(due)))


def compute_breathe_window(
    evaluation_window: Window,
    breathe_days: int,
    *,
    is_last_phase: bool = False,
    due: datetime | None = None,
) -> Window:
    """Compute the rest window that follows an evaluation window.

    Rules:
    - breathe_days == 0: the breathe window is the evaluation window (zero-width rest)
    - last phase with a known due date: elastic window up to due - 1 minute
    - otherwise: breathe_days full 24-hour periods

    Args:
        evaluation_window: Preceding evaluation window
        breathe_days: Configured breathe days
        is_last_phase: Whether the owning phase is the project's last phase
        due: Project due instant, if known

    Returns:
        Breathe window
    """
    if breathe_days == 0:
        return evaluation_window

    if is_last_phase and due is not None:
        return elastic_breathe_window(evaluation_window, due)

    start = minute_after(evaluation_window.end)
    end = minute_before(add_hours(start, breathe_days * 24))
    return Window(start=start, end=end)


def derive_windows(
    phase_end: datetime,
    policy: BufferPolicy,
    *,
    is_last_phase: bool = False,
    due: datetime | None = None,
) -> tuple[Window, Window]:
    """Derive (evaluation_window, breathe_window) for a phase ending at phase_end."""
    evaluation = compute_evaluation_window(phase_end, policy.evaluation_days)
    breathe = compute_breathe_window(
        evaluation,
        policy.breathe_days,
        is_last_phase=is_last_phase,
        due=due,
    )
    return evaluation, breathe


def minimum_next_start(previous_phase: Phase, evaluation_days: int, breathe_days: int) -> datetime:
    """Earliest instant the phase after previous_phase may start.

    Always uses the fixed breathe length: the elastic rule only ever applies
    to the final phase, which has no successor.

    Args:
        previous_phase: Phase preceding the one being scheduled
        evaluation_days: Evaluation days of the project
        breathe_days: Breathe days of the project

    Returns:
        One minute after the previous phase's breathe window (or evaluation
        window when breathe_days is 0)
    """
    evaluation = compute_evaluation_window(previous_phase.end, evaluation_days)
    breathe = compute_breathe_window(evaluation, breathe_days)
    return minute_after(breathe.end)


def next_phase_start(phase: Phase) -> datetime:
    """One minute after the phase's stored breathe window."""
    return minute_after(phase.breathe_window.end)


def build_phase(
    index: int,
    name: str,
    start: datetime,
    end: datetime,
    policy: BufferPolicy,
    *,
    is_last_phase: bool = False,
    due: datetime | None = None,
    description: str = "",
) -> Phase:
    """Create a Phase with its derived windows attached.

    Raises:
        pydantic.ValidationError: If end <= start (callers check first)
    """
    evaluation, breathe = derive_windows(end, policy, is_last_phase=is_last_phase, due=due)
    return Phase(
        index=index,
        name=name,
        description=description,
        start=start,
        end=end,
        evaluation_window=evaluation,
        breathe_window=breathe,
    )


def attach_windows(phases: Sequence[Phase], policy: BufferPolicy, due: datetime | None = None) -> list[Phase]:
    """Recompute every phase's windows under policy.

    Only the final phase gets the elastic breathe window. Start/end are kept.

    Args:
        phases: Phase list
        policy: Buffer policy to apply
        due: Project due instant, if known

    Returns:
        New phase list with fresh windows
    """
    last_index = len(phases) - 1
    result: list[Phase] = []
    for i, phase in enumerate(phases):
        evaluation, breathe = derive_windows(phase.end, policy, is_last_phase=i == last_index, due=due)
        result.append(phase.model_copy(update={"evaluation_window": evaluation, "breathe_window": breathe}))
    return result
