"""Preset applier.

Materializes a template's ordered phase labels into a full phase list bound
to a project start. The due date is unknown until every phase exists, so
the work runs as a pipeline:

1. Materialize phases with fixed-length breathe windows everywhere
2. Derive the due date from the last phase's breathe window
3. Re-validate the sequencing of the materialized list
"""

from collections.abc import Sequence
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from phase_scheduler.timeline.durations import add_days, minute_before
from phase_scheduler.timeline.edits.validators import validate_phase_list
from phase_scheduler.timeline.errors import DegenerateWindowError
from phase_scheduler.timeline.observability import ScheduleStage, log_event, log_schedule_failure
from phase_scheduler.timeline.presets.catalog import PresetTemplate
from phase_scheduler.timeline.types import BufferPolicy, Phase, ProjectWindow, ScheduleResult
from phase_scheduler.timeline.windows import build_phase, next_phase_start


class PresetApplication(BaseModel):
    """Phases materialized from a preset plus the implied project due date.

    Attributes:
        title: Template title, when applied from a template
        phases: Materialized phases
        due: Implied due date (last phase's breathe window end)
    """

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    phases: list[Phase]
    due: datetime

    @property
    def project_window(self) -> ProjectWindow:
        return ProjectWindow(start=self.phases[0].start, due=self.due)


def materialize_preset_phases(
    labels: Sequence[str],
    preset_phase_duration: int,
    project_start: datetime,
    policy: BufferPolicy,
    *,
    title: str | None = None,
) -> list[Phase]:
    """Stage 1: build one phase per label with fixed breathe windows.

    Each phase ends preset_phase_duration days after it starts, minus one
    minute; the next one starts one minute after the previous breathe window.
    """
    phases: list[Phase] = []
    current_start = project_start
    for index, label in enumerate(labels):
        phase_end = minute_before(add_days(current_start, preset_phase_duration))
        description = f"{label} phase for {title}" if title else ""
        # Due is unknown on this pass, so no phase gets the elastic breathe window
        phase = build_phase(index, label, current_start, phase_end, policy, description=description)
        phases.append(phase)
        current_start = next_phase_start(phase)
    return phases


def derive_due(phases: Sequence[Phase]) -> datetime:
    """Stage 2: the project is due when the last phase's breathe window closes."""
    return phases[-1].breathe_window.end


def apply_preset(
    labels: Sequence[str],
    preset_phase_duration: int,
    project_start: datetime,
    policy: BufferPolicy,
    *,
    title: str | None = None,
) -> ScheduleResult[PresetApplication]:
    """Materialize ordered phase labels into a phase list and implied due date.

    Args:
        labels: Ordered phase names
        preset_phase_duration: Days per phase
        project_start: Project start instant
        policy: Project buffer policy
        title: Template title, used in phase descriptions

    Returns:
        ScheduleResult with the PresetApplication, or a DegenerateWindowError
        when the phase duration is not positive

    Raises:
        ValueError: If labels is empty
    """
    if not labels:
        raise ValueError("Preset must contain at least one phase label")

    if preset_phase_duration <= 0:
        error = DegenerateWindowError(
            project_start,
            minute_before(add_days(project_start, preset_phase_duration)),
            index=0,
        )
        log_schedule_failure(ScheduleStage.PRESET, [error], context={"duration": preset_phase_duration})
        return ScheduleResult.failure([error])

    phases = materialize_preset_phases(labels, preset_phase_duration, project_start, policy, title=title)
    due = derive_due(phases)

    # The implied due closes the last breathe window by construction, so only sequencing is re-checked
    recheck = validate_phase_list(phases, policy)
    if not recheck.ok:
        return ScheduleResult.failure(recheck.errors)

    log_event(
        "preset_applied",
        title=title,
        phase_count=len(phases),
        due=due.isoformat(),
    )
    return ScheduleResult.success(PresetApplication(title=title, phases=phases, due=due))


def apply_preset_template(
    template: PresetTemplate,
    preset_phase_duration: int,
    project_start: datetime,
    policy: BufferPolicy,
) -> ScheduleResult[PresetApplication]:
    """Apply a catalog template (see apply_preset)."""
    return apply_preset(
        template.phases,
        preset_phase_duration,
        project_start,
        policy,
        title=template.title,
    )
