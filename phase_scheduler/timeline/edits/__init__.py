"""Manual edit validation and propagation for phase lists."""

from phase_scheduler.timeline.edits.phase_list import append_phase, truncate_phases
from phase_scheduler.timeline.edits.propagation import (
    apply_phase_edit,
    propagate_breathe_change,
    propagate_buffer_change,
)
from phase_scheduler.timeline.edits.validators import (
    maximum_last_phase_end,
    minimum_project_due,
    validate_phase_edit,
    validate_phase_list,
    validate_project_window,
)
from phase_scheduler.timeline.windows import minimum_next_start

__all__ = [
    "append_phase",
    "apply_phase_edit",
    "maximum_last_phase_end",
    "minimum_next_start",
    "minimum_project_due",
    "propagate_breathe_change",
    "propagate_buffer_change",
    "truncate_phases",
    "validate_phase_edit",
    "validate_phase_list",
    "validate_project_window",
]
