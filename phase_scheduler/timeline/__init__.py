"""Timeline module - phase scheduling for multi-phase projects.

This module provides:
- Duration arithmetic on naive local instants
- Evaluation/breathe window derivation
- Fixed-duration and auto-spaced phase allocation
- Manual edit validation and downstream propagation
- Preset templates materialized into phase lists
"""

from phase_scheduler.timeline.allocator import AllocationPreview, allocate_phases, preview_allocation
from phase_scheduler.timeline.durations import (
    add_days,
    add_hours,
    add_minutes,
    format_instant,
    is_effectively_midnight,
    normalize_due_date,
    parse_instant,
)
from phase_scheduler.timeline.edits import (
    append_phase,
    apply_phase_edit,
    maximum_last_phase_end,
    minimum_project_due,
    propagate_breathe_change,
    propagate_buffer_change,
    truncate_phases,
    validate_phase_edit,
    validate_phase_list,
    validate_project_window,
)
from phase_scheduler.timeline.errors import (
    DegenerateWindowError,
    InsufficientTimelineError,
    PastDateError,
    PresetNotFoundError,
    SchedulingError,
    SequencingViolationError,
)
from phase_scheduler.timeline.presets import (
    PresetApplication,
    PresetTemplate,
    apply_preset,
    apply_preset_template,
    find_preset,
    get_course_presets,
    load_preset_catalog,
)
from phase_scheduler.timeline.types import (
    BufferPolicy,
    Phase,
    ProjectWindow,
    ScheduleResult,
    SpacingPolicy,
    Window,
)
from phase_scheduler.timeline.windows import attach_windows, derive_windows, minimum_next_start

__all__ = [
    "AllocationPreview",
    "BufferPolicy",
    "DegenerateWindowError",
    "InsufficientTimelineError",
    "PastDateError",
    "Phase",
    "PresetApplication",
    "PresetNotFoundError",
    "PresetTemplate",
    "ProjectWindow",
    "ScheduleResult",
    "SchedulingError",
    "SequencingViolationError",
    "SpacingPolicy",
    "Window",
    "add_days",
    "add_hours",
    "add_minutes",
    "allocate_phases",
    "append_phase",
    "apply_phase_edit",
    "apply_preset",
    "apply_preset_template",
    "attach_windows",
    "derive_windows",
    "find_preset",
    "format_instant",
    "get_course_presets",
    "is_effectively_midnight",
    "load_preset_catalog",
    "maximum_last_phase_end",
    "minimum_next_start",
    "minimum_project_due",
    "normalize_due_date",
    "parse_instant",
    "preview_allocation",
    "propagate_breathe_change",
    "propagate_buffer_change",
    "truncate_phases",
    "validate_phase_edit",
    "validate_phase_list",
    "validate_project_window",
]
