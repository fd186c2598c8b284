"""Preset templates and the preset applier."""

from phase_scheduler.timeline.presets.applier import (
    PresetApplication,
    apply_preset,
    apply_preset_template,
    derive_due,
    materialize_preset_phases,
)
from phase_scheduler.timeline.presets.catalog import (
    PresetTemplate,
    find_preset,
    get_course_presets,
    load_preset_catalog,
)

__all__ = [
    "PresetApplication",
    "PresetTemplate",
    "apply_preset",
    "apply_preset_template",
    "derive_due",
    "find_preset",
    "get_course_presets",
    "load_preset_catalog",
    "materialize_preset_phases",
]
