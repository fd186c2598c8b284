"""Structured loguru output for scheduler operations.

Successful operations log one INFO event, stage transitions are DEBUG
traces, and every ScheduleResult failure is logged once at WARNING with
its error codes before it reaches the caller.
"""

from collections.abc import Sequence
from enum import StrEnum
from typing import Literal, get_args

from loguru import logger

from phase_scheduler.timeline.errors import SchedulingError


class ScheduleStage(StrEnum):
    """Scheduler operation that produced a log record."""

    ALLOCATE = "allocate"
    VALIDATE_EDIT = "validate_edit"
    APPLY_EDIT = "apply_edit"
    PROPAGATE = "propagate"
    VALIDATE_LIST = "validate_list"
    PRESET = "preset"


StageStatus = Literal["start", "success", "fail"]
STAGE_STATUSES = frozenset(get_args(StageStatus))


def log_event(event: str, **fields: str | int | float | bool | None) -> None:
    """Emit a completed scheduler operation at INFO with its fields in ``extra``.

    Events: phases_allocated, phase_edit_applied, buffer_change_propagated,
    preset_applied.
    """
    logger.info(event, **fields)


def log_stage_event(
    stage: ScheduleStage,
    status: StageStatus,
    meta: dict[str, str | int | float | bool | None] | None = None,
) -> None:
    """Trace a scheduler stage transition at DEBUG.

    Raises:
        ValueError: If status is not start, success or fail
    """
    if status not in STAGE_STATUSES:
        raise ValueError(f"Unknown stage status {status!r} for {stage.value}")
    logger.debug("schedule_stage", stage=stage.value, status=status, **(meta or {}))


def log_schedule_failure(
    stage: ScheduleStage,
    errors: Sequence[SchedulingError],
    context: dict[str, str | int | float | bool | None] | None = None,
) -> None:
    """Log scheduling errors with context before they are returned to the caller.

    Args:
        stage: Stage that produced the errors
        errors: Errors being returned
        context: Additional context for logging
    """
    logger.warning(
        "SCHEDULE_VALIDATION_FAILED",
        stage=stage.value,
        codes=[e.code for e in errors],
        messages=[e.message for e in errors],
        **(context or {}),
    )
