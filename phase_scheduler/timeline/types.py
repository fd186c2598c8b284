"""Canonical timeline data model.

This module defines the immutable building blocks of a project timeline:
- A project window (start, optional due)
- A uniform buffer policy (evaluation + breathe days after every phase)
- A spacing policy for automatic allocation
- Phases with their derived evaluation/breathe windows

Every model is frozen. Operations return new phase lists instead of
mutating existing ones.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from phase_scheduler.timeline.durations import ensure_naive, format_instant
from phase_scheduler.timeline.errors import SchedulingError

T = TypeVar("T")


class Window(BaseModel):
    """Derived, inclusive time window owned by exactly one phase.

    A zero-day window is empty: it ends one minute before it starts.
    """

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @property
    def is_empty(self) -> bool:
        return self.end < self.start

    @property
    def duration(self) -> timedelta:
        """Covered time, counting the inclusive end minute."""
        return max(self.end - self.start + timedelta(minutes=1), timedelta(0))


class ProjectWindow(BaseModel):
    """Outer interval a project's phases must fit in.

    Attributes:
        start: Project start instant
        due: Project due instant (None while phases are still being authored)
    """

    model_config = ConfigDict(frozen=True)

    start: datetime
    due: datetime | None = None

    @field_validator("start", "due")
    @classmethod
    def validate_naive(cls, value: datetime | None) -> datetime | None:
        if value is None:
            return value
        return ensure_naive(value)


class BufferPolicy(BaseModel):
    """Project-wide buffer applied after every phase, including the last.

    Attributes:
        evaluation_days: Days of peer evaluation after each phase
        breathe_days: Days of rest after each evaluation window
    """

    model_config = ConfigDict(frozen=True)

    evaluation_days: int = Field(default=0, ge=0)
    breathe_days: int = Field(default=0, ge=0)

    @property
    def buffer_days_per_phase(self) -> int:
        return self.evaluation_days + self.breathe_days


class SpacingPolicy(BaseModel):
    """Allocation request for the automatic phase partitioner.

    Attributes:
        number_of_phases: How many phases to create
        phase_duration_days: Fixed phase length (ignored when auto-spacing)
        auto_space_phases: Divide the available time equally across phases
    """

    model_config = ConfigDict(frozen=True)

    number_of_phases: int = Field(default=3, ge=1)
    phase_duration_days: int = Field(default=7, ge=1)
    auto_space_phases: bool = True


class Phase(BaseModel):
    """A bounded sub-interval of project work with its derived buffer windows.

    Attributes:
        index: Zero-based position in the project's phase list
        name: Phase label
        description: Free-text description
        start: Phase start instant
        end: Phase deliverable deadline
        evaluation_window: Peer evaluation window following the phase
        breathe_window: Rest window following the evaluation window
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    name: str
    description: str = ""
    start: datetime
    end: datetime
    evaluation_window: Window
    breathe_window: Window

    @field_validator("start", "end")
    @classmethod
    def validate_naive(cls, value: datetime) -> datetime:
        return ensure_naive(value)

    @model_validator(mode="after")
    def validate_ordering(self) -> "Phase":
        if self.end <= self.start:
            raise ValueError(f"Phase {self.index} end ({self.end}) must be after start ({self.start})")
        return self

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def to_record(self) -> dict[str, str | int]:
        """Serialize to the flat record the persistence layer stores verbatim.

        Derived windows are stored as-is because they cannot be re-derived
        once the project's buffer policy changes.
        """
        return {
            "phase_number": self.index + 1,
            "name": self.name,
            "description": self.description,
            "start_date": format_instant(self.start),
            "end_date": format_instant(self.end),
            "evaluation_available_from": format_instant(self.evaluation_window.start),
            "evaluation_due_date": format_instant(self.evaluation_window.end),
            "breathe_phase_end": format_instant(self.breathe_window.end),
        }


@dataclass(frozen=True)
class ScheduleResult(Generic[T]):
    """Result of a scheduling operation: a value or a list of errors.

    Attributes:
        value: Computed value (None on failure, or for check-only operations)
        errors: Scheduling errors, empty on success
    """

    value: T | None = None
    errors: tuple[SchedulingError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def error_codes(self) -> list[str]:
        return [e.code for e in self.errors]

    def unwrap(self) -> T:
        """Return the value, raising the first error on failure.

        Raises:
            SchedulingError: If the result carries errors
        """
        if self.errors:
            raise self.errors[0]
        return self.value  # type: ignore[return-value]

    @classmethod
    def success(cls, value: T | None = None) -> "ScheduleResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, errors: Iterable[SchedulingError]) -> "ScheduleResult[T]":
        collected = tuple(errors)
        if not collected:
            raise ValueError("failure() requires at least one error")
        return cls(errors=collected)
