"""Canonical scheduling error types.

Every expected scheduling violation is one of these types. Scheduler
operations return them inside a ScheduleResult instead of raising them;
they are exceptions only so callers can opt into raising via unwrap().

Standard error codes:
- INSUFFICIENT_TIMELINE: Phases plus buffers do not fit in [start, due]
- SEQUENCING_VIOLATION: A phase boundary crosses a neighbor's bound
- PAST_DATE: A proposed start or end is earlier than now
- DEGENERATE_WINDOW: A phase or derived window ends before it starts
"""

from datetime import datetime
from typing import Literal

from phase_scheduler.timeline.constants import (
    DEGENERATE_WINDOW,
    INSUFFICIENT_TIMELINE,
    PAST_DATE,
    SEQUENCING_VIOLATION,
)
from phase_scheduler.timeline.durations import format_for_display


class SchedulingError(ValueError):
    """Base class for recoverable scheduling violations.

    Attributes:
        code: Error code (e.g., "SEQUENCING_VIOLATION")
        message: User-facing message, rendered verbatim by the form layer
    """

    code: str = "SCHEDULING_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"{self.code}: {message}")


class InsufficientTimelineError(SchedulingError):
    """The requested phases and buffers cannot fit inside the project window.

    Attributes:
        days_needed: Days required by the request
        days_available: Days the project window offers
    """

    code = INSUFFICIENT_TIMELINE

    def __init__(self, days_needed: float, days_available: float, message: str | None = None):
        self.days_needed = days_needed
        self.days_available = days_available
        super().__init__(
            message
            or f"Not enough days! Need {days_needed:g} days but the timeline is only {int(days_available)} days."
        )

    @property
    def shortfall(self) -> float:
        """Days missing to satisfy the request."""
        return max(self.days_needed - self.days_available, 0.0)


class SequencingViolationError(SchedulingError):
    """A phase start/end violates ordering relative to a neighbor.

    Attributes:
        index: Offending phase index
        minimum: Earliest legal value, when the lower bound was violated
        maximum: Latest legal value, when the upper bound was violated
    """

    code = SEQUENCING_VIOLATION

    def __init__(
        self,
        index: int,
        *,
        minimum: datetime | None = None,
        maximum: datetime | None = None,
        message: str | None = None,
    ):
        self.index = index
        self.minimum = minimum
        self.maximum = maximum
        if message is None:
            if minimum is not None:
                message = f"Phase {index + 1} cannot start before {format_for_display(minimum)}"
            elif maximum is not None:
                message = f"Phase {index + 1} must end by {format_for_display(maximum)}"
            else:
                message = f"Phase {index + 1} is out of sequence"
        super().__init__(message)


class PastDateError(SchedulingError):
    """A proposed start or end lies before the current time.

    Attributes:
        index: Phase index, or None for project-level dates
        field: Which date was rejected
        value: The rejected instant
        now: The reference "now" used for the check
    """

    code = PAST_DATE

    def __init__(
        self,
        field: Literal["start", "end", "due"],
        value: datetime,
        now: datetime,
        index: int | None = None,
    ):
        self.index = index
        self.field = field
        self.value = value
        self.now = now
        if index is None:
            subject = "Project deadline" if field == "due" else "Project start date"
        else:
            subject = "Start date" if field == "start" else "End date"
        super().__init__(f"{subject} cannot be in the past")


class DegenerateWindowError(SchedulingError):
    """A phase or derived window ends before (or when) it starts.

    Attributes:
        index: Phase index, or None for the project window
        start: Window start
        end: Window end
        subject: What the window is ("phase", "breathe", "project")
    """

    code = DEGENERATE_WINDOW

    def __init__(
        self,
        start: datetime,
        end: datetime,
        index: int | None = None,
        subject: str = "phase",
    ):
        self.index = index
        self.start = start
        self.end = end
        self.subject = subject
        if subject == "project":
            message = "Due date must be after start date"
        elif subject == "phase":
            message = "End date must be after start date"
        else:
            message = f"Phase {(index or 0) + 1} {subject} window ends before it starts"
        super().__init__(message)


class PresetNotFoundError(LookupError):
    """Raised when a preset template or course code is not in the catalog."""
