"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

from datetime import datetime

import pytest
from loguru import logger

from phase_scheduler.timeline.allocator import allocate_phases
from phase_scheduler.timeline.types import BufferPolicy, Phase, ProjectWindow, SpacingPolicy
from phase_scheduler.timeline.windows import build_phase, minimum_next_start


@pytest.fixture
def now() -> datetime:
    """Fixed "current time" injected into past-date checks.

    Sits well before every fixture date so only tests that opt in see
    past-date violations.
    """
    return datetime(2024, 12, 1, 9, 30)


@pytest.fixture
def project_window() -> ProjectWindow:
    """Two-month project due at midnight (normalized to Feb 28 23:59)."""
    return ProjectWindow(start=datetime(2025, 1, 1), due=datetime(2025, 3, 1))


@pytest.fixture
def buffer_policy() -> BufferPolicy:
    return BufferPolicy(evaluation_days=2, breathe_days=1)


@pytest.fixture
def spacing_policy() -> SpacingPolicy:
    return SpacingPolicy(number_of_phases=3, auto_space_phases=True)


@pytest.fixture
def allocated_phases(
    project_window: ProjectWindow,
    buffer_policy: BufferPolicy,
    spacing_policy: SpacingPolicy,
) -> list[Phase]:
    """Three auto-spaced phases for the default project window."""
    return allocate_phases(project_window, buffer_policy, spacing_policy).unwrap()


@pytest.fixture
def two_phase_list() -> list[Phase]:
    """Tight two-phase list with eval=1, breathe=1 and no due date.

    Phase 1 starts exactly at the minimum next start of phase 0.
    """
    policy = BufferPolicy(evaluation_days=1, breathe_days=1)
    first = build_phase(0, "Design", datetime(2025, 3, 3), datetime(2025, 3, 9, 23, 59), policy)
    second_start = minimum_next_start(first, policy.evaluation_days, policy.breathe_days)
    second = build_phase(1, "Build", second_start, datetime(2025, 3, 30, 23, 59), policy, is_last_phase=True)
    return [first, second]


@pytest.fixture
def log_messages():
    """Capture loguru records emitted during a test."""
    records: list[dict] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
