"""Duration arithmetic for the phase timeline.

Deterministic, stateless helpers for offsetting and formatting instants.
All instants are naive local wall-clock datetimes - no timezone conversion
ever happens here. The scheduler works at minute resolution.
"""

from datetime import datetime, timedelta

from phase_scheduler.timeline.constants import DISPLAY_FORMAT, INSTANT_FORMAT, ONE_DAY, ONE_MINUTE


def ensure_naive(instant: datetime) -> datetime:
    """Reject timezone-aware instants.

    Args:
        instant: Instant to check

    Returns:
        The same instant

    Raises:
        TypeError: If instant is not a datetime
        ValueError: If instant carries tzinfo
    """
    if not isinstance(instant, datetime):
        raise TypeError(f"Expected datetime, got {type(instant).__name__}")
    if instant.tzinfo is not None and instant.utcoffset() is not None:
        raise ValueError(f"Instants must be naive local times, got tz-aware value {instant.isoformat()}")
    return instant


def add_minutes(instant: datetime, n: int) -> datetime:
    """Return instant shifted by n minutes."""
    return instant + timedelta(minutes=n)


def add_hours(instant: datetime, n: int) -> datetime:
    """Return instant shifted by n hours."""
    return instant + timedelta(hours=n)


def add_days(instant: datetime, n: int) -> datetime:
    """Return instant shifted by n whole days (24-hour periods)."""
    return instant + timedelta(days=n)


def truncate_to_minute(instant: datetime) -> datetime:
    """Drop seconds and microseconds."""
    return instant.replace(second=0, microsecond=0)


def start_of_day(instant: datetime) -> datetime:
    """Return 00:00 of the instant's calendar day."""
    return instant.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(instant: datetime) -> datetime:
    """Return 23:59 of the instant's calendar day.

    Windows are inclusive at minute resolution, so 23:59 is the last
    schedulable minute of a day.
    """
    return instant.replace(hour=23, minute=59, second=0, microsecond=0)


def is_effectively_midnight(instant: datetime) -> bool:
    """Check whether hour, minute and second are all zero."""
    return instant.hour == 0 and instant.minute == 0 and instant.second == 0


def normalize_due_date(due: datetime) -> datetime:
    """Treat a midnight due date as the close of the previous day.

    Buffer windows end at 23:59 of a day. A due date stored as midnight of
    day D therefore closes day D-1; without this every downstream day count
    is off by one.

    Args:
        due: Project due date

    Returns:
        end_of_day(D-1) when due is midnight of D, otherwise due unchanged
    """
    if is_effectively_midnight(due):
        return end_of_day(due - timedelta(seconds=1))
    return due


def days_between(start: datetime, end: datetime) -> float:
    """Fractional number of days from start to end (negative if end < start)."""
    return (end - start) / ONE_DAY


def format_instant(instant: datetime) -> str:
    """Format an instant as a local datetime string (YYYY-MM-DDTHH:MM)."""
    return instant.strftime(INSTANT_FORMAT)


def parse_instant(value: str) -> datetime:
    """Parse a local datetime string back into a minute-aligned instant.

    Accepts YYYY-MM-DDTHH:MM with optional seconds and fractions. A trailing
    "Z" is stripped so the value is read as local time, never converted.

    Args:
        value: Datetime string

    Returns:
        Naive instant truncated to the minute

    Raises:
        ValueError: If the string is not a valid local datetime
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1]
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"Invalid instant format: {value!r}") from e
    if parsed.tzinfo is not None:
        raise ValueError(f"Instants must be local times without offset: {value!r}")
    return truncate_to_minute(parsed)


def format_for_display(instant: datetime) -> str:
    """Human-readable form used in user-facing messages (e.g. "Jan 21, 2025 at 12:00 AM")."""
    return instant.strftime(DISPLAY_FORMAT)


def minute_after(instant: datetime) -> datetime:
    return instant + ONE_MINUTE


def minute_before(instant: datetime) -> datetime:
    return instant - ONE_MINUTE
