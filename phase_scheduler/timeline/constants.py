"""Timeline constants - single source of truth.

All window arithmetic must import its offsets and formats from here.
"""

from datetime import timedelta

ONE_MINUTE = timedelta(minutes=1)
ONE_DAY = timedelta(days=1)

# Canonical local-time format (datetime-local, no timezone suffix)
INSTANT_FORMAT = "%Y-%m-%dT%H:%M"
DISPLAY_FORMAT = "%b %d, %Y at %I:%M %p"

# Error codes carried by SchedulingError subclasses
INSUFFICIENT_TIMELINE = "INSUFFICIENT_TIMELINE"
SEQUENCING_VIOLATION = "SEQUENCING_VIOLATION"
PAST_DATE = "PAST_DATE"
DEGENERATE_WINDOW = "DEGENERATE_WINDOW"

# Auto-spaced phases need at least this many days each
MIN_AUTO_PHASE_DAYS = 1
