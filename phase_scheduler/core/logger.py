"""Logger configuration for the phase scheduler.

Scheduler modules only emit events. Sinks are configured once, by the entry
point, through setup_logger. Structured fields passed as kwargs end up in
the record's ``extra`` and are rendered after the message.
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level> | {extra}"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message} | {extra}"


def setup_logger(
    level: str = "INFO",
    log_file: str | Path | None = None,
    *,
    serialize: bool = False,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Route scheduler events to stderr and, optionally, a rotating file.

    Args:
        level: Minimum level for every sink
        log_file: Optional log file path (parent directories are created)
        serialize: Write the file sink as JSON lines instead of text
        rotation: File rotation trigger (e.g., "10 MB", "1 day")
        retention: How long rotated files are kept (e.g., "7 days")
    """
    logger.remove()

    # Colors only when a terminal is attached, so piped output stays plain
    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=level,
        colorize=sys.stderr.isatty(),
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            serialize=serialize,
        )

    logger.debug("logger_configured", level=level, log_file=str(log_file) if log_file else None)
