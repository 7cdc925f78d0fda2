"""
Logging setup for fitarc analytics.

The CLI callback and the API entry point call setup_logger() once at startup;
library modules only import ``loguru.logger`` and never configure it.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {name}:{function}:{line} - {message}"


def setup_logger(
    level: str = "INFO",
    log_file: Optional[str] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """
    Route fitarc log records to stderr and, optionally, a rotating file.

    Args:
        level: Minimum level name; case-insensitive ("debug", "INFO", ...)
        log_file: File to append to; parent directories are created
        rotation: When to start a new file ("10 MB", "1 day")
        retention: How long rotated files are kept; older ones are zipped then removed
    """
    level = level.upper()
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        # Session payloads can hold personal data; keep variable values out of tracebacks.
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            backtrace=True,
            diagnose=False,
        )

    logger.debug(f"Logging to stderr{f' and {log_file}' if log_file else ''} at {level}")
