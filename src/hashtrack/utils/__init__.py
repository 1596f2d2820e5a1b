"""Utility functions for hashtrack."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_logging(log_file: Optional[str] = None, level: str = "INFO", home: Optional[Path] = None) -> None:
    """
    Configure loguru sinks.

    Args:
        log_file: Optional log file name, relative to home (or the user's home directory)
        level: Minimum level for the stderr sink
        home: Base directory for the log file
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), backtrace=False, diagnose=False)

    if log_file:
        log_path = (home or Path.home()) / log_file
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_path),
            level="DEBUG",
            rotation="10 MB",
            retention="10 days",
            backtrace=True,
            diagnose=False,
            enqueue=True,
        )
