"""Logging configuration for the backuplist command line."""

import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(levelname)s: %(message)s"


def level_for_verbosity(verbosity: int) -> int:
    """Map the number of -v flags to a logging level.

    Example:
        >>> level_for_verbosity(0) == logging.WARNING
        True
        >>> level_for_verbosity(1) == logging.INFO
        True
        >>> level_for_verbosity(5) == logging.DEBUG
        True
    """
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(verbosity: int = 0, stream: Optional[TextIO] = None) -> logging.Logger:
    """Send backuplist log records to stderr.

    Logging never goes to stdout, which carries the path listing.

    Args:
        verbosity: Number of -v flags given on the command line.
        stream: Stream for log output. Defaults to sys.stderr.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger("backuplist")
    logger.setLevel(level_for_verbosity(verbosity))

    logger.handlers.clear()
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    return logger
