"""Logging configuration for axe-crawler."""

import logging
import sys
from pathlib import Path
from typing import Optional

# Silences every record, including CRITICAL
QUIET = logging.CRITICAL + 1

VERBOSITY_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "quiet": QUIET,
}


def resolve_level(level: str) -> int:
    """Map a verbosity name (debug, info, error, quiet) to a logging level.

    Standard logging level names are accepted as well; unknown names fall back
    to ERROR, the tool's default verbosity.
    """
    name = (level or "error").lower()
    if name in VERBOSITY_LEVELS:
        return VERBOSITY_LEVELS[name]
    return getattr(logging, name.upper(), logging.ERROR)


def setup_logging(
    level: str = "error",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None
) -> None:
    """Configure logging for axe-crawler.

    Args:
        level: Verbosity (debug, info, error, quiet)
        log_file: Optional log file path
        format_string: Optional custom format string
    """
    if format_string is None:
        format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    numeric_level = resolve_level(level)

    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=numeric_level,
        format=format_string,
        handlers=handlers,
        force=True
    )

    # Set levels for noisy third-party libraries
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
