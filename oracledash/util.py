"""Utility functions for logging and display formatting."""

import logging
from datetime import datetime, tzinfo
from typing import Optional


def setup_logging(
    name: str,
    level: str = "INFO",
    format_str: Optional[str] = None,
) -> logging.Logger:
    """
    Set up structured logging for a component.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_str: Optional custom format string

    Returns:
        Configured logger
    """
    if format_str is None:
        format_str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=format_str,
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    return logging.getLogger(name)


def format_2dp(value: float) -> str:
    """Format a number with exactly two decimal places."""
    return f"{value:.2f}"


def format_clock(ts_s: int, tz: Optional[tzinfo] = None) -> str:
    """
    Format Unix seconds as a HH:MM:SS clock string.

    Args:
        ts_s: Unix timestamp in seconds
        tz: Display zone (system local time if None)
    """
    if tz is None:
        return datetime.fromtimestamp(ts_s).astimezone().strftime("%H:%M:%S")
    return datetime.fromtimestamp(ts_s, tz=tz).strftime("%H:%M:%S")
