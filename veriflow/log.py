"""Logging setup with rich console output."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "veriflow"


def configure_logging(level: str | int = "INFO", console: Console | None = None) -> logging.Logger:
    """Install a RichHandler on the package logger.

    Safe to call more than once; the handler is replaced, not duplicated.

    Args:
        level: Log level name or number
        console: Console to write to (stderr by default)

    Returns:
        The configured ``veriflow`` logger
    """
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


__all__ = ["configure_logging", "LOGGER_NAME"]
