"""Injected logging capability.

Pipeline code never reaches for a module-level logger. Functions take a
``log`` argument satisfying the Log protocol and fall back to get_log(),
which adapts the stdlib ``png2rle`` logger. Tests pass their own recorder.

Example:
    >>> log = get_log()
    >>> log.info("encoded %d records", 12)
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Protocol

LOGGER_NAME = "png2rle"
DEFAULT_FORMAT = "[%(levelname)s]\t%(message)s"


class Log(Protocol):
    """Minimal logging capability used by the pipeline."""

    def info(self, msg: str, *args: Any) -> None: ...

    def warn(self, msg: str, *args: Any) -> None: ...

    def error(self, msg: str, *args: Any) -> None: ...


class StdLog:
    """Log adapter over a stdlib ``logging.Logger``."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger if logger is not None else logging.getLogger(LOGGER_NAME)

    def info(self, msg: str, *args: Any) -> None:
        self.logger.info(msg, *args)

    def warn(self, msg: str, *args: Any) -> None:
        self.logger.warning(msg, *args)

    def error(self, msg: str, *args: Any) -> None:
        self.logger.error(msg, *args)

    def __repr__(self) -> str:
        return f"StdLog(logger={self.logger.name!r})"


def get_log(log: Log | None = None) -> Log:
    """Return ``log`` if given, else the default stdlib adapter."""
    if log is not None:
        return log
    return StdLog()


def configure_logging(level: str = "INFO", fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """Attach a stderr handler to the package logger.

    Calling it twice replaces the previous handler instead of stacking them.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR)
        fmt: ``logging.Formatter`` format string

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_png2rle_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    handler._png2rle_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    logger.propagate = False
    return logger
