"""
Logging utilities for rdeptree.

Every module asks :func:`get_logger` for a child of the ``rdeptree``
logger. Nothing is printed until the CLI calls :func:`setup_logging`;
library callers get a ``NullHandler`` and can attach their own handlers.

Diagnostics only: user-facing output goes through
:mod:`rdeptree.utils.console`.
"""

from __future__ import annotations

import os
import sys
import logging
import threading
from typing import IO, Optional

from rdeptree.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

_ROOT_LOGGER_NAME = "rdeptree"

_lock = threading.Lock()


def verbosity_to_level(verbosity: int) -> int:
    """Map a ``-v`` count to a logging level.

    ``0`` shows warnings (skipped rows and files), ``1`` adds progress
    messages, ``2`` or more adds per-record debug output.
    """
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name when writing to a terminal.

    Args:
        fmt: Format string.
        datefmt: Date format for ``%(asctime)s``.
        stream: Stream the handler writes to; color is only used when it is
            a TTY and neither ``NO_COLOR`` nor ``CI`` is set.
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str,
        *,
        datefmt: Optional[str] = None,
        stream: Optional[IO[str]] = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = self._should_use_color(stream)

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname) if self.use_color else None
        if color is None:
            return super().format(record)

        # Other handlers may format the same record
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)

    @staticmethod
    def _should_use_color(stream: Optional[IO[str]] = None) -> bool:
        if os.environ.get("NO_COLOR") or os.environ.get("CI"):
            return False
        try:
            return (stream or sys.stderr).isatty()
        except (AttributeError, OSError, ValueError):
            return False


def setup_logging(
    verbosity: int = 0,
    *,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """Send ``rdeptree`` log records to *stream*.

    Repeated calls replace the previous handler. At debug verbosity the
    format adds a timestamp and the logger name, which tells core, locator
    and command messages apart.

    Args:
        verbosity: Number of ``-v`` flags given on the command line.
        stream: Output stream; defaults to ``sys.stderr``.

    Returns:
        The configured ``rdeptree`` logger.
    """
    level = verbosity_to_level(verbosity)
    stream = stream or sys.stderr
    fmt = LOG_VERBOSE_FORMAT if level <= logging.DEBUG else LOG_DEFAULT_FORMAT

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(
        ColoredFormatter(fmt, datefmt=LOG_DATE_FORMAT, stream=stream)
    )

    with _lock:
        root_logger = logging.getLogger(_ROOT_LOGGER_NAME)
        root_logger.handlers.clear()
        root_logger.addHandler(handler)
        root_logger.setLevel(level)
        root_logger.propagate = False

    return root_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger within the rdeptree namespace.

    ``get_logger("grammar")`` and ``get_logger("rdeptree.grammar")`` name the
    same logger.
    """
    if not name or name == _ROOT_LOGGER_NAME:
        logger = logging.getLogger(_ROOT_LOGGER_NAME)
    elif name.startswith(f"{_ROOT_LOGGER_NAME}."):
        logger = logging.getLogger(name)
    else:
        logger = logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")

    if not logger.handlers and (not logger.parent or not logger.parent.handlers):
        logger.addHandler(logging.NullHandler())

    return logger
