"""
CLI logging setup.

The library only emits records through module loggers; the CLI attaches a
rich handler on stderr for the duration of one invocation.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass

from rich.console import Console
from rich.logging import RichHandler

_LOGGER_NAME = "permstore"


@dataclass(frozen=True, slots=True)
class PreviousLogging:
    level: int
    propagate: bool
    handlers: tuple[logging.Handler, ...]


def _level_for_verbosity(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(*, verbosity: int) -> PreviousLogging:
    """Attach a stderr handler to the package logger; returns state for `restore_logging`."""
    logger = logging.getLogger(_LOGGER_NAME)
    previous = PreviousLogging(
        level=logger.level,
        propagate=logger.propagate,
        handlers=tuple(logger.handlers),
    )

    handler = RichHandler(
        console=Console(file=sys.stderr, force_terminal=False),
        show_time=False,
        show_path=verbosity >= 2,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.handlers = [handler]
    logger.setLevel(_level_for_verbosity(verbosity))
    logger.propagate = False
    return previous


def restore_logging(previous: PreviousLogging) -> None:
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in logger.handlers:
        if handler not in previous.handlers:
            handler.close()
    logger.handlers = list(previous.handlers)
    logger.setLevel(previous.level)
    logger.propagate = previous.propagate
