"""Logging setup for termrelay.

Records go to stderr and, when ``logging.file`` is set, to a file. The
stderr handler must not write while a session holds the terminal in raw
mode: records would land mid-view without a carriage return. The CLI
wraps the session in ``console_suspended()`` for that.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

from termrelay.config.settings import LoggingConfig

LOGGER_NAME = "termrelay"
CONSOLE_HANDLER_NAME = "termrelay-console"
FILE_HANDLER_NAME = "termrelay-file"


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure the ``termrelay`` logger.

    Calling it again replaces the handlers installed by an earlier call.

    Args:
        config: Logging configuration. If None, uses defaults
                (WARNING level, stderr output).
    """
    if config is None:
        config = LoggingConfig()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, config.level.upper(), logging.WARNING))

    for handler in list(logger.handlers):
        if handler.get_name() in (CONSOLE_HANDLER_NAME, FILE_HANDLER_NAME):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(config.format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.set_name(CONSOLE_HANDLER_NAME)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if config.file:
        file_handler = logging.FileHandler(config.file)
        file_handler.set_name(FILE_HANDLER_NAME)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info("Logging initialized at %s level", config.level)


@contextmanager
def console_suspended() -> Iterator[None]:
    """Detach the stderr handler for the duration of the block.

    A NullHandler stands in while detached so that records without a
    file handler are dropped instead of reaching ``logging.lastResort``.
    """
    logger = logging.getLogger(LOGGER_NAME)
    detached = [h for h in logger.handlers if h.get_name() == CONSOLE_HANDLER_NAME]
    placeholder = logging.NullHandler()
    for handler in detached:
        logger.removeHandler(handler)
    logger.addHandler(placeholder)
    try:
        yield
    finally:
        logger.removeHandler(placeholder)
        for handler in detached:
            logger.addHandler(handler)
