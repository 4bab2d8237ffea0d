"""Console logging for the cmdtree logger hierarchy."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
ROOT_LOGGER_NAME = "cmdtree"

_CONSOLE_HANDLER_ATTR = "_cmdtree_console"


def setup_logging(
    level: int = logging.INFO,
    *,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure console logging; calling it again only updates the level.

    Args:
        level: Logging level (logging.DEBUG, logging.INFO, etc.)
        stream: Output stream, stderr by default
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    for handler in logger.handlers:
        if getattr(handler, _CONSOLE_HANDLER_ATTR, False):
            handler.setLevel(level)
            return logger

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.setLevel(level)
    setattr(handler, _CONSOLE_HANDLER_ATTR, True)
    logger.addHandler(handler)
    return logger
