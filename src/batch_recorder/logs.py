"""Console logging setup for the CLI."""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "batch_recorder"
LOG_FORMAT = "[%(asctime)s] %(message)s"
DATE_FORMAT = "%H:%M:%S"


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Attach a single stderr handler to the package logger; safe to call repeatedly."""

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    handler = next(
        (existing for existing in logger.handlers if isinstance(existing, logging.StreamHandler)),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    else:
        handler.setStream(sys.stderr)
    handler.setLevel(level)
    return logger
