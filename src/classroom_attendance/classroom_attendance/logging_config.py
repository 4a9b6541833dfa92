from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO", *, log_file: Optional[str] = None) -> None:
    """Configure the package logger once; safe to call again with a new level."""

    logger = logging.getLogger(__package__)
    logger.setLevel((level or "INFO").upper())

    if getattr(logger, "_configured", False):
        return

    formatter = logging.Formatter(LOG_FORMAT)
    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(formatter)
    logger.addHandler(stream)

    if log_file:
        handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=5)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False
    logger._configured = True
