"""Logging setup for garage desk."""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "garage_desk"


def setup_logger(level: str | int = logging.INFO, name: str = LOGGER_NAME) -> logging.Logger:
    """Configure the package logger once and return it.

    Module loggers (``logging.getLogger(__name__)``) propagate here.
    """
    log = logging.getLogger(name)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    log.setLevel(level)
    if log.handlers:
        return log

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(fmt)
    log.addHandler(handler)
    return log
