"""Logging helpers for homelinks.

Every module logs through a child of the ``homelinks`` logger. A single
:class:`~logging.StreamHandler` is attached to that parent the first time
:func:`get_logger` is called, so output is visible on the console by default.
"""

from __future__ import annotations

import logging

ROOT_LOGGER = "homelinks"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return the logger for *name*, typically ``__name__`` of the caller."""
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(logging.INFO)
    return logging.getLogger(name)


def set_level(level: str) -> None:
    get_logger(ROOT_LOGGER).setLevel(level.upper())
