"""Centralized logging configuration for KasFlow.

- ``configure_logging(...)`` attaches a single ``StreamHandler`` to the package
  root logger (``"kasflow"``). Entrypoints (the Streamlit app, scripts) call it
  once at startup.
- ``get_logger(name)`` returns a logger under that root, attaching a
  ``NullHandler`` while nothing is configured so library use stays silent.

Library modules never attach their own handlers.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

__all__ = ["configure_logging", "get_logger"]

_PKG_LOGGER_NAME = "kasflow"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv("KASFLOW_LOG_LEVEL")
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Configure the package root logger exactly once.

    ``level`` defaults to ``KASFLOW_LOG_LEVEL`` when unset, otherwise INFO.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s"))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return ``kasflow.<name>``, with a ``NullHandler`` on the root until configured."""

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    if name == _PKG_LOGGER_NAME or name.startswith(_PKG_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_PKG_LOGGER_NAME}.{name}")
