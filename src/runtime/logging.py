"""Logging initialization.

Reads the environment at call time, so `load_environment()` must run first
for `.env` values to apply.
"""

from __future__ import annotations

import os
import logging

from src.config.logging import (
    ENV_LOG_LEVEL,
    QUIET_LOGGERS,
    ENV_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOG_FORMAT,
    ENV_SHOW_WEBSOCKETS_LOGS,
)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _resolve_level() -> int:
    name = (os.getenv(ENV_LOG_LEVEL) or "").strip().upper() or DEFAULT_LOG_LEVEL
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> int:
    """Configure the root logger and return the effective level."""
    show_ws = (os.getenv(ENV_SHOW_WEBSOCKETS_LOGS) or "").strip().lower() in _TRUE_VALUES
    if not show_ws:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    level = _resolve_level()
    fmt = (os.getenv(ENV_LOG_FORMAT) or "").strip() or DEFAULT_LOG_FORMAT
    logging.basicConfig(level=level, format=fmt)
    return level


__all__ = ["configure_logging"]
