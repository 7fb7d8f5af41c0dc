"""Logging configuration."""

from __future__ import annotations

ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_LOG_FORMAT = "LOG_FORMAT"
ENV_SHOW_WEBSOCKETS_LOGS = "SHOW_WEBSOCKETS_LOGS"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Loggers that are lowered to WARNING unless SHOW_WEBSOCKETS_LOGS is set.
QUIET_LOGGERS = ("websockets", "websockets.client")

__all__ = [
    "DEFAULT_LOG_FORMAT",
    "DEFAULT_LOG_LEVEL",
    "ENV_LOG_FORMAT",
    "ENV_LOG_LEVEL",
    "ENV_SHOW_WEBSOCKETS_LOGS",
    "QUIET_LOGGERS",
]
