"""Admission control configuration (env names and defaults only)."""

from __future__ import annotations

ENV_MAX_CONCURRENT_SESSIONS = "MAX_CONCURRENT_SESSIONS"

DEFAULT_MAX_CONCURRENT_SESSIONS = 100

__all__ = [
    "DEFAULT_MAX_CONCURRENT_SESSIONS",
    "ENV_MAX_CONCURRENT_SESSIONS",
]
