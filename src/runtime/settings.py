"""Environment parsing for runtime settings.

Environment variable names and defaults live in `src/config/*`; this module
resolves them once into the frozen dataclasses of `src/state/settings.py`.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from src.config.secrets import DEFAULT_DOTENV_FILE, get_soniox_api_key
from src.config.http import ENV_HOST, ENV_PORT, DEFAULT_HOST, DEFAULT_PORT
from src.config.limits import ENV_MAX_CONCURRENT_SESSIONS, DEFAULT_MAX_CONCURRENT_SESSIONS
from src.state.settings import (
    AppSettings,
    ServerSettings,
    LimitsSettings,
    UpstreamSettings,
)
from src.config.upstream import (
    AUDIO_FORMAT,
    ENV_SONIOX_MODEL,
    AUDIO_NUM_CHANNELS,
    ENV_SONIOX_LANGUAGE,
    AUDIO_SAMPLE_RATE_HZ,
    DEFAULT_SONIOX_MODEL,
    DEFAULT_SONIOX_LANGUAGE,
    ENV_SONIOX_WEBSOCKET_URL,
    DEFAULT_SONIOX_WEBSOCKET_URL,
    ENV_SONIOX_CONNECT_TIMEOUT_S,
    ENV_SONIOX_FINISH_TIMEOUT_S,
    ENV_TRANSCRIPT_TOKEN_SEPARATOR,
    DEFAULT_SONIOX_CONNECT_TIMEOUT_S,
    DEFAULT_SONIOX_FINISH_TIMEOUT_S,
    ENV_SONIOX_ENABLE_ENDPOINT_DETECTION,
    DEFAULT_TRANSCRIPT_TOKEN_SEPARATOR,
    DEFAULT_SONIOX_ENABLE_ENDPOINT_DETECTION,
)

_TRUE_VALUES = {"1", "true", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "no", "n", "off", "disabled", "disable", "none", "null"}


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    v = raw.strip().lower()
    if v in _FALSE_VALUES:
        return False
    if v in _TRUE_VALUES:
        return True
    return default


def _language_hints(raw: str) -> tuple[str, ...]:
    hints = tuple(part.strip() for part in raw.split(",") if part.strip())
    return hints or (DEFAULT_SONIOX_LANGUAGE,)


def _load_upstream_settings() -> UpstreamSettings:
    # The separator is used verbatim: a single space must survive.
    separator = os.getenv(ENV_TRANSCRIPT_TOKEN_SEPARATOR)
    return UpstreamSettings(
        url=_str_env(ENV_SONIOX_WEBSOCKET_URL, DEFAULT_SONIOX_WEBSOCKET_URL),
        api_key=get_soniox_api_key(),
        model=_str_env(ENV_SONIOX_MODEL, DEFAULT_SONIOX_MODEL),
        audio_format=AUDIO_FORMAT,
        sample_rate=AUDIO_SAMPLE_RATE_HZ,
        num_channels=AUDIO_NUM_CHANNELS,
        language_hints=_language_hints(_str_env(ENV_SONIOX_LANGUAGE, DEFAULT_SONIOX_LANGUAGE)),
        enable_endpoint_detection=_bool_env(
            ENV_SONIOX_ENABLE_ENDPOINT_DETECTION, DEFAULT_SONIOX_ENABLE_ENDPOINT_DETECTION
        ),
        connect_timeout_s=max(0.0, _float_env(ENV_SONIOX_CONNECT_TIMEOUT_S, DEFAULT_SONIOX_CONNECT_TIMEOUT_S)),
        finish_timeout_s=max(0.0, _float_env(ENV_SONIOX_FINISH_TIMEOUT_S, DEFAULT_SONIOX_FINISH_TIMEOUT_S)),
        token_separator=separator if separator is not None else DEFAULT_TRANSCRIPT_TOKEN_SEPARATOR,
    )


def _load_limits_settings() -> LimitsSettings:
    max_sessions = _int_env(ENV_MAX_CONCURRENT_SESSIONS, DEFAULT_MAX_CONCURRENT_SESSIONS)
    return LimitsSettings(max_concurrent_sessions=max(1, max_sessions))


def _load_server_settings() -> ServerSettings:
    return ServerSettings(
        host=_str_env(ENV_HOST, DEFAULT_HOST),
        port=_int_env(ENV_PORT, DEFAULT_PORT),
    )


def load_environment(env_file: str | Path | None = None) -> bool:
    """Merge a `.env` file into the process environment without overriding it."""
    return load_dotenv(env_file or DEFAULT_DOTENV_FILE, override=False)


def load_settings(*, env_file: str | Path | None = None) -> AppSettings:
    load_environment(env_file)
    return AppSettings(
        upstream=_load_upstream_settings(),
        limits=_load_limits_settings(),
        server=_load_server_settings(),
    )


__all__ = ["load_environment", "load_settings"]
