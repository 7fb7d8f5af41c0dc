"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class UpstreamSettings:
    url: str
    api_key: str | None
    model: str
    audio_format: str
    sample_rate: int
    num_channels: int
    language_hints: tuple[str, ...]
    enable_endpoint_detection: bool
    connect_timeout_s: float
    finish_timeout_s: float
    token_separator: str = field(default="")

    def config_message(self) -> dict[str, Any]:
        """The first message of every Soniox session."""
        return {
            "api_key": self.api_key,
            "model": self.model,
            "audio_format": self.audio_format,
            "sample_rate": self.sample_rate,
            "num_channels": self.num_channels,
            "language_hints": list(self.language_hints),
            "enable_endpoint_detection": self.enable_endpoint_detection,
        }


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_sessions: int


@dataclass(frozen=True, slots=True)
class ServerSettings:
    host: str
    port: int


@dataclass(frozen=True, slots=True)
class AppSettings:
    upstream: UpstreamSettings
    limits: LimitsSettings
    server: ServerSettings


__all__ = [
    "AppSettings",
    "LimitsSettings",
    "ServerSettings",
    "UpstreamSettings",
]
