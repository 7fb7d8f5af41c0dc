"""Shared error types for the Soniox stream bridge."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UpstreamTransportError(Exception):
    """Raised when the Soniox WebSocket cannot be reached or drops abnormally."""

    reason: str

    def __str__(self) -> str:
        return self.reason


@dataclass(frozen=True, slots=True)
class UpstreamProtocolError(Exception):
    """Raised when Soniox reports an error on an otherwise healthy connection."""

    code: int | None
    message: str

    def __str__(self) -> str:
        return f"{self.code}: {self.message}" if self.code is not None else self.message


@dataclass(frozen=True, slots=True)
class MalformedEventError(Exception):
    """Raised when an upstream message cannot be decoded into an event."""

    reason: str

    def __str__(self) -> str:
        return self.reason


@dataclass(frozen=True, slots=True)
class InboundStreamError(Exception):
    """Raised when the client's audio upload fails or disconnects."""

    reason: str

    def __str__(self) -> str:
        return self.reason


@dataclass(frozen=True, slots=True)
class BridgeInternalError(Exception):
    """Raised when the bridge itself fails while handling an upstream event."""

    reason: str

    def __str__(self) -> str:
        return self.reason


@dataclass(frozen=True, slots=True)
class SinkWriteError(Exception):
    """Raised when the outbound transcript stream rejects a write."""

    reason: str

    def __str__(self) -> str:
        return self.reason


__all__ = [
    "BridgeInternalError",
    "InboundStreamError",
    "MalformedEventError",
    "SinkWriteError",
    "UpstreamProtocolError",
    "UpstreamTransportError",
]
