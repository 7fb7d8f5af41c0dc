"""Factory for per-request bridge sessions."""

from __future__ import annotations

from src.state.settings import UpstreamSettings

from .adapter import ConnectFn
from .controller import TranscriptSink, BridgeController


class RealtimeBridge:
    def __init__(self, *, settings: UpstreamSettings, connect_fn: ConnectFn | None = None) -> None:
        self._settings = settings
        self._connect_fn = connect_fn

    @property
    def settings(self) -> UpstreamSettings:
        return self._settings

    def new_session(self, sink: TranscriptSink) -> BridgeController:
        return BridgeController(settings=self._settings, sink=sink, connect_fn=self._connect_fn)


__all__ = ["RealtimeBridge"]
