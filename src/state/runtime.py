"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from src.state.settings import AppSettings
    from src.realtime.bridge import RealtimeBridge
    from src.handlers.connections import ConnectionManager


@dataclass(slots=True)
class RuntimeDeps:
    connections: ConnectionManager
    realtime_bridge: RealtimeBridge
    settings: AppSettings

    async def shutdown(self) -> None:
        count = self.connections.get_connection_count()
        if count:
            logger.info("runtime: shutting down with %s active sessions", count)


__all__ = ["RuntimeDeps"]
