"""Bridge session admission control."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Cap the number of concurrent bridge sessions.

    Sessions are keyed by the identity of their owner (the incoming request),
    so releasing an owner twice, or one that was never admitted, is a no-op.
    """

    def __init__(self, *, max_connections: int) -> None:
        self._max = max(1, int(max_connections))
        self._lock = asyncio.Lock()
        self._active: set[int] = set()

    @property
    def max_connections(self) -> int:
        return self._max

    @property
    def available(self) -> int:
        return max(0, self._max - len(self._active))

    async def connect(self, owner: Any) -> bool:
        key = id(owner)
        async with self._lock:
            if key in self._active:
                return True
            if len(self._active) >= self._max:
                logger.debug("connections: full (%s/%s)", len(self._active), self._max)
                return False
            self._active.add(key)
            return True

    async def disconnect(self, owner: Any) -> None:
        async with self._lock:
            self._active.discard(id(owner))

    def get_connection_count(self) -> int:
        return len(self._active)


__all__ = ["ConnectionManager"]
