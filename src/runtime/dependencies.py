"""Runtime dependency construction (bridge factory + admission control)."""

from __future__ import annotations

import logging

from src.state import RuntimeDeps
from src.state.settings import AppSettings
from src.realtime.adapter import ConnectFn
from src.realtime.bridge import RealtimeBridge
from src.handlers.connections import ConnectionManager

from .settings import load_settings

logger = logging.getLogger(__name__)


async def build_runtime_deps(
    settings: AppSettings | None = None,
    *,
    connect_fn: ConnectFn | None = None,
) -> RuntimeDeps:
    settings = settings or load_settings()

    upstream = settings.upstream
    if not upstream.api_key:
        logger.warning("runtime: SONIOX_API_KEY is not set; Soniox will reject sessions")
    logger.info(
        "runtime: upstream url=%s model=%s languages=%s",
        upstream.url,
        upstream.model,
        ",".join(upstream.language_hints),
    )

    return RuntimeDeps(
        connections=ConnectionManager(max_connections=settings.limits.max_concurrent_sessions),
        realtime_bridge=RealtimeBridge(settings=upstream, connect_fn=connect_fn),
        settings=settings,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
