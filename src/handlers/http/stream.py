"""Handler for the streaming speech-to-text route."""

from __future__ import annotations

import logging

from fastapi import Request
from starlette.responses import Response

from src.state import RuntimeDeps
from src.config.http import HTTP_STATUS_UNAVAILABLE, HTTP_MESSAGE_AT_CAPACITY

from .errors import error_response
from .sink import TranscriptStreamResponse

logger = logging.getLogger(__name__)


async def handle_stream_request(request: Request, runtime_deps: RuntimeDeps) -> Response:
    connections = runtime_deps.connections
    if not await connections.connect(request):
        logger.warning("http: rejecting stream, at capacity (%s sessions)", connections.max_connections)
        return error_response(HTTP_STATUS_UNAVAILABLE, HTTP_MESSAGE_AT_CAPACITY)

    async def _release() -> None:
        await connections.disconnect(request)
        logger.info("http: stream finished. Active: %s", connections.get_connection_count())

    logger.info(
        "http: stream accepted. Active: %s, free slots: %s",
        connections.get_connection_count(),
        connections.available,
    )
    return TranscriptStreamResponse(runtime_deps.realtime_bridge, request.stream(), on_close=_release)


__all__ = ["handle_stream_request"]
