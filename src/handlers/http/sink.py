"""ASGI response that streams transcripts as the bridge produces them."""

from __future__ import annotations

import logging
from collections.abc import Callable, Awaitable, AsyncIterator

from starlette.responses import Response
from starlette.types import Send, Scope, Receive

from src.errors import SinkWriteError
from src.realtime.bridge import RealtimeBridge
from src.config.http import STREAM_HEADERS, STREAM_MEDIA_TYPE

from .errors import encode_error_body

logger = logging.getLogger(__name__)

CloseFn = Callable[[], Awaitable[None]]


def _stream_headers() -> list[tuple[bytes, bytes]]:
    headers = [(b"content-type", STREAM_MEDIA_TYPE.encode("latin-1"))]
    headers.extend((k.encode("latin-1"), v.encode("latin-1")) for k, v in STREAM_HEADERS.items())
    return headers


class AsgiTranscriptSink:
    """Outbound side of a bridge session on top of a raw ASGI `send`.

    The response start is deferred until the first write or failure, so a
    failure that happens before any transcript can still pick the status code.
    """

    def __init__(self, send: Send) -> None:
        self._send = send
        self._started = False
        self._closed = False

    @property
    def started(self) -> bool:
        return self._started

    @property
    def closed(self) -> bool:
        return self._closed

    async def _emit(self, message: dict) -> None:
        try:
            await self._send(message)
        except OSError as exc:
            self._closed = True
            raise SinkWriteError(str(exc) or "client disconnected") from exc

    async def _start(self, status: int, headers: list[tuple[bytes, bytes]]) -> None:
        self._started = True
        await self._emit({"type": "http.response.start", "status": status, "headers": headers})

    async def write(self, text: str) -> None:
        if self._closed:
            raise SinkWriteError("response already closed")
        if not self._started:
            await self._start(200, _stream_headers())
        await self._emit({"type": "http.response.body", "body": text.encode("utf-8"), "more_body": True})

    async def fail(self, status: int, message: str) -> None:
        if self._closed:
            return
        if self._started:
            await self.close()
            return
        body = encode_error_body(message)
        self._closed = True
        await self._start(
            status,
            [(b"content-type", b"application/json"), (b"content-length", str(len(body)).encode("latin-1"))],
        )
        await self._emit({"type": "http.response.body", "body": body, "more_body": False})

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if not self._started:
            await self._start(200, _stream_headers())
        await self._emit({"type": "http.response.body", "body": b"", "more_body": False})


class TranscriptStreamResponse(Response):
    """Run one bridge session for the lifetime of the response."""

    def __init__(
        self,
        bridge: RealtimeBridge,
        audio: AsyncIterator[bytes],
        *,
        on_close: CloseFn | None = None,
    ) -> None:
        super().__init__(media_type=STREAM_MEDIA_TYPE)
        self._bridge = bridge
        self._audio = audio
        self._on_close = on_close

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        sink = AsgiTranscriptSink(send)
        controller = self._bridge.new_session(sink)
        try:
            await controller.run(self._audio)
        finally:
            if self._on_close is not None:
                try:
                    await self._on_close()
                except Exception:
                    logger.exception("http: releasing stream slot failed session_id=%s", controller.session_id)


__all__ = ["AsgiTranscriptSink", "TranscriptStreamResponse"]
