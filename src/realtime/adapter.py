"""Adapter owning one Soniox realtime WebSocket session."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from collections import deque
from collections.abc import Callable, Awaitable

import orjson
import websockets
from websockets.exceptions import ConnectionClosed, ConnectionClosedOK, WebSocketException

from src.state.settings import UpstreamSettings
from src.config.upstream import TERMINAL_FRAME
from src.errors import BridgeInternalError, MalformedEventError, UpstreamTransportError

from .events import UpstreamEvent, parse_upstream_event

logger = logging.getLogger(__name__)

ReadyFn = Callable[[], Awaitable[None]]
EventFn = Callable[[UpstreamEvent], Awaitable[None]]
ClosedFn = Callable[[], Awaitable[None]]
ErrorFn = Callable[[Exception], Awaitable[None]]
ConnectFn = Callable[..., Awaitable[Any]]


def _redacted(message: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in message.items() if k != "api_key"}


class UpstreamSessionAdapter:
    """Connect, configure, stream audio to and read events from Soniox.

    Audio passed to `send()` before the configuration message has gone out is
    kept in a FIFO queue and flushed, in order, before `on_ready` fires.
    Callbacks run on the adapter's reader task; `on_closed` fires exactly once.
    """

    def __init__(
        self,
        *,
        settings: UpstreamSettings,
        on_ready: ReadyFn,
        on_event: EventFn,
        on_closed: ClosedFn,
        on_error: ErrorFn,
        connect_fn: ConnectFn | None = None,
        session_id: str = "unknown",
    ) -> None:
        self._settings = settings
        self._on_ready = on_ready
        self._on_event = on_event
        self._on_closed = on_closed
        self._on_error = on_error
        self._connect = connect_fn or websockets.connect
        self._session_id = session_id

        self._ws: Any | None = None
        self._task: asyncio.Task | None = None
        self._pending: deque[bytes] = deque()

        self._ready = False
        self._transport_open = False
        self._terminal_requested = False
        self._terminal_sent = False
        self._closing = False
        self._closed = False

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending_frames(self) -> int:
        return len(self._pending)

    def open(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name=f"soniox-upstream-{self._session_id}")
        return self._task

    async def send(self, frame: bytes) -> None:
        # Only end_audio()/close() may put the terminal frame on the wire.
        if not frame or self._closing or self._closed or self._terminal_requested:
            return
        if not self._ready:
            self._pending.append(bytes(frame))
            return
        if self._ws is not None and self._transport_open:
            # A dropped connection is reported by the reader task.
            with contextlib.suppress(ConnectionClosed):
                await self._ws.send(bytes(frame))

    async def end_audio(self) -> None:
        if self._terminal_requested or self._closing:
            return
        self._terminal_requested = True
        if self._ready:
            with contextlib.suppress(ConnectionClosed):
                await self._send_terminal()

    async def close(self) -> None:
        if self._closing:
            return
        self._closing = True
        self._pending.clear()

        ws = self._ws
        if ws is None:
            task = self._task
            if task is not None and not task.done() and task is not asyncio.current_task():
                task.cancel()
            return
        if not self._transport_open:
            return

        with contextlib.suppress(WebSocketException, OSError):
            await self._send_terminal()
        self._transport_open = False
        with contextlib.suppress(WebSocketException, OSError):
            await ws.close()
        logger.info("upstream: connection closed session_id=%s", self._session_id)

    async def wait_closed(self) -> None:
        task = self._task
        if task is None or task is asyncio.current_task():
            return
        await asyncio.wait({task})

    async def _open_transport(self) -> Any:
        connecting = self._connect(self._settings.url, max_size=None)
        timeout_s = self._settings.connect_timeout_s
        if timeout_s > 0:
            return await asyncio.wait_for(connecting, timeout=timeout_s)
        return await connecting

    async def _send_terminal(self) -> None:
        if self._terminal_sent or self._ws is None or not self._transport_open:
            return
        self._terminal_sent = True
        await self._ws.send(TERMINAL_FRAME)
        logger.info("upstream: sent end-of-audio frame session_id=%s", self._session_id)

    async def _configure(self, ws: Any) -> None:
        message = self._settings.config_message()
        await ws.send(orjson.dumps(message).decode("utf-8"))
        logger.info("upstream: configuration sent session_id=%s config=%s", self._session_id, _redacted(message))

        flushed = 0
        while self._pending:
            await ws.send(self._pending.popleft())
            flushed += 1
        # No await between the empty check and this flip: later frames go out directly.
        self._ready = True
        if flushed:
            logger.info("upstream: sent %s buffered audio frames session_id=%s", flushed, self._session_id)

        if self._terminal_requested:
            await self._send_terminal()

    async def _dispatch(self, raw: str | bytes) -> None:
        try:
            event = parse_upstream_event(raw)
        except MalformedEventError as exc:
            logger.warning("upstream: skipping malformed event session_id=%s: %s", self._session_id, exc)
            return
        logger.debug("upstream: event session_id=%s %s", self._session_id, event)
        await self._on_event(event)

    async def _run(self) -> None:
        try:
            ws = await self._open_transport()
            self._ws = ws
            self._transport_open = True
            logger.info("upstream: connection opened session_id=%s", self._session_id)
            if self._closing:
                return

            await self._configure(ws)
            await self._on_ready()

            async for raw in ws:
                await self._dispatch(raw)
        except asyncio.CancelledError:
            raise
        except ConnectionClosedOK:
            logger.info("upstream: connection closed by Soniox session_id=%s", self._session_id)
        except ConnectionClosed as exc:
            if not self._closing:
                await self._on_error(
                    UpstreamTransportError(f"connection closed code={exc.rcvd.code if exc.rcvd else None}")
                )
        except (WebSocketException, OSError, TimeoutError) as exc:
            await self._on_error(UpstreamTransportError(str(exc) or type(exc).__name__))
        except Exception as exc:
            logger.exception("upstream: bridge failed handling Soniox session_id=%s", self._session_id)
            await self._on_error(BridgeInternalError(str(exc) or type(exc).__name__))
        finally:
            await self._release()

    async def _release(self) -> None:
        self._ready = False
        if self._ws is not None and self._transport_open:
            self._transport_open = False
            with contextlib.suppress(WebSocketException, OSError):
                await self._ws.close()
        if self._closed:
            return
        self._closed = True
        await self._on_closed()


__all__ = ["UpstreamSessionAdapter"]
