"""Per-request bridge between an inbound audio stream and one Soniox session."""

from __future__ import annotations

import uuid
import asyncio
import logging
import contextlib
from typing import Protocol
from collections.abc import AsyncIterator

from src.state.session import SessionState, can_transition
from src.state.settings import UpstreamSettings
from src.config.http import (
    HTTP_STATUS_INTERNAL_ERROR,
    HTTP_MESSAGE_INTERNAL_ERROR,
    HTTP_MESSAGE_UPSTREAM_TRANSPORT,
)
from src.errors import (
    BridgeInternalError,
    SinkWriteError,
    InboundStreamError,
    UpstreamProtocolError,
    UpstreamTransportError,
)

from .events import UpstreamEvent
from .consolidator import TokenConsolidator
from .adapter import ConnectFn, UpstreamSessionAdapter

logger = logging.getLogger(__name__)


class TranscriptSink(Protocol):
    @property
    def started(self) -> bool: ...

    async def write(self, text: str) -> None: ...

    async def fail(self, status: int, message: str) -> None: ...

    async def close(self) -> None: ...


def failure_response(exc: Exception) -> tuple[int, str]:
    """Map a session failure to the status/message sent when no byte has flowed yet."""
    if isinstance(exc, UpstreamProtocolError):
        code = exc.code
        if code is None or not 400 <= code <= 599:
            code = HTTP_STATUS_INTERNAL_ERROR
        return code, exc.message or HTTP_MESSAGE_UPSTREAM_TRANSPORT
    if isinstance(exc, UpstreamTransportError):
        return HTTP_STATUS_INTERNAL_ERROR, HTTP_MESSAGE_UPSTREAM_TRANSPORT
    if isinstance(exc, BridgeInternalError):
        return HTTP_STATUS_INTERNAL_ERROR, HTTP_MESSAGE_INTERNAL_ERROR
    return HTTP_STATUS_INTERNAL_ERROR, str(exc) or type(exc).__name__


class BridgeController:
    """Own one bridging session from connect to release.

    All state lives here and is only touched between awaits of the single
    event loop: the inbound pump task and the upstream reader task never
    mutate it concurrently. `run()` returns once the upstream connection and
    the outbound sink have both been released.
    """

    def __init__(
        self,
        *,
        settings: UpstreamSettings,
        sink: TranscriptSink,
        connect_fn: ConnectFn | None = None,
        session_id: str | None = None,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex
        self._sink = sink
        self._finish_timeout_s = float(settings.finish_timeout_s)
        self._consolidator = TokenConsolidator(separator=settings.token_separator)
        self._adapter = UpstreamSessionAdapter(
            settings=settings,
            on_ready=self._handle_ready,
            on_event=self._handle_event,
            on_closed=self._handle_upstream_closed,
            on_error=self._fail,
            connect_fn=connect_fn,
            session_id=self.session_id,
        )
        self._state = SessionState.CONNECTING
        self._done = asyncio.Event()
        self._pump_task: asyncio.Task | None = None
        self._finish_task: asyncio.Task | None = None
        self._emitted = 0
        self._error: Exception | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def error(self) -> Exception | None:
        return self._error

    @property
    def emitted_count(self) -> int:
        return self._emitted

    @property
    def transcript(self) -> str:
        return self._consolidator.transcript

    def _transition(self, target: SessionState) -> bool:
        if not can_transition(self._state, target):
            logger.debug(
                "bridge: ignoring transition %s -> %s session_id=%s",
                self._state.value,
                target.value,
                self.session_id,
            )
            return False
        logger.debug("bridge: %s -> %s session_id=%s", self._state.value, target.value, self.session_id)
        self._state = target
        return True

    async def run(self, audio: AsyncIterator[bytes]) -> None:
        logger.info("bridge: session started session_id=%s", self.session_id)
        self._adapter.open()
        self._pump_task = asyncio.create_task(self._pump(audio), name=f"bridge-pump-{self.session_id}")
        try:
            await self._done.wait()
        finally:
            await self._release()

    async def _release(self) -> None:
        current = asyncio.current_task()
        for task in (self._pump_task, self._finish_task):
            if task is not None and not task.done() and task is not current:
                task.cancel()
        if not self._state.is_terminal:
            # run() itself was cancelled (server shutdown); tear down as a normal close.
            self._transition(SessionState.CLOSED)
            await self._adapter.close()
            await self._close_sink()
        await self._adapter.wait_closed()
        logger.info(
            "bridge: session released session_id=%s state=%s emitted=%s",
            self.session_id,
            self._state.value,
            self._emitted,
        )

    async def _pump(self, audio: AsyncIterator[bytes]) -> None:
        try:
            async for chunk in audio:
                if self._state.is_terminal:
                    return
                if chunk:
                    await self._adapter.send(chunk)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            await self._fail(InboundStreamError(str(exc) or type(exc).__name__))
            return
        await self._handle_inbound_end()

    async def _handle_inbound_end(self) -> None:
        if not self._transition(SessionState.FINISHING):
            return
        logger.info("bridge: audio stream ended session_id=%s", self.session_id)
        await self._adapter.end_audio()
        if self._finish_timeout_s > 0 and self._state is SessionState.FINISHING:
            self._finish_task = asyncio.create_task(
                self._finish_watchdog(), name=f"bridge-finish-{self.session_id}"
            )

    async def _finish_watchdog(self) -> None:
        await asyncio.sleep(self._finish_timeout_s)
        if self._state is SessionState.FINISHING:
            logger.warning(
                "bridge: no end of transcription from Soniox after %.1fs; closing session_id=%s",
                self._finish_timeout_s,
                self.session_id,
            )
            await self._finish("finish timeout")

    async def _handle_ready(self) -> None:
        if self._transition(SessionState.CONFIGURED):
            self._transition(SessionState.STREAMING)

    async def _handle_event(self, event: UpstreamEvent) -> None:
        if self._state.is_terminal:
            return
        if event.is_error:
            await self._fail(UpstreamProtocolError(event.error_code, event.error_message or ""))
            return

        transcript = self._consolidator.ingest(event.tokens, event.final_audio_proc_ms)
        if transcript is not None:
            await self._emit(transcript)

        if event.finished:
            await self._finish("finished")

    async def _emit(self, transcript: str) -> None:
        if self._state.is_terminal:
            return
        try:
            await self._sink.write(transcript)
        except SinkWriteError as exc:
            await self._fail(exc)
            return
        self._emitted += 1
        logger.debug("bridge: transcript session_id=%s text=%r", self.session_id, transcript)

    async def _handle_upstream_closed(self) -> None:
        await self._finish("upstream closed")

    async def _finish(self, reason: str) -> None:
        # ERRORED -> CLOSED belongs to _fail, which may still be reporting the status.
        if self._state.is_terminal or not self._transition(SessionState.CLOSED):
            return
        logger.info(
            "bridge: session closed session_id=%s reason=%s transcript_chars=%s",
            self.session_id,
            reason,
            len(self._consolidator.transcript),
        )
        await self._adapter.close()
        await self._close_sink()
        self._done.set()

    async def _fail(self, exc: Exception) -> None:
        if not self._transition(SessionState.ERRORED):
            return
        self._error = exc
        logger.warning("bridge: session failed session_id=%s %s: %s", self.session_id, type(exc).__name__, exc)
        await self._adapter.close()
        if self._sink.started:
            # Status is already on the wire; ending the body is all that is left.
            await self._close_sink()
        else:
            status, message = failure_response(exc)
            with contextlib.suppress(SinkWriteError, OSError):
                await self._sink.fail(status, message)
        self._transition(SessionState.CLOSED)
        self._done.set()

    async def _close_sink(self) -> None:
        try:
            await self._sink.close()
        except (SinkWriteError, OSError):
            logger.debug("bridge: closing response failed session_id=%s", self.session_id, exc_info=True)


__all__ = ["BridgeController", "TranscriptSink", "failure_response"]
