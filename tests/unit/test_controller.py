from __future__ import annotations

import asyncio

import pytest

from src.state.session import SessionState
from src.realtime.controller import BridgeController, failure_response
from src.errors import (
    SinkWriteError,
    BridgeInternalError,
    InboundStreamError,
    UpstreamProtocolError,
    UpstreamTransportError,
)
from tests.unit.fakes import (
    AudioFeed,
    FakeUpstream,
    RecordingSink,
    FakeConnector,
    SlowCloseUpstream,
    event,
    token,
    wait_until,
    make_settings,
)


def _controller(
    connector: FakeConnector,
    sink: RecordingSink | None = None,
    **overrides,
) -> tuple[BridgeController, RecordingSink]:
    sink = sink or RecordingSink()
    controller = BridgeController(
        settings=make_settings(**overrides),
        sink=sink,
        connect_fn=connector,
        session_id="test",
    )
    return controller, sink


@pytest.mark.asyncio
async def test_full_session_streams_deduplicated_transcripts() -> None:
    gate = asyncio.Event()
    upstream = FakeUpstream()
    controller, sink = _controller(FakeConnector(upstream, gate=gate))
    feed = AudioFeed()
    task = asyncio.create_task(controller.run(feed))

    feed.push(b"a")
    feed.push(b"b")
    await wait_until(lambda: controller._adapter.pending_frames == 2)
    assert controller.state is SessionState.CONNECTING

    gate.set()
    await wait_until(lambda: controller.state is SessionState.STREAMING)
    assert upstream.binary_frames == [b"a", b"b"]

    feed.push(b"c")
    await wait_until(lambda: upstream.binary_frames == [b"a", b"b", b"c"])

    upstream.push(event(token("hel", 0, final=False), marker=0))
    upstream.push(event(token("hello", 0), marker=100))
    await wait_until(lambda: sink.writes == ["hello"])
    upstream.push(event(token(" world", 500), marker=200))
    await wait_until(lambda: sink.writes == ["hello", "hello world"])
    upstream.push(event(token("hello", 0), token(" world", 500), marker=200))

    feed.end()
    await wait_until(lambda: controller.state is SessionState.FINISHING)
    assert upstream.binary_frames[-1] == b""

    upstream.push(event(marker=300, finished=True))
    await asyncio.wait_for(task, timeout=1.0)

    assert controller.state is SessionState.CLOSED
    assert controller.error is None
    assert sink.writes == ["hello", "hello world"]
    assert controller.emitted_count == 2
    assert sink.failure is None
    assert sink.close_calls == 1
    assert upstream.binary_frames == [b"a", b"b", b"c", b""]
    assert upstream.close_calls == 1


@pytest.mark.asyncio
async def test_upstream_error_before_any_transcript_becomes_http_status() -> None:
    upstream = FakeUpstream()
    controller, sink = _controller(FakeConnector(upstream))
    task = asyncio.create_task(controller.run(AudioFeed()))
    await wait_until(lambda: controller.state is SessionState.STREAMING)

    upstream.push(event(error_code=503, error_message="overloaded"))
    await asyncio.wait_for(task, timeout=1.0)

    assert sink.failure == (503, "overloaded")
    assert sink.writes == []
    assert isinstance(controller.error, UpstreamProtocolError)
    assert controller.state is SessionState.CLOSED
    assert upstream.close_calls == 1


@pytest.mark.asyncio
async def test_upstream_error_after_transcript_only_ends_the_stream() -> None:
    upstream = FakeUpstream()
    controller, sink = _controller(FakeConnector(upstream))
    task = asyncio.create_task(controller.run(AudioFeed()))
    await wait_until(lambda: controller.state is SessionState.STREAMING)

    upstream.push(event(token("hello", 0), marker=100))
    await wait_until(lambda: sink.writes == ["hello"])
    upstream.push(event(error_code=503, error_message="overloaded"))
    await asyncio.wait_for(task, timeout=1.0)

    assert sink.failure is None
    assert sink.close_calls == 1
    assert isinstance(controller.error, UpstreamProtocolError)


@pytest.mark.asyncio
async def test_unusable_error_code_maps_to_500() -> None:
    upstream = FakeUpstream()
    controller, sink = _controller(FakeConnector(upstream))
    task = asyncio.create_task(controller.run(AudioFeed()))
    await wait_until(lambda: controller.state is SessionState.STREAMING)

    upstream.push(event(error_code=42, error_message="odd"))
    await asyncio.wait_for(task, timeout=1.0)

    assert sink.failure == (500, "odd")


@pytest.mark.asyncio
async def test_connect_failure_reports_transport_error() -> None:
    controller, sink = _controller(FakeConnector(error=ConnectionRefusedError("refused")))
    await asyncio.wait_for(controller.run(AudioFeed()), timeout=1.0)

    assert sink.failure == (500, "Soniox WebSocket error")
    assert controller.state is SessionState.CLOSED


@pytest.mark.asyncio
async def test_inbound_error_closes_upstream() -> None:
    upstream = FakeUpstream()
    controller, sink = _controller(FakeConnector(upstream))
    feed = AudioFeed()
    task = asyncio.create_task(controller.run(feed))
    await wait_until(lambda: controller.state is SessionState.STREAMING)

    feed.fail(RuntimeError("client went away"))
    await asyncio.wait_for(task, timeout=1.0)

    assert isinstance(controller.error, InboundStreamError)
    assert upstream.close_calls == 1
    assert upstream.binary_frames == [b""]
    assert sink.failure == (500, "client went away")


@pytest.mark.asyncio
async def test_inbound_error_keeps_its_status_while_upstream_close_is_in_flight() -> None:
    upstream = SlowCloseUpstream()
    controller, sink = _controller(FakeConnector(upstream))
    feed = AudioFeed()
    task = asyncio.create_task(controller.run(feed))
    await wait_until(lambda: controller.state is SessionState.STREAMING)

    feed.fail(RuntimeError("upload broke"))
    await asyncio.wait_for(task, timeout=1.0)

    assert isinstance(controller.error, InboundStreamError)
    assert controller.state is SessionState.CLOSED
    assert sink.failure == (500, "upload broke")
    assert sink.close_calls == 0
    assert upstream.close_calls == 1


@pytest.mark.asyncio
async def test_upstream_close_while_streaming_closes_response() -> None:
    upstream = FakeUpstream()
    controller, sink = _controller(FakeConnector(upstream))
    task = asyncio.create_task(controller.run(AudioFeed()))
    await wait_until(lambda: controller.state is SessionState.STREAMING)

    upstream.push_close()
    await asyncio.wait_for(task, timeout=1.0)

    assert controller.state is SessionState.CLOSED
    assert controller.error is None
    assert sink.close_calls == 1
    assert sink.failure is None
    assert upstream.close_calls == 1


@pytest.mark.asyncio
async def test_finishing_is_bounded_by_timeout() -> None:
    upstream = FakeUpstream()
    controller, sink = _controller(FakeConnector(upstream), finish_timeout_s=0.05)
    feed = AudioFeed()
    task = asyncio.create_task(controller.run(feed))
    await wait_until(lambda: controller.state is SessionState.STREAMING)

    feed.end()
    await asyncio.wait_for(task, timeout=1.0)

    assert controller.state is SessionState.CLOSED
    assert controller.error is None
    assert sink.close_calls == 1
    assert upstream.binary_frames == [b""]
    assert upstream.close_calls == 1


@pytest.mark.asyncio
async def test_audio_end_before_ready_stays_finishing() -> None:
    gate = asyncio.Event()
    upstream = FakeUpstream()
    controller, sink = _controller(FakeConnector(upstream, gate=gate))
    feed = AudioFeed()
    task = asyncio.create_task(controller.run(feed))

    feed.push(b"")
    feed.push(b"a")
    feed.end()
    await wait_until(lambda: controller.state is SessionState.FINISHING)

    gate.set()
    await wait_until(lambda: upstream.binary_frames == [b"a", b""])
    assert controller.state is SessionState.FINISHING

    upstream.push(event(token("ok", 0), marker=50))
    upstream.push(event(finished=True))
    await asyncio.wait_for(task, timeout=1.0)

    assert sink.writes == ["ok"]
    assert controller.state is SessionState.CLOSED


@pytest.mark.asyncio
async def test_broken_response_fails_the_session() -> None:
    upstream = FakeUpstream()
    controller, sink = _controller(FakeConnector(upstream), sink=RecordingSink(broken=True))
    task = asyncio.create_task(controller.run(AudioFeed()))
    await wait_until(lambda: controller.state is SessionState.STREAMING)

    upstream.push(event(token("hello", 0), marker=100))
    await asyncio.wait_for(task, timeout=1.0)

    assert isinstance(controller.error, SinkWriteError)
    assert controller.emitted_count == 0
    assert sink.failure is None
    assert upstream.close_calls == 1


@pytest.mark.asyncio
async def test_cancelled_run_releases_both_sides() -> None:
    upstream = FakeUpstream()
    controller, sink = _controller(FakeConnector(upstream))
    task = asyncio.create_task(controller.run(AudioFeed()))
    await wait_until(lambda: controller.state is SessionState.STREAMING)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert controller.state is SessionState.CLOSED
    assert upstream.close_calls == 1
    assert sink.close_calls == 1


@pytest.mark.asyncio
async def test_local_failure_is_not_blamed_on_soniox() -> None:
    upstream = FakeUpstream()
    controller, sink = _controller(FakeConnector(upstream))
    task = asyncio.create_task(controller.run(AudioFeed()))
    await wait_until(lambda: controller.state is SessionState.STREAMING)

    def _broken_ingest(tokens, marker):
        raise ValueError("bad token order")

    controller._consolidator.ingest = _broken_ingest
    upstream.push(event(token("hi", 0), marker=10))
    await asyncio.wait_for(task, timeout=1.0)

    assert isinstance(controller.error, BridgeInternalError)
    assert sink.failure == (500, "Internal server error")


def test_failure_response_mapping() -> None:
    assert failure_response(UpstreamProtocolError(401, "bad key")) == (401, "bad key")
    assert failure_response(UpstreamProtocolError(None, "")) == (500, "Soniox WebSocket error")
    assert failure_response(UpstreamTransportError("reset")) == (500, "Soniox WebSocket error")
    assert failure_response(BridgeInternalError("KeyError")) == (500, "Internal server error")
    assert failure_response(InboundStreamError("upload broke")) == (500, "upload broke")
