from __future__ import annotations

import pytest

from src.errors import MalformedEventError
from src.realtime.events import parse_upstream_event


def test_parse_token_batch() -> None:
    raw = (
        '{"tokens": [{"text": "hel", "start_ms": 0, "end_ms": 120, "is_final": true, "confidence": 0.9,'
        ' "language": "en"}, {"text": "lo", "start_ms": 120, "is_final": false}],'
        ' "final_audio_proc_ms": 120, "total_audio_proc_ms": 480}'
    )
    ev = parse_upstream_event(raw)
    assert [t.text for t in ev.tokens] == ["hel", "lo"]
    assert ev.tokens[0].is_final is True
    assert ev.tokens[0].end_ms == 120
    assert ev.tokens[0].confidence == pytest.approx(0.9)
    assert ev.tokens[0].language == "en"
    assert ev.tokens[1].is_final is False
    assert ev.final_audio_proc_ms == 120
    assert ev.total_audio_proc_ms == 480
    assert ev.is_error is False
    assert ev.finished is False


def test_parse_finished_without_tokens() -> None:
    ev = parse_upstream_event(b'{"tokens": [], "finished": true}')
    assert ev.finished is True
    assert ev.tokens == ()
    assert ev.final_audio_proc_ms is None


def test_parse_error_event() -> None:
    ev = parse_upstream_event('{"error_code": 503, "error_message": "overloaded"}')
    assert ev.is_error is True
    assert ev.error_code == 503
    assert ev.error_message == "overloaded"


def test_non_numeric_error_code_keeps_error_visible() -> None:
    ev = parse_upstream_event('{"error_code": "bad_request"}')
    assert ev.is_error is True
    assert ev.error_code is None
    assert ev.error_message == "bad_request"


def test_non_numeric_start_ms_is_treated_as_missing() -> None:
    ev = parse_upstream_event('{"tokens": [{"text": "x", "start_ms": "soon", "is_final": true}]}')
    assert ev.tokens[0].start_ms is None


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[]",
        '{"tokens": {}}',
        '{"tokens": ["x"]}',
        '{"tokens": [{"start_ms": 0, "is_final": true}]}',
    ],
)
def test_parse_malformed(raw: str) -> None:
    with pytest.raises(MalformedEventError):
        parse_upstream_event(raw)
