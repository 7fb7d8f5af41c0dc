"""Decoding of inbound Soniox realtime messages."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass

import orjson

from src.errors import MalformedEventError

from .tokens import RecognitionToken


@dataclass(frozen=True, slots=True)
class UpstreamEvent:
    tokens: tuple[RecognitionToken, ...] = ()
    final_audio_proc_ms: int | None = None
    total_audio_proc_ms: int | None = None
    error_code: int | None = None
    error_message: str | None = None
    finished: bool = False

    @property
    def is_error(self) -> bool:
        return self.error_code is not None or self.error_message is not None


def _optional_int(value: Any) -> int | None:
    # bool is an int subclass; a flag is never a timestamp.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def _optional_float(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _parse_token(raw: Any) -> RecognitionToken:
    if not isinstance(raw, dict):
        raise MalformedEventError("token must be a JSON object")
    text = raw.get("text")
    if not isinstance(text, str):
        raise MalformedEventError("token missing string 'text'")
    language = raw.get("language")
    return RecognitionToken(
        text=text,
        start_ms=_optional_int(raw.get("start_ms")),
        is_final=raw.get("is_final") is True,
        end_ms=_optional_int(raw.get("end_ms")),
        confidence=_optional_float(raw.get("confidence")),
        language=language if isinstance(language, str) else None,
    )


def parse_upstream_event(raw: str | bytes) -> UpstreamEvent:
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise MalformedEventError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise MalformedEventError("message must be a JSON object")

    raw_tokens = msg.get("tokens")
    if raw_tokens is None:
        raw_tokens = []
    if not isinstance(raw_tokens, list):
        raise MalformedEventError("message 'tokens' must be a list")

    error_code = msg.get("error_code")
    error_message = msg.get("error_message")
    if error_code is not None and _optional_int(error_code) is None:
        # Keep the error visible even if the code itself is unusable.
        error_message = error_message or str(error_code)
        error_code = None

    return UpstreamEvent(
        tokens=tuple(_parse_token(t) for t in raw_tokens),
        final_audio_proc_ms=_optional_int(msg.get("final_audio_proc_ms")),
        total_audio_proc_ms=_optional_int(msg.get("total_audio_proc_ms")),
        error_code=_optional_int(error_code),
        error_message=str(error_message) if error_message is not None else None,
        finished=msg.get("finished") is True,
    )


__all__ = ["UpstreamEvent", "parse_upstream_event"]
