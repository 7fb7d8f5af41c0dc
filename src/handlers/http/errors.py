"""Error helpers for the HTTP transcript stream."""

from __future__ import annotations

from typing import Any

import orjson
from fastapi.responses import ORJSONResponse

from src.config.http import HTTP_KEY_MESSAGE


def build_error_payload(message: str) -> dict[str, Any]:
    return {HTTP_KEY_MESSAGE: message}


def encode_error_body(message: str) -> bytes:
    return orjson.dumps(build_error_payload(message))


def error_response(status_code: int, message: str) -> ORJSONResponse:
    return ORJSONResponse(status_code=status_code, content=build_error_payload(message))


__all__ = ["build_error_payload", "encode_error_body", "error_response"]
