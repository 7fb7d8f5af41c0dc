"""HTTP surface configuration and constants."""

from __future__ import annotations

ENV_HOST = "HOST"
ENV_PORT = "PORT"

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 6018

STREAM_ENDPOINT_PATH = "/speech-to-text-stream"

STREAM_MEDIA_TYPE = "text/event-stream"
STREAM_HEADERS = {
    "cache-control": "no-cache",
    "connection": "keep-alive",
}

# Error JSON body key ({"message": ...}).
HTTP_KEY_MESSAGE = "message"

HTTP_STATUS_INTERNAL_ERROR = 500
HTTP_STATUS_UNAVAILABLE = 503

HTTP_MESSAGE_UPSTREAM_TRANSPORT = "Soniox WebSocket error"
HTTP_MESSAGE_INTERNAL_ERROR = "Internal server error"
HTTP_MESSAGE_AT_CAPACITY = "Server cannot accept new sessions. Please try again later."

__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "ENV_HOST",
    "ENV_PORT",
    "HTTP_KEY_MESSAGE",
    "HTTP_MESSAGE_AT_CAPACITY",
    "HTTP_MESSAGE_INTERNAL_ERROR",
    "HTTP_MESSAGE_UPSTREAM_TRANSPORT",
    "HTTP_STATUS_INTERNAL_ERROR",
    "HTTP_STATUS_UNAVAILABLE",
    "STREAM_ENDPOINT_PATH",
    "STREAM_HEADERS",
    "STREAM_MEDIA_TYPE",
]
