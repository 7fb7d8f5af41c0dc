"""Soniox realtime WebSocket configuration (env names and defaults only)."""

from __future__ import annotations

ENV_SONIOX_WEBSOCKET_URL = "SONIOX_WEBSOCKET_URL"
ENV_SONIOX_MODEL = "SONIOX_SPEECH_RECOGNITION_MODEL"
ENV_SONIOX_LANGUAGE = "SONIOX_SPEECH_RECOGNITION_LANGUAGE"
ENV_SONIOX_ENABLE_ENDPOINT_DETECTION = "SONIOX_ENABLE_ENDPOINT_DETECTION"
ENV_SONIOX_CONNECT_TIMEOUT_S = "SONIOX_CONNECT_TIMEOUT_S"
ENV_SONIOX_FINISH_TIMEOUT_S = "SONIOX_FINISH_TIMEOUT_S"
ENV_TRANSCRIPT_TOKEN_SEPARATOR = "TRANSCRIPT_TOKEN_SEPARATOR"

DEFAULT_SONIOX_WEBSOCKET_URL = "wss://stt-rt.soniox.com/transcribe-websocket"
DEFAULT_SONIOX_MODEL = "stt-rt-v3"
DEFAULT_SONIOX_LANGUAGE = "en"
DEFAULT_SONIOX_ENABLE_ENDPOINT_DETECTION = True
DEFAULT_SONIOX_CONNECT_TIMEOUT_S = 10.0
# 0 waits for Soniox forever once the client has stopped sending audio.
DEFAULT_SONIOX_FINISH_TIMEOUT_S = 30.0
# Soniox tokens are sub-word pieces that carry their own leading spaces.
DEFAULT_TRANSCRIPT_TOKEN_SEPARATOR = ""

# Inbound audio is fixed: PCM signed 16-bit little-endian, mono, 8 kHz.
AUDIO_FORMAT = "pcm_s16le"
AUDIO_SAMPLE_RATE_HZ = 8000
AUDIO_NUM_CHANNELS = 1

# Zero-length binary frame that tells Soniox no more audio will follow.
TERMINAL_FRAME = b""

__all__ = [
    "AUDIO_FORMAT",
    "AUDIO_NUM_CHANNELS",
    "AUDIO_SAMPLE_RATE_HZ",
    "DEFAULT_SONIOX_CONNECT_TIMEOUT_S",
    "DEFAULT_SONIOX_ENABLE_ENDPOINT_DETECTION",
    "DEFAULT_SONIOX_FINISH_TIMEOUT_S",
    "DEFAULT_SONIOX_LANGUAGE",
    "DEFAULT_SONIOX_MODEL",
    "DEFAULT_SONIOX_WEBSOCKET_URL",
    "DEFAULT_TRANSCRIPT_TOKEN_SEPARATOR",
    "ENV_SONIOX_CONNECT_TIMEOUT_S",
    "ENV_SONIOX_ENABLE_ENDPOINT_DETECTION",
    "ENV_SONIOX_FINISH_TIMEOUT_S",
    "ENV_SONIOX_LANGUAGE",
    "ENV_SONIOX_MODEL",
    "ENV_SONIOX_WEBSOCKET_URL",
    "ENV_TRANSCRIPT_TOKEN_SEPARATOR",
    "TERMINAL_FRAME",
]
