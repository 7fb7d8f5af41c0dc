"""Configuration module exports (env names, defaults and fixed constants only)."""

from .http import STREAM_ENDPOINT_PATH
from .upstream import AUDIO_FORMAT, AUDIO_NUM_CHANNELS, AUDIO_SAMPLE_RATE_HZ

__all__ = [
    "AUDIO_FORMAT",
    "AUDIO_NUM_CHANNELS",
    "AUDIO_SAMPLE_RATE_HZ",
    "STREAM_ENDPOINT_PATH",
]
