"""Client script utilities.

- audio/: paced PCM upload for manual streaming runs
"""

from __future__ import annotations

from .audio.streamer import AudioStreamer

__all__ = ["AudioStreamer"]
