"""Finalized-token store that rebuilds a stable transcript from Soniox batches."""

from __future__ import annotations

import itertools
from collections.abc import Iterable

from .tokens import RecognitionToken

# (start_ms, 0) for timed tokens; (anchor_ms, seq) with seq >= 1 for untimed ones.
TokenKey = tuple[int, int]


class TokenConsolidator:
    """Keep the latest finalized token per time offset and emit changed transcripts.

    A batch is only consolidated when its progress marker moves past the last
    one processed, so replayed batches never produce a second emission.
    Corrections arrive as finalized tokens at an already-stored offset and
    replace the earlier token in place.
    """

    def __init__(self, *, separator: str = "") -> None:
        self._separator = separator
        self._tokens: dict[TokenKey, RecognitionToken] = {}
        self._last_marker: int | None = None
        self._last_emitted: str = ""
        self._latest_start_ms: int = 0
        self._seq = itertools.count(1)

    @property
    def transcript(self) -> str:
        return self._last_emitted

    @property
    def last_marker(self) -> int | None:
        return self._last_marker

    def __len__(self) -> int:
        return len(self._tokens)

    def _key_for(self, token: RecognitionToken) -> TokenKey:
        if token.start_ms is None:
            return (self._latest_start_ms, next(self._seq))
        self._latest_start_ms = max(self._latest_start_ms, token.start_ms)
        return (token.start_ms, 0)

    def _rebuild(self) -> str:
        parts = (self._tokens[key].text for key in sorted(self._tokens))
        if not self._separator:
            return "".join(parts)
        return self._separator.join(p for p in parts if p).strip()

    def ingest(self, tokens: Iterable[RecognitionToken], progress_marker: int | None) -> str | None:
        if progress_marker is None:
            return None
        if self._last_marker is not None and progress_marker <= self._last_marker:
            return None
        self._last_marker = progress_marker

        for token in tokens:
            if token.is_final:
                self._tokens[self._key_for(token)] = token

        transcript = self._rebuild()
        if not transcript or transcript == self._last_emitted:
            return None
        self._last_emitted = transcript
        return transcript


__all__ = ["TokenConsolidator", "TokenKey"]
