"""Recognition tokens as delivered by Soniox."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RecognitionToken:
    text: str
    start_ms: int | None = None
    is_final: bool = False
    end_ms: int | None = None
    confidence: float | None = None
    language: str | None = None


__all__ = ["RecognitionToken"]
