from .bridge import RealtimeBridge
from .tokens import RecognitionToken
from .adapter import UpstreamSessionAdapter
from .controller import TranscriptSink, BridgeController
from .consolidator import TokenConsolidator
from .events import UpstreamEvent, parse_upstream_event

__all__ = [
    "BridgeController",
    "RealtimeBridge",
    "RecognitionToken",
    "TokenConsolidator",
    "TranscriptSink",
    "UpstreamEvent",
    "UpstreamSessionAdapter",
    "parse_upstream_event",
]
