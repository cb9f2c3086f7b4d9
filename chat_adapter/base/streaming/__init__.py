"""Streaming package: SSE decoder, event primitives, and stream controller."""

from .decoder import StreamFrameDecoder, StreamState, decode_chunk, extract_delta, flush
from .streaming import ChatStreamEvent, accumulate_events
from .stream_controller import StreamController

__all__ = [
    "StreamState",
    "StreamFrameDecoder",
    "decode_chunk",
    "extract_delta",
    "flush",
    "ChatStreamEvent",
    "accumulate_events",
    "StreamController",
]
