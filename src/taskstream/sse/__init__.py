"""Server-sent event framing and writing."""

from taskstream.sse.framing import FrameParser, SSEFrame, encode_frame, parse_frames
from taskstream.sse.writer import EventStream, EventWriter

EVENT_STREAM_MEDIA_TYPE = "text/event-stream; charset=UTF-8"

__all__ = [
    "EVENT_STREAM_MEDIA_TYPE",
    "EventStream",
    "EventWriter",
    "FrameParser",
    "SSEFrame",
    "encode_frame",
    "parse_frames",
]
