"""Event writer - pushes SSE frames onto a response stream."""

import json
import logging
from typing import Any, Protocol, Union

import anyio
from pydantic import BaseModel

from taskstream.engine.errors import StreamClosedError
from taskstream.models.enums import SSEFraming
from taskstream.observability.metrics import metrics
from taskstream.sse.framing import encode_frame

logger = logging.getLogger("taskstream.stream")


class EventStream(Protocol):
    """Anything frames can be sent to, e.g. an anyio memory object send stream."""

    async def send(self, item: bytes) -> None: ...


class EventWriter:
    """
    Writes one SSE frame per ``emit`` call.

    Each frame goes out as a single chunk; the response sends every chunk
    as its own body message, so nothing sits in a buffer between frames.
    Over a zero-capacity channel ``emit`` returns only after the response
    side has taken the frame.
    """

    def __init__(
        self,
        stream: EventStream,
        framing: SSEFraming = SSEFraming.LITERAL,
        encoding: str = "utf-8",
    ):
        self._stream = stream
        self.framing = framing
        self.encoding = encoding
        self.frames_written = 0

    async def emit(self, event: str, payload: str) -> None:
        frame = encode_frame(event, payload, self.framing)
        try:
            await self._stream.send(frame.encode(self.encoding))
        except (anyio.BrokenResourceError, anyio.ClosedResourceError) as exc:
            metrics.inc_counter("stream.aborted")
            raise StreamClosedError(event) from exc

        self.frames_written += 1
        metrics.inc_counter("stream.frames")
        logger.debug(f"Sent {event} event: {payload}")

    async def emit_json(self, event: str, data: Union[BaseModel, dict[str, Any]]) -> None:
        """Serialize ``data`` as compact JSON and emit it."""
        if isinstance(data, BaseModel):
            data = data.model_dump(mode="json", exclude_none=True)
        await self.emit(event, json.dumps(data, separators=(",", ":")))
