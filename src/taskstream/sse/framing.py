"""Server-sent event framing: encoding frames and parsing them back."""

from dataclasses import dataclass

from taskstream.models.enums import SSEFraming

DEFAULT_EVENT = "message"


@dataclass(frozen=True)
class SSEFrame:
    """One named event and its message body."""

    event: str
    data: str


def _data_lines(payload: str) -> str:
    lines = payload.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    return "".join(f"data: {line}\n" for line in lines)


def encode_frame(event: str, payload: str, framing: SSEFraming = SSEFraming.LITERAL) -> str:
    """
    Render one event.

    ``literal`` terminates the ``event:`` and ``data:`` fields with their own
    blank line, which is what deployed clients are used to. ``canonical``
    groups both fields under a single trailing blank line. Multi-line
    payloads become several ``data:`` lines in either layout.
    """
    if "\n" in event or "\r" in event:
        raise ValueError("event name must not contain line breaks")

    if framing == SSEFraming.LITERAL:
        return f"event: {event}\n\n{_data_lines(payload)}\n"
    return f"event: {event}\n{_data_lines(payload)}\n"


class FrameParser:
    """
    Incremental parser for event streams in either framing.

    A block holding only an ``event:`` field names the next block that
    carries data. Comment lines (``:`` prefix, used for keep-alive pings)
    and blocks without data are otherwise ignored.
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._carry = ""
        self._pending_event: str | None = None

    def feed(self, chunk: str) -> list[SSEFrame]:
        """Consume text and return the frames completed by it."""
        text = self._carry + chunk
        # A trailing CR may be the first half of a CRLF split across chunks
        if text.endswith("\r"):
            text, self._carry = text[:-1], "\r"
        else:
            self._carry = ""
        self._buffer += text.replace("\r\n", "\n").replace("\r", "\n")

        frames: list[SSEFrame] = []
        while "\n\n" in self._buffer:
            block, self._buffer = self._buffer.split("\n\n", 1)
            frame = self._parse_block(block)
            if frame is not None:
                frames.append(frame)
        return frames

    def _parse_block(self, block: str) -> SSEFrame | None:
        event: str | None = None
        data: list[str] = []

        for line in block.split("\n"):
            if not line or line.startswith(":"):
                continue
            name, _, value = line.partition(":")
            if value.startswith(" "):
                value = value[1:]
            if name == "event":
                event = value
            elif name == "data":
                data.append(value)

        if not data:
            if event is not None:
                self._pending_event = event
            return None

        name = event or self._pending_event or DEFAULT_EVENT
        self._pending_event = None
        return SSEFrame(event=name, data="\n".join(data))


def parse_frames(text: str) -> list[SSEFrame]:
    """Parse a complete event-stream body."""
    return FrameParser().feed(text)
