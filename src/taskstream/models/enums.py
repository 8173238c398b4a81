"""TaskStream enumerations."""

from enum import Enum


class Outcome(str, Enum):
    """Terminal outcome of a progress task."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"


class StreamState(str, Enum):
    """Lifecycle of one streaming request."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"

    def can_transition_to(self, new_state: "StreamState") -> bool:
        """Check if transition to new state is valid per state machine."""
        valid_transitions: dict[StreamState, set[StreamState]] = {
            StreamState.IDLE: {StreamState.RUNNING},
            StreamState.RUNNING: {StreamState.RUNNING, StreamState.COMPLETED},
            StreamState.COMPLETED: set(),
        }
        return new_state in valid_transitions[self]


class SSEFraming(str, Enum):
    """Wire layout of one server-sent event."""

    # event: <name>\n\n data: <payload>\n\n  (what existing clients receive)
    LITERAL = "literal"
    # event: <name>\n data: <payload>\n\n
    CANONICAL = "canonical"
