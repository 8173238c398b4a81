"""TaskStream domain models."""

from taskstream.models.enums import Outcome, SSEFraming, StreamState
from taskstream.models.outcome import TaskOutcome
from taskstream.models.progress import Completion, Notification, ProgressUpdate

__all__ = [
    "Completion",
    "Notification",
    "Outcome",
    "ProgressUpdate",
    "SSEFraming",
    "StreamState",
    "TaskOutcome",
]
