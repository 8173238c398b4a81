"""Progress notifications produced while observing a task."""

from dataclasses import dataclass
from typing import Union

from taskstream.models.outcome import TaskOutcome


@dataclass(frozen=True)
class ProgressUpdate:
    """The task's counter moved to a new value below its total."""

    current: int
    total: int


@dataclass(frozen=True)
class Completion:
    """The task finished; always the last notification for a task."""

    outcome: TaskOutcome


Notification = Union[ProgressUpdate, Completion]
