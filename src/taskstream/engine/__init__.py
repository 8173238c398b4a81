"""TaskStream engine - progress tasks, worker pool and observation."""

from taskstream.engine.errors import (
    ExecutorShutdown,
    InvalidStateTransition,
    StreamClosedError,
    TaskAlreadySubmitted,
    TaskNotFinished,
    TaskStreamError,
)
from taskstream.engine.executor import TaskExecutor, TaskHandle
from taskstream.engine.observer import ProgressObserver
from taskstream.engine.task import ProgressTask

__all__ = [
    "ExecutorShutdown",
    "InvalidStateTransition",
    "ProgressObserver",
    "ProgressTask",
    "StreamClosedError",
    "TaskAlreadySubmitted",
    "TaskExecutor",
    "TaskHandle",
    "TaskNotFinished",
    "TaskStreamError",
]
