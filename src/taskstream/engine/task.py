"""Progress task - a unit of background work with an observable counter."""

import logging
import threading
from typing import Callable
from uuid import UUID, uuid4

from taskstream.models.outcome import TaskOutcome

logger = logging.getLogger("taskstream.task")

ProgressCallback = Callable[[int], None]


class ProgressTask:
    """
    Simulated long-running work that counts from 0 up to ``total``.

    Step ``k`` publishes ``current = k`` and then pauses for ``step_seconds``;
    after ``total - 1`` steps the counter is set to ``total`` and the task
    succeeds. With ``total`` of 0 or 1 there are no steps and no pause.

    Only the worker thread running ``run()`` publishes values. Readers go
    through the same lock, and watchers get every value published after they
    subscribe. ``cancel()`` may be called from any thread; the worker checks
    it between steps and wakes up early from its pause.
    """

    def __init__(self, total: int, step_seconds: float = 1.0):
        if total < 0:
            raise ValueError(f"total must be >= 0, got {total}")
        if step_seconds < 0:
            raise ValueError(f"step_seconds must be >= 0, got {step_seconds}")

        self.task_id: UUID = uuid4()
        self.total = total
        self.step_seconds = step_seconds

        self._current = 0
        self._lock = threading.Lock()
        self._watchers: list[ProgressCallback] = []
        self._cancel_requested = threading.Event()

    def __repr__(self) -> str:
        return f"ProgressTask(task_id={self.task_id}, current={self.current}, total={self.total})"

    @property
    def current(self) -> int:
        with self._lock:
            return self._current

    def watch(self, callback: ProgressCallback) -> int:
        """Subscribe to counter updates; returns the value at subscription time."""
        with self._lock:
            self._watchers.append(callback)
            return self._current

    def unwatch(self, callback: ProgressCallback) -> None:
        with self._lock:
            try:
                self._watchers.remove(callback)
            except ValueError:
                pass

    def cancel(self) -> None:
        """Ask the worker to stop at the next step boundary."""
        self._cancel_requested.set()

    def _publish(self, value: int) -> None:
        with self._lock:
            if value < self._current:
                raise ValueError(
                    f"progress may not decrease (current={self._current}, new={value})"
                )
            self._current = value
            watchers = list(self._watchers)

        for callback in watchers:
            callback(value)

    def run(self) -> TaskOutcome:
        """Execute the work on the calling (worker) thread."""
        logger.debug(f"Task {self.task_id} started (total={self.total})")

        for step in range(1, self.total):
            if self._cancel_requested.is_set():
                break
            self._publish(step)
            # Event.wait doubles as an interruptible sleep
            if self._cancel_requested.wait(self.step_seconds):
                break
        else:
            if not self._cancel_requested.is_set():
                self._publish(self.total)
                return TaskOutcome.succeeded()

        current = self.current
        logger.info(f"Task {self.task_id} canceled at {current}/{self.total}")
        return TaskOutcome.canceled(f"canceled at {current}/{self.total}")
