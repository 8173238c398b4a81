"""Task executor - a bounded worker pool with an explicit lifecycle."""

import contextvars
import logging
import threading
import time
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Callable, Optional
from uuid import UUID

from taskstream.engine.errors import ExecutorShutdown, TaskAlreadySubmitted, TaskNotFinished
from taskstream.engine.task import ProgressTask
from taskstream.models.enums import Outcome
from taskstream.models.outcome import TaskOutcome
from taskstream.observability.metrics import metrics
from taskstream.observability.trace import get_trace_id
from taskstream.utils.time import elapsed_ms

logger = logging.getLogger("taskstream.executor")


class TaskHandle:
    """Reference to a submitted task: completion query and outcome retrieval."""

    def __init__(self, task: ProgressTask, future: "Future[TaskOutcome]"):
        self.task = task
        self._future = future
        self._outcome: Optional[TaskOutcome] = None
        self._lock = threading.Lock()

    @property
    def task_id(self) -> UUID:
        return self.task.task_id

    def done(self) -> bool:
        return self._future.done()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the task finishes; returns False on timeout."""
        if self._future.done():
            return True
        # Future.exception wakes on cancel(), unlike concurrent.futures.wait
        try:
            self._future.exception(timeout)
        except FutureTimeoutError:
            return False
        except CancelledError:
            pass
        return True

    def outcome(self) -> TaskOutcome:
        """Return the terminal outcome; raises TaskNotFinished while running."""
        if not self._future.done():
            raise TaskNotFinished(str(self.task_id))

        with self._lock:
            if self._outcome is None:
                self._outcome = self._resolve()
            return self._outcome

    def _resolve(self) -> TaskOutcome:
        if self._future.cancelled():
            return TaskOutcome.canceled("canceled before start")
        exc = self._future.exception()
        if exc is not None:
            return TaskOutcome.failed_from(exc)
        return self._future.result()

    def add_done_callback(self, fn: Callable[["TaskHandle"], None]) -> None:
        """Call ``fn(handle)`` once the task finishes (immediately if it already has)."""
        self._future.add_done_callback(lambda _future: fn(self))


class TaskExecutor:
    """
    Runs ProgressTasks on a capped pool of worker threads.

    Created once at service start and shut down at service stop. Tasks past
    the cap wait in the pool's queue. The executor keeps track of tasks in
    flight so shutdown can ask them to stop.
    """

    def __init__(self, max_workers: int, thread_name_prefix: str = "taskstream-worker"):
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self.max_workers = max_workers
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix=thread_name_prefix,
        )
        self._active: dict[UUID, TaskHandle] = {}
        self._lock = threading.Lock()
        self._closed = False

    @property
    def is_running(self) -> bool:
        return not self._closed

    @property
    def active_count(self) -> int:
        with self._lock:
            return len(self._active)

    def submit(self, task: ProgressTask) -> TaskHandle:
        """Schedule a task and return its handle."""
        with self._lock:
            if self._closed:
                raise ExecutorShutdown()
            if task.task_id in self._active:
                raise TaskAlreadySubmitted(str(task.task_id))

            # Carry the submitter's trace id into the worker's log records
            ctx = contextvars.copy_context()
            future = self._pool.submit(ctx.run, self._run, task)
            handle = TaskHandle(task, future)
            self._active[task.task_id] = handle

        metrics.inc_counter("tasks.submitted")
        metrics.add_gauge("tasks.active", 1)
        logger.info(f"Submitted task {task.task_id} (total={task.total}, trace={get_trace_id()})")

        handle.add_done_callback(self._on_finished)
        return handle

    def _run(self, task: ProgressTask) -> TaskOutcome:
        started = time.perf_counter()
        try:
            return task.run()
        except Exception:
            logger.error(f"Task {task.task_id} failed (trace={get_trace_id()})", exc_info=True)
            raise
        finally:
            metrics.observe("task.duration_ms", elapsed_ms(started))

    def _on_finished(self, handle: TaskHandle) -> None:
        with self._lock:
            self._active.pop(handle.task_id, None)

        outcome = handle.outcome()
        metrics.add_gauge("tasks.active", -1)
        metrics.inc_counter(f"tasks.{outcome.outcome.value}")

        if outcome.outcome == Outcome.SUCCEEDED:
            logger.info(f"Task {handle.task_id} succeeded")
        else:
            logger.warning(f"Task {handle.task_id} {outcome.outcome.value}: {outcome.reason}")

    def shutdown(self, cancel_running: bool = True, timeout: Optional[float] = None) -> bool:
        """
        Stop accepting work and drain the pool.

        Queued tasks that never started are canceled. Running tasks are asked
        to stop when ``cancel_running`` is set, otherwise they run to the end.
        Returns False if workers were still busy when ``timeout`` expired.
        """
        with self._lock:
            if self._closed:
                return True
            self._closed = True
            handles = list(self._active.values())

        logger.info(f"Shutting down task executor ({len(handles)} task(s) in flight)")
        if cancel_running:
            for handle in handles:
                handle.task.cancel()

        self._pool.shutdown(wait=False, cancel_futures=True)

        deadline = None if timeout is None else time.monotonic() + timeout
        drained = True
        for handle in handles:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            if not handle.wait(remaining):
                drained = False
                break
        if not drained:
            logger.warning("Task executor did not drain before timeout")
            return False

        # Workers are idle; joining them also waits out their done callbacks
        self._pool.shutdown(wait=True)
        return True
