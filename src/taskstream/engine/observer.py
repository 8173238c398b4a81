"""Progress observer - follows a running task from the event loop."""

import asyncio
import logging
from typing import AsyncIterator

from taskstream.engine.executor import TaskHandle
from taskstream.engine.task import ProgressTask
from taskstream.models.progress import Completion, Notification, ProgressUpdate

logger = logging.getLogger("taskstream.observer")

_FINISHED = object()


class ProgressObserver:
    """
    Follows a task's counter from the event loop.

    Create it (inside a coroutine) before submitting the task so that no
    published value is missed, then iterate ``notifications(handle)``: one
    ProgressUpdate per new counter value below the task's total, then exactly
    one Completion carrying the outcome.

    The worker pushes every published value (and, once the future settles,
    a finished marker) onto an asyncio.Queue through call_soon_threadsafe.
    Both pushes come from the worker thread in order, so the marker always
    lands after the last value. The consuming coroutine sleeps on the queue
    between updates.
    """

    def __init__(self, task: ProgressTask):
        self._task = task
        self._loop = asyncio.get_running_loop()
        self._queue: asyncio.Queue = asyncio.Queue()
        self._queue.put_nowait(task.watch(self._push))

    def _push(self, item: object) -> None:
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, item)
        except RuntimeError:
            # Loop already closed; the request is gone.
            pass

    def close(self) -> None:
        """Stop receiving counter updates."""
        self._task.unwatch(self._push)

    async def notifications(self, handle: TaskHandle) -> AsyncIterator[Notification]:
        if handle.task is not self._task:
            raise ValueError("handle does not belong to the observed task")

        total = self._task.total
        handle.add_done_callback(lambda _handle: self._push(_FINISHED))

        last = 0
        try:
            while True:
                item = await self._queue.get()
                if item is _FINISHED:
                    outcome = handle.outcome()
                    logger.debug(
                        f"Task {self._task.task_id} finished: {outcome.outcome.value}"
                    )
                    yield Completion(outcome)
                    return

                if last < item < total:
                    last = item
                    yield ProgressUpdate(current=item, total=total)
        finally:
            self.close()
