"""Request handler - runs one task and streams its progress."""

import logging
from contextlib import aclosing
from typing import Optional, Union

from taskstream.api.schemas import CompletePayload, IncompletePayload, ProgressPayload
from taskstream.engine import (
    InvalidStateTransition,
    ProgressObserver,
    ProgressTask,
    TaskExecutor,
    TaskStreamError,
)
from taskstream.models import Completion, ProgressUpdate, StreamState, TaskOutcome
from taskstream.sse import EventWriter

logger = logging.getLogger("taskstream.api")

STATUS_EVENT = "status"


def terminal_payload(outcome: TaskOutcome) -> Union[CompletePayload, IncompletePayload]:
    """Pick the final status payload for an outcome."""
    if outcome.is_success:
        return CompletePayload()
    return IncompletePayload(outcome=outcome.outcome, reason=outcome.reason)


class RequestHandler:
    """
    Drives one streaming request through idle -> running -> completed.

    Every progress notification becomes a ``status`` event carrying
    ``{"current": n, "total": t}``; the completion becomes one final
    ``status`` event chosen by outcome. Stream errors propagate and abort
    the request; the task itself keeps running on its worker.
    """

    def __init__(
        self,
        executor: TaskExecutor,
        writer: EventWriter,
        total: int,
        step_seconds: float = 1.0,
    ):
        self.executor = executor
        self.writer = writer
        self.total = total
        self.step_seconds = step_seconds
        self.state = StreamState.IDLE

    def _transition(self, new_state: StreamState) -> None:
        if not self.state.can_transition_to(new_state):
            raise InvalidStateTransition(self.state.value, new_state.value)
        self.state = new_state

    async def handle(self) -> TaskOutcome:
        if self.state != StreamState.IDLE:
            raise TaskStreamError("Request handler already used", "HANDLER_REUSED")

        task = ProgressTask(total=self.total, step_seconds=self.step_seconds)
        observer = ProgressObserver(task)
        try:
            handle = self.executor.submit(task)
        except TaskStreamError:
            observer.close()
            raise
        self._transition(StreamState.RUNNING)

        outcome: Optional[TaskOutcome] = None
        async with aclosing(observer.notifications(handle)) as notifications:
            async for notification in notifications:
                if isinstance(notification, ProgressUpdate):
                    self._transition(StreamState.RUNNING)
                    await self.writer.emit_json(
                        STATUS_EVENT,
                        ProgressPayload(current=notification.current, total=notification.total),
                    )
                elif isinstance(notification, Completion):
                    self._transition(StreamState.COMPLETED)
                    outcome = notification.outcome
                    await self.writer.emit_json(STATUS_EVENT, terminal_payload(outcome))

        if outcome is None:
            raise TaskStreamError(f"Observer ended without completion for task {task.task_id}")

        logger.info(
            f"Streamed task {task.task_id}: {outcome.outcome.value} "
            f"after {self.writer.frames_written} event(s)"
        )
        return outcome
