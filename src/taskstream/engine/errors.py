"""TaskStream engine errors."""


class TaskStreamError(Exception):
    """Base error for TaskStream operations."""

    def __init__(self, message: str, code: str = "TASKSTREAM_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class TaskNotFinished(TaskStreamError):
    """Outcome requested before the task completed."""

    def __init__(self, task_id: str):
        super().__init__(f"Task has not finished: {task_id}", "TASK_NOT_FINISHED")
        self.task_id = task_id


class TaskAlreadySubmitted(TaskStreamError):
    """A task instance may only run once."""

    def __init__(self, task_id: str):
        super().__init__(f"Task already submitted: {task_id}", "TASK_ALREADY_SUBMITTED")
        self.task_id = task_id


class ExecutorShutdown(TaskStreamError):
    """Executor is not accepting work."""

    def __init__(self, message: str = "Task executor is shut down"):
        super().__init__(message, "EXECUTOR_SHUTDOWN")


class InvalidStateTransition(TaskStreamError):
    """Invalid stream state transition."""

    def __init__(self, current_state: str, requested_state: str):
        super().__init__(
            f"Invalid transition from {current_state} to {requested_state}",
            "INVALID_STATE_TRANSITION",
        )
        self.current_state = current_state
        self.requested_state = requested_state


class StreamClosedError(TaskStreamError):
    """The response stream went away while writing a frame."""

    def __init__(self, event: str):
        super().__init__(
            f"Response stream closed while writing '{event}' event",
            "STREAM_CLOSED",
        )
        self.event = event
