"""TaskStream background execution lifecycle."""

from taskstream.tasks.pool import get_task_executor, start_task_executor, stop_task_executor

__all__ = ["get_task_executor", "start_task_executor", "stop_task_executor"]
