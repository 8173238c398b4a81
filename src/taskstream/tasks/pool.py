"""Process-wide task executor, owned by the application lifespan."""

import asyncio
import logging
from typing import Optional

from taskstream.config import settings
from taskstream.engine import ExecutorShutdown, TaskExecutor
from taskstream.observability import metrics

logger = logging.getLogger("taskstream.executor")

_executor: Optional[TaskExecutor] = None


async def start_task_executor(max_workers: Optional[int] = None) -> TaskExecutor:
    """Create the shared executor."""
    global _executor

    if _executor is not None and _executor.is_running:
        return _executor

    workers = max_workers or settings.executor_max_workers
    _executor = TaskExecutor(max_workers=workers)
    metrics.set_gauge("executor.max_workers", workers)
    logger.info(f"Task executor started ({workers} workers max)")
    return _executor


async def stop_task_executor() -> None:
    """Drain and discard the shared executor."""
    global _executor

    if _executor is None:
        return

    executor, _executor = _executor, None
    drained = await asyncio.to_thread(
        executor.shutdown,
        cancel_running=settings.cancel_tasks_on_shutdown,
        timeout=settings.executor_shutdown_timeout_seconds,
    )
    if drained:
        logger.info("Task executor stopped")
    else:
        logger.warning("Task executor stopped with tasks still running")


def get_task_executor() -> TaskExecutor:
    """Return the running executor or raise ExecutorShutdown."""
    if _executor is None or not _executor.is_running:
        raise ExecutorShutdown("Task executor is not running")
    return _executor
