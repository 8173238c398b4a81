"""API dependencies."""

import logging

from fastapi import HTTPException

from taskstream.engine import ExecutorShutdown, TaskExecutor
from taskstream.tasks import get_task_executor

logger = logging.getLogger("taskstream.api")


async def get_executor() -> TaskExecutor:
    """Resolve the shared task executor; 503 while it is not running."""
    try:
        return get_task_executor()
    except ExecutorShutdown as e:
        logger.warning(f"Rejecting stream request: {e.message}")
        raise HTTPException(status_code=503, detail=e.message)
