"""HTTP routes: the task event stream plus health/config."""

import logging

import anyio
from fastapi import APIRouter, Depends
from sse_starlette.sse import EventSourceResponse

from taskstream import __version__
from taskstream.api.deps import get_executor
from taskstream.api.handler import RequestHandler
from taskstream.api.schemas import ConfigResponse, HealthResponse
from taskstream.config import settings
from taskstream.engine import ExecutorShutdown, StreamClosedError, TaskExecutor
from taskstream.observability import get_trace_id, metrics
from taskstream.sse import EVENT_STREAM_MEDIA_TYPE, EventWriter
from taskstream.tasks import get_task_executor

logger = logging.getLogger("taskstream.api")

router = APIRouter()


# ============================================================================
# Task stream
# ============================================================================


@router.get("/sse/task")
async def stream_task(executor: TaskExecutor = Depends(get_executor)):
    """
    Start a task and stream its progress as server-sent events.

    The handler runs next to the response and hands frames over a
    zero-capacity channel, so each ``status`` event reaches the client
    as soon as it is produced. The response ends after the terminal event.
    """
    send_stream, receive_stream = anyio.create_memory_object_stream(max_buffer_size=0)
    handler = RequestHandler(
        executor=executor,
        writer=EventWriter(send_stream, framing=settings.sse_framing),
        total=settings.task_total,
        step_seconds=settings.task_step_seconds,
    )
    trace_id = get_trace_id()

    async def send_events() -> None:
        async with send_stream:
            try:
                await handler.handle()
            except StreamClosedError as e:
                logger.warning(f"{e.message} (trace={trace_id}); task continues in background")
            except anyio.get_cancelled_exc_class():
                metrics.inc_counter("stream.aborted")
                logger.info(f"Client went away mid-stream (trace={trace_id}); task continues in background")
                raise

    return EventSourceResponse(
        receive_stream,
        data_sender_callable=send_events,
        ping=settings.sse_ping_seconds,
        media_type=EVENT_STREAM_MEDIA_TYPE,
        headers={"Cache-Control": "no-cache"},
    )


# ============================================================================
# Health & Config
# ============================================================================


@router.get("/v1/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    try:
        active = get_task_executor().active_count
        status = "healthy"
    except ExecutorShutdown:
        active = 0
        status = "degraded"
    return HealthResponse(status=status, version=__version__, active_tasks=active)


@router.get("/v1/config", response_model=ConfigResponse)
async def get_config():
    """Get server configuration."""
    return ConfigResponse(
        task_total=settings.task_total,
        task_step_seconds=settings.task_step_seconds,
        executor_max_workers=settings.executor_max_workers,
        sse_framing=settings.sse_framing.value,
        sse_ping_seconds=settings.sse_ping_seconds,
        metrics=metrics.snapshot(),
    )
