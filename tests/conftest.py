"""
Pytest fixtures for TaskStream tests.
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# Ensure test config is set before importing taskstream modules.
os.environ.setdefault("TASKSTREAM_ENV", "development")
os.environ.setdefault("TASKSTREAM_TASK_STEP_SECONDS", "0")
os.environ.setdefault("TASKSTREAM_EXECUTOR_MAX_WORKERS", "4")
os.environ.setdefault("TASKSTREAM_EXECUTOR_SHUTDOWN_TIMEOUT_SECONDS", "5")

from taskstream.engine import TaskExecutor
from taskstream.observability import metrics

pytest_plugins = ("pytest_asyncio",)


class RecordingStream:
    """In-memory stand-in for the response channel."""

    def __init__(self) -> None:
        self.chunks: list[bytes] = []

    async def send(self, item: bytes) -> None:
        self.chunks.append(item)

    def text(self) -> str:
        return b"".join(self.chunks).decode("utf-8")


@pytest.fixture(autouse=True)
def reset_metrics():
    """Start every test with an empty metrics registry."""
    metrics.reset()
    yield


@pytest.fixture
def executor():
    """A private executor, drained after the test."""
    pool = TaskExecutor(max_workers=4)
    yield pool
    pool.shutdown(cancel_running=True, timeout=5)


@pytest.fixture
def recording_stream():
    return RecordingStream()


@pytest.fixture
async def client():
    """Async test client with the shared executor running."""
    from sse_starlette import sse as sse_module

    from taskstream.main import app
    from taskstream.tasks import start_task_executor, stop_task_executor

    # Older sse-starlette releases keep a loop-bound exit event on a class
    if hasattr(sse_module, "AppStatus"):
        sse_module.AppStatus.should_exit_event = None

    await start_task_executor()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    await stop_task_executor()
