"""
HTTP tests for GET /sse/task and the service endpoints.

Most tests go through httpx's ASGITransport, which hands back the body only
once the response is complete. They check headers and wire content. Per-frame
delivery is checked by driving the ASGI app directly and recording each body
message as it is sent.
"""

import json
import time

import anyio
import pytest

from taskstream.config import settings
from taskstream.models import SSEFraming
from taskstream.observability import metrics
from taskstream.sse import parse_frames
from taskstream.tasks import stop_task_executor


@pytest.fixture
def task_shape(monkeypatch):
    """Shrink the streamed task so the tests run instantly."""
    monkeypatch.setattr(settings, "task_total", 3)
    monkeypatch.setattr(settings, "task_step_seconds", 0.0)
    monkeypatch.setattr(settings, "sse_framing", SSEFraming.LITERAL)


@pytest.mark.asyncio
async def test_stream_sets_event_stream_content_type(client, task_shape):
    response = await client.get("/sse/task")

    assert response.status_code == 200
    assert response.headers["content-type"].lower() == "text/event-stream; charset=utf-8"
    assert "x-trace-id" in response.headers


@pytest.mark.asyncio
async def test_stream_body_for_total_three(client, task_shape):
    response = await client.get("/sse/task")

    frames = parse_frames(response.text)
    assert [(f.event, json.loads(f.data)) for f in frames] == [
        ("status", {"current": 1, "total": 3}),
        ("status", {"current": 2, "total": 3}),
        ("status", {"complete": True}),
    ]
    assert 'event: status\n\ndata: {"current":1,"total":3}\n\n' in response.text


@pytest.mark.asyncio
async def test_stream_with_zero_total_sends_only_completion(client, task_shape, monkeypatch):
    monkeypatch.setattr(settings, "task_total", 0)

    response = await client.get("/sse/task")

    frames = parse_frames(response.text)
    assert [(f.event, f.data) for f in frames] == [("status", '{"complete":true}')]


@pytest.mark.asyncio
async def test_stream_respects_canonical_framing(client, task_shape, monkeypatch):
    monkeypatch.setattr(settings, "sse_framing", SSEFraming.CANONICAL)

    response = await client.get("/sse/task")

    assert 'event: status\ndata: {"complete":true}\n\n' in response.text


@pytest.mark.asyncio
async def test_trace_id_is_echoed(client, task_shape):
    response = await client.get("/v1/health", headers={"X-Trace-ID": "trace-123"})

    assert response.headers["x-trace-id"] == "trace-123"


@pytest.mark.asyncio
async def test_stream_unavailable_without_executor(client, task_shape):
    await stop_task_executor()

    response = await client.get("/sse/task")

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_health_reports_executor_state(client):
    response = await client.get("/v1/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["active_tasks"] == 0

    await stop_task_executor()
    response = await client.get("/v1/health")
    assert response.json()["status"] == "degraded"


@pytest.mark.asyncio
async def test_config_exposes_stream_settings_and_metrics(client, task_shape):
    await client.get("/sse/task")

    response = await client.get("/v1/config")

    body = response.json()
    assert body["task_total"] == 3
    assert body["sse_framing"] == "literal"
    assert body["metrics"]["counters"]["tasks.submitted"] == 1
    assert body["metrics"]["counters"]["stream.frames"] == 3


@pytest.mark.asyncio
async def test_stream_sends_no_cache_header(client, task_shape):
    response = await client.get("/sse/task")

    assert response.headers["cache-control"] == "no-cache"
    assert response.headers["x-accel-buffering"] == "no"


async def collect_body_messages(path: str) -> list[tuple[bytes, float, float]]:
    """Call the app directly; record each body chunk with its arrival time."""
    from taskstream.main import app

    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": b"",
        "headers": [(b"host", b"test")],
        "client": ("127.0.0.1", 50000),
        "server": ("test", 80),
    }
    received = []
    request_sent = False
    client_gone = anyio.Event()

    async def receive():
        nonlocal request_sent
        if not request_sent:
            request_sent = True
            return {"type": "http.request", "body": b"", "more_body": False}
        await client_gone.wait()
        return {"type": "http.disconnect"}

    async def send(message):
        if message["type"] == "http.response.body" and message.get("body"):
            received.append(
                (message["body"], time.monotonic(), metrics.counter_value("tasks.succeeded"))
            )

    with anyio.fail_after(10):
        await app(scope, receive, send)
    return received


@pytest.mark.asyncio
async def test_frames_leave_before_task_finishes(client, task_shape, monkeypatch):
    monkeypatch.setattr(settings, "task_step_seconds", 0.2)

    received = await collect_body_messages("/sse/task")

    bodies = [body.decode() for body, _, _ in received]
    assert '"current":1' in bodies[0]
    assert '"complete":true' in bodies[-1]

    _, first_at, succeeded_at_first = received[0]
    _, last_at, succeeded_at_last = received[-1]
    assert succeeded_at_first == 0
    assert succeeded_at_last == 1
    assert last_at - first_at >= 0.3
