"""Trace id middleware (correlation across request and worker logs)."""

from typing import Awaitable, Callable

from fastapi import Request, Response

from taskstream.observability.trace import set_trace_id

TRACE_HEADER = "X-Trace-ID"
REQUEST_ID_HEADER = "X-Request-ID"


async def trace_id_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Bind the caller's trace id (or a new one) and echo it on the response."""
    incoming = request.headers.get(TRACE_HEADER) or request.headers.get(REQUEST_ID_HEADER)
    trace_id = set_trace_id(incoming)
    response = await call_next(request)
    response.headers[TRACE_HEADER] = trace_id
    return response
