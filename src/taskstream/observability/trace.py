"""Trace id propagation via context variables."""

from contextvars import ContextVar
from typing import Optional
from uuid import uuid4

_trace_id: ContextVar[Optional[str]] = ContextVar("taskstream_trace_id", default=None)


def get_trace_id() -> Optional[str]:
    """Return the trace id bound to the current context, if any."""
    return _trace_id.get()


def set_trace_id(trace_id: Optional[str] = None) -> str:
    """Bind a trace id to the current context, generating one when not given."""
    value = trace_id or str(uuid4())
    _trace_id.set(value)
    return value
