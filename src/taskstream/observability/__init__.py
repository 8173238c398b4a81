"""Observability helpers for TaskStream."""

from taskstream.observability.metrics import metrics
from taskstream.observability.trace import get_trace_id, set_trace_id

__all__ = ["metrics", "get_trace_id", "set_trace_id"]
