"""TaskStream HTTP middleware."""

from taskstream.middleware.trace import trace_id_middleware

__all__ = ["trace_id_middleware"]
