"""TaskStream HTTP API."""

from taskstream.api.router import router

__all__ = ["router"]
