"""TaskStream - stream background task progress as server-sent events."""

__version__ = "0.1.0"
