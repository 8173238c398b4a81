"""API request/response schemas."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from taskstream.models.enums import Outcome


# ============================================================================
# Event payloads (status events on /sse/task)
# ============================================================================


class ProgressPayload(BaseModel):
    """Progress event payload."""

    current: int = Field(..., ge=0, description="Completed work units")
    total: int = Field(..., ge=0, description="Total work units")


class CompletePayload(BaseModel):
    """Terminal payload for a task that succeeded."""

    complete: bool = True


class IncompletePayload(BaseModel):
    """Terminal payload for a task that failed or was canceled."""

    complete: bool = False
    outcome: Outcome
    reason: Optional[str] = None


# ============================================================================
# Service endpoints
# ============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    active_tasks: int = 0


class ConfigResponse(BaseModel):
    """Effective task/stream configuration."""

    task_total: int
    task_step_seconds: float
    executor_max_workers: int
    sse_framing: str
    sse_ping_seconds: int
    metrics: dict[str, Any] = Field(default_factory=dict)
