"""Task outcome model - the single terminal result of a task."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from taskstream.models.enums import Outcome
from taskstream.utils.time import utc_now


class TaskOutcome(BaseModel):
    """Terminal outcome of a task."""

    model_config = ConfigDict(frozen=True)

    outcome: Outcome
    reason: Optional[str] = None
    completed_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def succeeded(cls) -> "TaskOutcome":
        return cls(outcome=Outcome.SUCCEEDED)

    @classmethod
    def failed(cls, reason: str) -> "TaskOutcome":
        return cls(outcome=Outcome.FAILED, reason=reason)

    @classmethod
    def failed_from(cls, exc: BaseException) -> "TaskOutcome":
        """Build a failure outcome from an exception raised by the worker."""
        message = str(exc)
        reason = f"{type(exc).__name__}: {message}" if message else type(exc).__name__
        return cls.failed(reason)

    @classmethod
    def canceled(cls, reason: str = "canceled") -> "TaskOutcome":
        return cls(outcome=Outcome.CANCELED, reason=reason)

    @property
    def is_success(self) -> bool:
        return self.outcome == Outcome.SUCCEEDED
