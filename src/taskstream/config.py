"""TaskStream configuration management."""

from enum import Enum

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from taskstream.models.enums import SSEFraming


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """TaskStream configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="TASKSTREAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # General
    env: Environment = Environment.DEVELOPMENT
    log_level: str = "INFO"
    debug: bool = False

    # Task shape (fixed per deployment, never taken from the request)
    task_total: int = Field(default=10, ge=0, description="Work units per streamed task")
    task_step_seconds: float = Field(
        default=1.0, ge=0, description="Pause between work units"
    )

    # Worker pool
    executor_max_workers: int = Field(
        default=32, ge=1, description="Upper bound on concurrently running tasks"
    )
    executor_shutdown_timeout_seconds: float = Field(
        default=10.0, ge=0, description="How long shutdown waits for workers to drain"
    )
    cancel_tasks_on_shutdown: bool = Field(
        default=True, description="Signal running tasks to stop when the service stops"
    )

    # Event stream
    sse_framing: SSEFraming = Field(
        default=SSEFraming.LITERAL,
        description="literal: blank line after each field; canonical: one per event",
    )
    sse_ping_seconds: int = Field(
        default=15, ge=1, description="Keep-alive comment interval on idle streams"
    )

    # CORS configuration (explicit allowlist)
    cors_allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins (explicit allowlist for security)"
    )
    cors_allow_credentials: bool = Field(
        default=True,
        description="Allow credentials in CORS requests"
    )
    cors_allowed_methods: list[str] = Field(
        default=["GET", "OPTIONS"],
        description="Allowed HTTP methods"
    )
    cors_allowed_headers: list[str] = Field(
        default=["Content-Type", "Last-Event-ID", "X-Trace-ID", "X-Request-ID"],
        description="Allowed request headers"
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Validators
    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port number range."""
        if not 1 <= v <= 65535:
            raise ValueError(f"Port must be between 1 and 65535, got {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept level names the logging module knows about."""
        if v.upper() not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"Unknown log level: {v}")
        return v.upper()

    @model_validator(mode="after")
    def validate_cors(self) -> "Settings":
        """Wildcard origins cannot be combined with credentials."""
        if self.cors_allow_credentials and "*" in self.cors_allowed_origins:
            raise ValueError("cors_allowed_origins must not contain '*' when credentials are allowed")
        return self


settings = Settings()
