"""TaskStream main application."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskstream import __version__
from taskstream.api import router
from taskstream.config import settings
from taskstream.middleware import trace_id_middleware
from taskstream.tasks import start_task_executor, stop_task_executor

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("taskstream")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting TaskStream server...")
    logger.info(f"Environment: {settings.env.value}")
    logger.info(
        f"Task shape: total={settings.task_total}, step={settings.task_step_seconds}s, "
        f"framing={settings.sse_framing.value}"
    )

    await start_task_executor()

    yield

    logger.info("Shutting down TaskStream server...")
    await stop_task_executor()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="TaskStream",
    description="Runs background tasks and streams their progress as server-sent events",
    version=__version__,
    lifespan=lifespan,
)

# Trace ID middleware (correlation across request and worker logs)
app.middleware("http")(trace_id_middleware)

# CORS (explicit allowlist, no wildcards with credentials)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allowed_methods,
    allow_headers=settings.cors_allowed_headers,
)

# Include API router
app.include_router(router)


def main():
    """Entry point for the application."""
    uvicorn.run(
        "taskstream.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
