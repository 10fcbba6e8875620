"""FastAPI application factory for easyp-assist."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from easyp_assist import __version__
from easyp_assist.api.deps import init_services, reset_services
from easyp_assist.api.middleware import RequestBodyLimitMiddleware, RequestTimingMiddleware
from easyp_assist.api.routers import completion, reference, validation
from easyp_assist.api.schemas import HealthResponse
from easyp_assist.settings import Settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Create the completion engine and validation service for the app's lifetime."""
    settings: Settings = app.state.settings
    init_services(settings)
    try:
        yield
    finally:
        reset_services()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="easyp-assist",
        description="Context-aware completion and validation for easyp.yaml configs.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware
    app.add_middleware(RequestBodyLimitMiddleware, max_bytes=settings.max_request_body_bytes)
    app.add_middleware(RequestTimingMiddleware)

    app.include_router(completion.router, prefix="/completions", tags=["completions"])
    app.include_router(validation.router, prefix="/validate", tags=["validation"])
    app.include_router(reference.router, prefix="/reference", tags=["reference"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


def main() -> None:
    """Run the REST API server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger = logging.getLogger("easyp_assist.api")
    logger.info(
        "easyp-assist API Server v%s starting (host=%s, port=%d)",
        __version__, settings.api_server_host, settings.api_server_port,
    )

    uvicorn.run(
        "easyp_assist.api.app:create_app",
        factory=True,
        host=settings.api_server_host,
        port=settings.api_server_port,
        log_level=settings.log_level.lower(),
    )
