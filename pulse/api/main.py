"""
ProjectPulse API Main Application
=================================

FastAPI application entry point for the ProjectPulse REST API.

Features:
    - OpenAPI documentation at /docs
    - Auth, projects, check-ins, feedback, risks, activity and user endpoints
    - CORS middleware for the dashboard front end
    - Async lifespan management

Usage:
    # Development:
    uvicorn pulse.api.main:app --reload

    # Production:
    uvicorn pulse.api.main:app --host 0.0.0.0 --port 8000

Author: ProjectPulse Team
Version: 1.0.0
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pulse.config import settings
from pulse.api.dependencies import ServiceContainer
from pulse.api.routes import (
    activities_router,
    auth_router,
    checkins_router,
    feedback_router,
    health_router,
    projects_router,
    risks_router,
    users_router,
)
from pulse.tracking.errors import TrackingError


# Configure structured logging
from pulse.logging import setup_logging, get_logger, RequestLoggingMiddleware
setup_logging(level=settings.log_level, json_output=not settings.debug)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Handles startup and shutdown of services.
    """
    logger.info("Starting ProjectPulse API...")

    container = ServiceContainer.get_instance()
    await container.initialize()

    logger.info("ProjectPulse API started successfully")

    yield

    logger.info("Shutting down ProjectPulse API...")
    await container.shutdown()
    logger.info("ProjectPulse API shutdown complete")


async def tracking_error_handler(request: Request, exc: TrackingError) -> JSONResponse:
    """Map service-layer errors onto ``{"detail": ...}`` responses."""
    logger.debug(
        "tracking_error",
        path=request.url.path,
        status=exc.status_code,
        detail=exc.detail,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    app = FastAPI(
        title="ProjectPulse API",
        description=(
            "Project health tracking API\n\n"
            "ProjectPulse provides:\n"
            "- Weekly employee check-ins and client feedback\n"
            "- Risk reporting\n"
            "- A 0-100 project health score with status bands\n\n"
            "## Authentication\n"
            "All endpoints except `/health/*` and login require a valid JWT. "
            "Include `Authorization: Bearer <token>` or send the `token` cookie.\n\n"
            "Roles: `admin`, `employee`, `client`"
        ),
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )

    # Credentials (the auth cookie) cannot be combined with a wildcard origin
    allowed_origins = settings.cors_origins_list or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=allowed_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add structured request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(TrackingError, tracking_error_handler)

    # Register routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(projects_router)
    app.include_router(checkins_router)
    app.include_router(feedback_router)
    app.include_router(risks_router)
    app.include_router(activities_router)
    app.include_router(users_router)

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint returning API info."""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "description": "Project health tracking API",
            "docs": "/docs"
        }

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pulse.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )
