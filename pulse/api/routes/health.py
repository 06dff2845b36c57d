"""
ProjectPulse Health Routes
==========================

Health check endpoints for monitoring and orchestration.
Supports degraded mode when PostgreSQL is unavailable.

Endpoints:
    GET /health          - Basic health (always returns)
    GET /health/ready    - Readiness with dependency checks
    GET /health/live     - Liveness probe

Author: ProjectPulse Team
Version: 1.0.0
"""

import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from pulse.config import settings
from pulse.api.dependencies import ServiceContainer
from pulse.db import get_engine
from shared.contracts.pulse import DependencyHealth, ServiceHealth


router = APIRouter(tags=["Health"])

# Track startup time for uptime calculation
_start_time = time.time()


async def _check_database() -> DependencyHealth:
    container = ServiceContainer.get_instance()
    if not container.database_available:
        return DependencyHealth(
            name="postgresql",
            status="unavailable",
            message="Not connected",
        )

    try:
        start = time.time()
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return DependencyHealth(
            name="postgresql",
            status="healthy",
            latency_ms=(time.time() - start) * 1000,
        )
    except Exception as e:
        return DependencyHealth(
            name="postgresql",
            status="unhealthy",
            message=str(e),
        )


@router.get(
    "/health",
    response_model=ServiceHealth,
    summary="Health Check",
    description="Returns ProjectPulse health status with dependency info.",
)
async def health_check() -> ServiceHealth:
    """
    Health check endpoint for monitoring.

    Returns:
        - Overall status: healthy, degraded, unhealthy
        - Dependency health: PostgreSQL
    """
    dependencies = [await _check_database()]

    statuses = [d.status for d in dependencies]
    if all(s == "healthy" for s in statuses):
        overall = "healthy"
    elif any(s == "unhealthy" for s in statuses):
        overall = "unhealthy"
    else:
        overall = "degraded"

    return ServiceHealth(
        status=overall,
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
        dependencies=dependencies,
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/health/ready",
    summary="Readiness Check",
    description="Checks if ProjectPulse is ready to handle requests.",
)
async def readiness_check():
    """
    Readiness probe.

    Returns 200 when the database is connected, 503 otherwise.
    """
    container = ServiceContainer.get_instance()
    body: Dict[str, Any] = {
        "ready": container.database_available,
        "postgresql": container.database_available,
    }
    if not container.database_available:
        return JSONResponse(status_code=503, content=body)
    return body


@router.get(
    "/health/live",
    summary="Liveness Check",
    description="Liveness probe.",
)
async def liveness_check() -> Dict[str, str]:
    """
    Liveness probe.

    Returns 200 if the process is alive.
    """
    return {"status": "alive"}
