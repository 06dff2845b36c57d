"""
ProjectPulse API Dependencies
=============================

FastAPI dependency injection for shared resources.

Provides:
    - ServiceContainer: process-wide state (database availability)
    - Per-request tracking services bound to the request's session

The container starts in **degraded mode** when PostgreSQL is unavailable,
so the health probes keep answering while data endpoints fail.

Author: ProjectPulse Team
Version: 1.0.0
"""

import logging
from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.db import close_db, get_db, init_db
from pulse.tracking import (
    CheckInsService,
    FeedbackService,
    ProjectsService,
    RisksService,
    TrackingRepository,
    UsersService,
)


logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Singleton container for shared services.

    Manages the lifecycle of the database connection pool.
    Supports degraded mode when PostgreSQL is unavailable.
    """

    _instance: Optional["ServiceContainer"] = None

    def __init__(self):
        self._initialized = False
        self.database_available = False

    @classmethod
    def get_instance(cls) -> "ServiceContainer":
        """Get or create the singleton instance."""
        if cls._instance is None:
            cls._instance = ServiceContainer()
        return cls._instance

    async def initialize(self) -> None:
        """Initialize all services (graceful degradation on failure)."""
        if self._initialized:
            return

        logger.info("Initializing service container...")

        try:
            await init_db()
            self.database_available = True
            logger.info("PostgreSQL connected")
        except Exception as e:
            logger.warning(f"PostgreSQL unavailable, running in DEGRADED mode: {e}")
            self.database_available = False

        self._initialized = True

    async def shutdown(self) -> None:
        """Shutdown all services."""
        logger.info("Shutting down service container...")

        if self.database_available:
            try:
                await close_db()
            except Exception as e:
                logger.warning(f"Error closing database connections: {e}")

        self._initialized = False
        self.database_available = False

        logger.info("Service container shutdown complete")


# Dependency functions for FastAPI
async def get_repository(db: AsyncSession = Depends(get_db)) -> TrackingRepository:
    """FastAPI dependency for the request-scoped tracking repository."""
    return TrackingRepository(db)


async def get_users_service(
    repository: TrackingRepository = Depends(get_repository),
) -> UsersService:
    return UsersService(repository)


async def get_projects_service(
    repository: TrackingRepository = Depends(get_repository),
) -> ProjectsService:
    return ProjectsService(repository)


async def get_checkins_service(
    repository: TrackingRepository = Depends(get_repository),
) -> CheckInsService:
    return CheckInsService(repository)


async def get_feedback_service(
    repository: TrackingRepository = Depends(get_repository),
) -> FeedbackService:
    return FeedbackService(repository)


async def get_risks_service(
    repository: TrackingRepository = Depends(get_repository),
) -> RisksService:
    return RisksService(repository)
