"""
Database Session Management
===========================

Async SQLAlchemy session factory and dependency injection.

Author: ProjectPulse Team
Version: 1.0.0
"""

import logging
from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from pulse.config import settings
from pulse.db.base import Base

logger = logging.getLogger(__name__)


@lru_cache()
def get_engine() -> AsyncEngine:
    """Create the async engine on first use."""
    return create_async_engine(
        settings.database_dsn,
        echo=settings.debug,
        pool_pre_ping=True,
    )


@lru_cache()
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the shared engine."""
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    The session is committed when the request handler returns and rolled
    back if it raises.

    Usage:
        @app.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...

    Yields:
        AsyncSession: Database session that auto-closes
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(create_tables: bool = True) -> None:
    """
    Initialize database connection.

    Called during application startup. Verifies connectivity and creates
    any missing tables.
    """
    logger.info("Initializing database connection...")

    async with get_engine().begin() as conn:
        await conn.execute(text("SELECT 1"))
        if create_tables:
            from pulse.db import models  # noqa: F401  (registers tables)
            await conn.run_sync(Base.metadata.create_all)

    logger.info("Database connection established")


async def close_db() -> None:
    """
    Close database connections.

    Called during application shutdown.
    """
    logger.info("Closing database connections...")
    await get_engine().dispose()
    logger.info("Database connections closed")


__all__ = [
    "get_engine",
    "get_session_factory",
    "get_db",
    "init_db",
    "close_db",
    "AsyncSession",
]
