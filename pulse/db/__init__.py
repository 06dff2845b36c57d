"""
ProjectPulse Database Layer
===========================

PostgreSQL database layer using SQLAlchemy 2.0 async.

This module provides:
    - Async database session management
    - Base model class and ORM models for all persisted records
    - Connection lifecycle management

Usage:
    from pulse.db import get_db, AsyncSession

    async def my_endpoint(db: AsyncSession = Depends(get_db)):
        result = await db.execute(select(ProjectDB))
        ...

Author: ProjectPulse Team
Version: 1.0.0
"""

from pulse.db.session import (
    get_engine,
    get_session_factory,
    get_db,
    init_db,
    close_db,
    AsyncSession,
)
from pulse.db.base import Base

__all__ = [
    "get_engine",
    "get_session_factory",
    "get_db",
    "init_db",
    "close_db",
    "AsyncSession",
    "Base",
]
