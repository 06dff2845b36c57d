"""
ProjectPulse API Package
========================

FastAPI REST API layer for ProjectPulse.

This package provides:
    - main: FastAPI application and route configuration
    - routes/: Endpoint implementations
    - auth: JWT authentication and role checks
    - dependencies: Shared dependency injection

Author: ProjectPulse Team
Version: 1.0.0
"""

from pulse.api.main import app, create_app

__all__ = [
    "app",
    "create_app",
]
