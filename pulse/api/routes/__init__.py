"""
ProjectPulse API Routes Package
===============================

FastAPI route modules.

Author: ProjectPulse Team
Version: 1.0.0
"""

from pulse.api.routes.health import router as health_router
from pulse.api.routes.auth import router as auth_router
from pulse.api.routes.projects import router as projects_router
from pulse.api.routes.checkins import router as checkins_router
from pulse.api.routes.feedback import router as feedback_router
from pulse.api.routes.risks import router as risks_router
from pulse.api.routes.activities import router as activities_router
from pulse.api.routes.users import router as users_router

__all__ = [
    "health_router",
    "auth_router",
    "projects_router",
    "checkins_router",
    "feedback_router",
    "risks_router",
    "activities_router",
    "users_router",
]
