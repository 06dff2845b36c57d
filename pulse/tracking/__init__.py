"""
ProjectPulse Tracking Module
============================

Services for projects, weekly check-ins, client feedback, risks and the
activity log, plus the health-score recompute policy that ties them to
the scoring engine.

Author: ProjectPulse Team
Version: 1.0.0
"""

from .access import Actor, can_access_project, ensure_project_access, start_of_week
from .checkins import CheckInsService
from .errors import (
    AccessDeniedError,
    AuthenticationError,
    DuplicateSubmissionError,
    NotFoundError,
    TrackingError,
    ValidationFailedError,
)
from .feedback import FeedbackService
from .health import HealthRecomputer
from .projects import ProjectsService
from .repository import TrackingRepository
from .risks import RisksService
from .users import UsersService, hash_password, verify_password

__all__ = [
    "Actor",
    "can_access_project",
    "ensure_project_access",
    "start_of_week",
    "TrackingRepository",
    "HealthRecomputer",
    "ProjectsService",
    "CheckInsService",
    "FeedbackService",
    "RisksService",
    "UsersService",
    "hash_password",
    "verify_password",
    "TrackingError",
    "ValidationFailedError",
    "DuplicateSubmissionError",
    "AuthenticationError",
    "AccessDeniedError",
    "NotFoundError",
]
