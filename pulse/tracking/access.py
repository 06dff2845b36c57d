"""
Access Rules
============

Role scoping shared by the tracking services.

    - admin: every project
    - employee: projects they are assigned to
    - client: projects they own

Author: ProjectPulse Team
Version: 1.0.0
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from shared.schemas.tracking import UserRole
from pulse.db.models import ProjectDB
from pulse.tracking.errors import AccessDeniedError


@dataclass
class Actor:
    """The authenticated user a service call is made on behalf of."""
    user_id: str
    role: UserRole


def can_access_project(
    project: ProjectDB,
    employee_ids: Iterable[str],
    actor: Actor,
) -> bool:
    """Whether ``actor`` may see ``project``."""
    if actor.role == UserRole.ADMIN:
        return True
    if actor.role == UserRole.EMPLOYEE:
        return actor.user_id in set(employee_ids)
    if actor.role == UserRole.CLIENT:
        return project.client_id == actor.user_id
    return False


def ensure_project_access(
    project: ProjectDB,
    employee_ids: Iterable[str],
    actor: Actor,
) -> None:
    """Raise AccessDeniedError unless ``actor`` may see ``project``."""
    if not can_access_project(project, employee_ids, actor):
        raise AccessDeniedError("Forbidden")


def start_of_week(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())
