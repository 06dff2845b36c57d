"""
Projects Service
================

Service layer for project CRUD, role-scoped listing, the project health
breakdown and the project activity log.

Reading a single project runs the patch-on-read half of the health-score
policy (see ``pulse.tracking.health``).

Author: ProjectPulse Team
Version: 1.0.0
"""

import logging
from typing import Dict, List, Optional, Sequence

from shared.schemas.tracking import (
    ActivityResponse,
    ActivityType,
    HealthComponent,
    ProjectCreate,
    ProjectHealthResponse,
    ProjectResponse,
    ProjectStatus,
    ProjectUpdate,
    UserRole,
    UserSummary,
)
from pulse.config import settings
from pulse.db.models import ProjectDB, UserDB
from pulse.scoring.rules import as_utc
from pulse.tracking.access import Actor, ensure_project_access
from pulse.tracking.errors import NotFoundError, ValidationFailedError
from pulse.tracking.health import HealthRecomputer
from pulse.tracking.repository import TrackingRepository


logger = logging.getLogger(__name__)


def build_project_response(
    project: ProjectDB,
    employee_ids: Sequence[str],
    users: Dict[str, UserDB],
    health_score: Optional[int] = None,
) -> ProjectResponse:
    """Assemble the API view of a project with its users populated."""
    client = users.get(project.client_id)
    return ProjectResponse(
        id=project.id,
        name=project.name,
        description=project.description,
        client_id=project.client_id,
        employee_ids=list(employee_ids),
        start_date=project.start_date,
        end_date=project.end_date,
        status=project.status,
        health_score=project.health_score if health_score is None else health_score,
        created_at=project.created_at,
        updated_at=project.updated_at,
        client=UserSummary.model_validate(client) if client else None,
        employees=[
            UserSummary.model_validate(users[eid]) for eid in employee_ids if eid in users
        ],
    )


class ProjectsService:
    """
    Service for managing projects.

    Example:
        service = ProjectsService(TrackingRepository(db))

        projects = await service.list_projects(actor)
        project = await service.get_project(project_id, actor)
        health = await service.get_project_health(project_id, actor)
    """

    def __init__(
        self,
        repository: TrackingRepository,
        recomputer: Optional[HealthRecomputer] = None,
    ):
        """
        Initialize the projects service.

        Args:
            repository: Tracking repository bound to the request session
            recomputer: Health recompute policy (built from repository if omitted)
        """
        self.repository = repository
        self.recomputer = recomputer or HealthRecomputer(repository)

    # =========================================================================
    # Queries
    # =========================================================================

    async def list_projects(self, actor: Actor) -> List[ProjectResponse]:
        """List the projects visible to ``actor``."""
        if actor.role == UserRole.ADMIN:
            projects = await self.repository.list_projects()
        elif actor.role == UserRole.EMPLOYEE:
            projects = await self.repository.list_projects(employee_id=actor.user_id)
        else:
            projects = await self.repository.list_projects(client_id=actor.user_id)

        assignments = await self.repository.get_employee_ids([p.id for p in projects])
        user_ids = {p.client_id for p in projects}
        for employee_ids in assignments.values():
            user_ids.update(employee_ids)
        users = await self.repository.get_users(user_ids)

        return [
            build_project_response(p, assignments.get(p.id, []), users)
            for p in projects
        ]

    async def get_project(self, project_id: str, actor: Actor) -> ProjectResponse:
        """
        Get a project, refreshing its stored health score if it drifted.

        Raises:
            NotFoundError: Unknown project
            AccessDeniedError: Project not visible to ``actor``
        """
        project, employee_ids = await self._load_accessible(project_id, actor)

        result, _ = await self.recomputer.refresh_on_read(project, actor.user_id)

        users = await self.repository.get_users([project.client_id, *employee_ids])
        return build_project_response(
            project, employee_ids, users, health_score=result.health_score
        )

    async def get_project_health(
        self,
        project_id: str,
        actor: Actor,
    ) -> ProjectHealthResponse:
        """Full health-score breakdown and explanation for a project."""
        project, _ = await self._load_accessible(project_id, actor)

        result, _ = await self.recomputer.refresh_on_read(project, actor.user_id)
        explanation = self.recomputer.engine.explain(result)

        return ProjectHealthResponse(
            project_id=project.id,
            health_score=result.health_score,
            status=result.status,
            components=[HealthComponent(**c) for c in explanation["components"]],
            expected_progress=round(result.expected_progress, 2),
            actual_progress=round(result.actual_progress, 2),
            summary=explanation["summary"],
            weakest_components=explanation["weakest_components"],
            recommendations=explanation["recommendations"],
            calculated_at=result.calculated_at,
        )

    async def list_activities(self, project_id: str, actor: Actor) -> List[ActivityResponse]:
        """Newest activity entries of a project."""
        await self._load_accessible(project_id, actor)

        entries = await self.repository.list_activities(
            project_id, settings.activity_list_limit
        )
        users = await self.repository.get_users(e.user_id for e in entries)

        return [
            ActivityResponse(
                id=e.id,
                project_id=e.project_id,
                user_id=e.user_id,
                type=e.type,
                description=e.description,
                metadata=e.details or {},
                created_at=e.created_at,
                user=UserSummary.model_validate(users[e.user_id]) if e.user_id in users else None,
            )
            for e in entries
        ]

    # =========================================================================
    # Mutations
    # =========================================================================

    async def create_project(self, data: ProjectCreate, actor: Actor) -> ProjectResponse:
        """Create a project with the initial health score."""
        await self._validate_members(data.client_id, data.employee_ids)

        project = await self.repository.add(ProjectDB(
            name=data.name,
            description=data.description,
            client_id=data.client_id,
            start_date=data.start_date,
            end_date=data.end_date,
            status=ProjectStatus.ON_TRACK.value,
            health_score=settings.initial_health_score,
        ))
        await self.repository.set_employees(project.id, data.employee_ids)

        await self.repository.log_activity(
            project_id=project.id,
            user_id=actor.user_id,
            activity_type=ActivityType.STATUS_CHANGE,
            description="Project created",
        )

        logger.info(f"Created project {project.id}")

        employee_ids = list(dict.fromkeys(data.employee_ids))
        users = await self.repository.get_users([project.client_id, *employee_ids])
        return build_project_response(project, employee_ids, users)

    async def update_project(
        self,
        project_id: str,
        data: ProjectUpdate,
        actor: Actor,
    ) -> ProjectResponse:
        """
        Apply a partial update.

        Raises:
            NotFoundError: Unknown project
            ValidationFailedError: Dates out of order or bad member roles
        """
        project = await self.repository.get_project(project_id)
        if project is None:
            raise NotFoundError("Project not found")

        start = data.start_date or project.start_date
        end = data.end_date or project.end_date
        if as_utc(end) <= as_utc(start):
            raise ValidationFailedError("end_date must be after start_date")

        if data.client_id is not None or data.employee_ids is not None:
            await self._validate_members(data.client_id, data.employee_ids)

        if data.name is not None:
            project.name = data.name
        if data.description is not None:
            project.description = data.description
        if data.client_id is not None:
            project.client_id = data.client_id
        project.start_date = start
        project.end_date = end
        if data.status is not None:
            project.status = data.status.value
        await self.repository.db.flush()

        if data.employee_ids is not None:
            await self.repository.set_employees(project.id, data.employee_ids)

        if data.status is not None:
            await self.repository.log_activity(
                project_id=project.id,
                user_id=actor.user_id,
                activity_type=ActivityType.STATUS_CHANGE,
                description=f"Project status changed to {data.status.value}",
            )

        logger.info(f"Updated project {project.id}")

        assignments = await self.repository.get_employee_ids([project.id])
        employee_ids = assignments.get(project.id, [])
        users = await self.repository.get_users([project.client_id, *employee_ids])
        return build_project_response(project, employee_ids, users)

    async def delete_project(self, project_id: str, actor: Actor) -> None:
        """Delete a project and its check-ins, feedback, risks and activity."""
        if not await self.repository.delete_project(project_id):
            raise NotFoundError("Project not found")
        logger.info(f"Project {project_id} deleted by {actor.user_id}")

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _load_accessible(self, project_id: str, actor: Actor):
        project = await self.repository.get_project(project_id)
        if project is None:
            raise NotFoundError("Project not found")

        assignments = await self.repository.get_employee_ids([project.id])
        employee_ids = assignments.get(project.id, [])
        ensure_project_access(project, employee_ids, actor)
        return project, employee_ids

    async def _validate_members(
        self,
        client_id: Optional[str],
        employee_ids: Optional[Sequence[str]],
    ) -> None:
        """Check that the client and employees exist with the right roles."""
        wanted = [uid for uid in [client_id, *(employee_ids or [])] if uid]
        users = await self.repository.get_users(wanted)

        if client_id is not None:
            client = users.get(client_id)
            if client is None or client.role != UserRole.CLIENT.value:
                raise ValidationFailedError(f"Unknown client: {client_id}")

        for employee_id in employee_ids or []:
            employee = users.get(employee_id)
            if employee is None or employee.role != UserRole.EMPLOYEE.value:
                raise ValidationFailedError(f"Unknown employee: {employee_id}")
