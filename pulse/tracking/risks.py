"""
Risks Service
=============

Employee-reported project risks. Creating or changing a risk recomputes
the project health score in the same unit of work.

Author: ProjectPulse Team
Version: 1.0.0
"""

import logging
from typing import Dict, List, Optional

from shared.schemas.tracking import (
    ActivityType,
    RiskCreate,
    RiskResponse,
    RiskStatus,
    RiskUpdate,
    UserRole,
    UserSummary,
)
from pulse.db.base import utc_now
from pulse.db.models import RiskDB, UserDB
from pulse.tracking.access import Actor, ensure_project_access
from pulse.tracking.errors import AccessDeniedError, NotFoundError
from pulse.tracking.health import HealthRecomputer
from pulse.tracking.repository import TrackingRepository


logger = logging.getLogger(__name__)


def build_risk_response(risk: RiskDB, users: Dict[str, UserDB]) -> RiskResponse:
    employee = users.get(risk.employee_id)
    return RiskResponse(
        id=risk.id,
        project_id=risk.project_id,
        employee_id=risk.employee_id,
        title=risk.title,
        severity=risk.severity,
        mitigation_plan=risk.mitigation_plan,
        status=risk.status,
        created_at=risk.created_at,
        updated_at=risk.updated_at,
        employee=UserSummary.model_validate(employee) if employee else None,
    )


class RisksService:
    """
    Service for project risks.

    Example:
        service = RisksService(TrackingRepository(db))
        risk = await service.create_risk(data, actor)
        risk = await service.update_risk(risk.id, RiskUpdate(status="Resolved"), actor)
    """

    def __init__(
        self,
        repository: TrackingRepository,
        recomputer: Optional[HealthRecomputer] = None,
    ):
        self.repository = repository
        self.recomputer = recomputer or HealthRecomputer(repository)

    async def list_risks(
        self,
        actor: Actor,
        project_id: Optional[str] = None,
        status: Optional[RiskStatus] = None,
    ) -> List[RiskResponse]:
        """
        List risks visible to ``actor``.

        Employees see the risks they reported, clients see risks on projects
        they own and admins see everything.
        """
        project_ids = None
        employee_id = None

        if project_id:
            project = await self.repository.get_project(project_id)
            if project is None:
                raise NotFoundError("Project not found")
            assignments = await self.repository.get_employee_ids([project.id])
            ensure_project_access(project, assignments.get(project.id, []), actor)
            project_ids = [project_id]

        if actor.role == UserRole.EMPLOYEE:
            employee_id = actor.user_id
        elif actor.role == UserRole.CLIENT and project_ids is None:
            project_ids = [
                p.id for p in await self.repository.list_projects(client_id=actor.user_id)
            ]

        risks = await self.repository.list_risks(
            project_ids=project_ids,
            status=status.value if status else None,
            employee_id=employee_id,
        )
        users = await self.repository.get_users(r.employee_id for r in risks)
        return [build_risk_response(r, users) for r in risks]

    async def create_risk(self, data: RiskCreate, actor: Actor) -> RiskResponse:
        """
        Report a risk.

        Raises:
            NotFoundError: Unknown project
            AccessDeniedError: Employee not assigned to the project
        """
        project = await self.repository.get_project(data.project_id)
        if project is None:
            raise NotFoundError("Project not found")

        if actor.role != UserRole.ADMIN and not await self.repository.is_employee_assigned(
            project.id, actor.user_id
        ):
            raise AccessDeniedError("You are not assigned to this project")

        risk = await self.repository.add(RiskDB(
            project_id=project.id,
            employee_id=actor.user_id,
            title=data.title,
            severity=data.severity.value,
            mitigation_plan=data.mitigation_plan,
            status=RiskStatus.OPEN.value,
        ))

        await self.repository.log_activity(
            project_id=project.id,
            user_id=actor.user_id,
            activity_type=ActivityType.RISK_CREATED,
            description=f"New {data.severity.value} risk reported: {data.title}",
            details={"risk_id": risk.id, "severity": data.severity.value},
        )

        await self.recomputer.recompute(project, actor.user_id)

        logger.info(f"Risk {risk.id} reported on project {project.id}")

        users = await self.repository.get_users([actor.user_id])
        return build_risk_response(risk, users)

    async def update_risk(
        self,
        risk_id: str,
        data: RiskUpdate,
        actor: Actor,
    ) -> RiskResponse:
        """
        Update a risk.

        Raises:
            NotFoundError: Unknown risk or project
            AccessDeniedError: Non-admin updating a risk they did not report
        """
        risk = await self.repository.get_risk(risk_id)
        if risk is None:
            raise NotFoundError("Risk not found")

        if actor.role != UserRole.ADMIN and risk.employee_id != actor.user_id:
            raise AccessDeniedError("You can only update your own risks")

        project = await self.repository.get_project(risk.project_id)
        if project is None:
            raise NotFoundError("Project not found")

        previous_status = risk.status

        if data.title is not None:
            risk.title = data.title
        if data.severity is not None:
            risk.severity = data.severity.value
        if data.mitigation_plan is not None:
            risk.mitigation_plan = data.mitigation_plan
        if data.status is not None:
            risk.status = data.status.value
        risk.updated_at = utc_now()
        await self.repository.db.flush()

        if data.status is not None and data.status.value != previous_status:
            await self.repository.log_activity(
                project_id=project.id,
                user_id=actor.user_id,
                activity_type=ActivityType.RISK_UPDATED,
                description=f"Risk status changed to {data.status.value}: {risk.title}",
                details={
                    "risk_id": risk.id,
                    "previous_status": previous_status,
                    "status": data.status.value,
                },
            )

        await self.recomputer.recompute(project, actor.user_id)

        logger.info(f"Risk {risk.id} updated by {actor.user_id}")

        users = await self.repository.get_users([risk.employee_id])
        return build_risk_response(risk, users)
