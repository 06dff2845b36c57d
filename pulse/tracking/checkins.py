"""
Check-ins Service
=================

Weekly employee check-ins. Each submission recomputes the project health
score in the same unit of work.

Author: ProjectPulse Team
Version: 1.0.0
"""

import logging
from datetime import date
from typing import Dict, List, Optional

from shared.schemas.tracking import (
    ActivityType,
    CheckInCreate,
    CheckInResponse,
    UserRole,
    UserSummary,
)
from pulse.db.base import utc_now
from pulse.db.models import CheckInDB, UserDB
from pulse.tracking.access import Actor, ensure_project_access, start_of_week
from pulse.tracking.errors import (
    AccessDeniedError,
    DuplicateSubmissionError,
    NotFoundError,
)
from pulse.tracking.health import HealthRecomputer
from pulse.tracking.repository import TrackingRepository


logger = logging.getLogger(__name__)


def build_check_in_response(
    check_in: CheckInDB,
    users: Dict[str, UserDB],
) -> CheckInResponse:
    employee = users.get(check_in.employee_id)
    return CheckInResponse(
        id=check_in.id,
        project_id=check_in.project_id,
        employee_id=check_in.employee_id,
        week_start_date=check_in.week_start_date,
        progress_summary=check_in.progress_summary,
        blockers=check_in.blockers,
        confidence_level=check_in.confidence_level,
        completion_percentage=check_in.completion_percentage,
        created_at=check_in.created_at,
        employee=UserSummary.model_validate(employee) if employee else None,
    )


class CheckInsService:
    """
    Service for employee check-ins.

    Example:
        service = CheckInsService(TrackingRepository(db))
        check_in = await service.create_check_in(data, actor)
    """

    def __init__(
        self,
        repository: TrackingRepository,
        recomputer: Optional[HealthRecomputer] = None,
    ):
        self.repository = repository
        self.recomputer = recomputer or HealthRecomputer(repository)

    async def list_check_ins(
        self,
        actor: Actor,
        project_id: Optional[str] = None,
    ) -> List[CheckInResponse]:
        """
        List check-ins visible to ``actor``.

        Employees see their own check-ins, clients see check-ins on projects
        they own and admins see everything.
        """
        project_ids = None
        employee_id = None

        if project_id:
            await self._ensure_project_access(project_id, actor)
            project_ids = [project_id]

        if actor.role == UserRole.EMPLOYEE:
            employee_id = actor.user_id
        elif actor.role == UserRole.CLIENT and project_ids is None:
            project_ids = [
                p.id for p in await self.repository.list_projects(client_id=actor.user_id)
            ]

        check_ins = await self.repository.list_check_ins(
            project_ids=project_ids, employee_id=employee_id
        )
        users = await self.repository.get_users(c.employee_id for c in check_ins)
        return [build_check_in_response(c, users) for c in check_ins]

    async def create_check_in(
        self,
        data: CheckInCreate,
        actor: Actor,
        today: Optional[date] = None,
    ) -> CheckInResponse:
        """
        Submit a weekly check-in.

        Raises:
            NotFoundError: Unknown project
            AccessDeniedError: Employee not assigned to the project
            DuplicateSubmissionError: Already submitted for that week
        """
        project = await self.repository.get_project(data.project_id)
        if project is None:
            raise NotFoundError("Project not found")

        if not await self.repository.is_employee_assigned(project.id, actor.user_id):
            raise AccessDeniedError("You are not assigned to this project")

        week_start = start_of_week(data.week_start_date or today or utc_now().date())

        existing = await self.repository.find_check_in(project.id, actor.user_id, week_start)
        if existing is not None:
            raise DuplicateSubmissionError("Check-in already submitted for this week")

        check_in = await self.repository.add(CheckInDB(
            project_id=project.id,
            employee_id=actor.user_id,
            week_start_date=week_start,
            progress_summary=data.progress_summary,
            blockers=data.blockers,
            confidence_level=data.confidence_level,
            completion_percentage=data.completion_percentage,
        ))

        await self.repository.log_activity(
            project_id=project.id,
            user_id=actor.user_id,
            activity_type=ActivityType.CHECKIN,
            description=f"Weekly check-in submitted ({data.completion_percentage:g}% complete)",
            details={
                "confidence_level": data.confidence_level,
                "completion_percentage": data.completion_percentage,
            },
        )

        await self.recomputer.recompute(project, actor.user_id)

        logger.info(f"Check-in {check_in.id} recorded for project {project.id}")

        users = await self.repository.get_users([actor.user_id])
        return build_check_in_response(check_in, users)

    async def _ensure_project_access(self, project_id: str, actor: Actor) -> None:
        project = await self.repository.get_project(project_id)
        if project is None:
            raise NotFoundError("Project not found")
        assignments = await self.repository.get_employee_ids([project.id])
        ensure_project_access(project, assignments.get(project.id, []), actor)
