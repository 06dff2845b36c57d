"""
Tracking Repository
===================

All database access for the tracking services.

Also acts as the persistence gateway of the health-score engine: it
supplies the bounded, newest-first activity windows the engine scores and
writes the derived score back onto the project.

Author: ProjectPulse Team
Version: 1.0.0
"""

import logging
from collections import defaultdict
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.schemas.tracking import ActivityType, ProjectStatus, RiskStatus
from pulse.db.base import Base, utc_now
from pulse.db.models import (
    ActivityLogDB,
    CheckInDB,
    FeedbackDB,
    ProjectDB,
    ProjectEmployeeDB,
    RiskDB,
    UserDB,
)


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class TrackingRepository:
    """
    Async repository over the ProjectPulse tables.

    Methods flush but never commit; the request-scoped session owns the
    transaction.

    Example:
        repo = TrackingRepository(db_session)
        project = await repo.get_project(project_id)
        check_ins = await repo.recent_check_ins(project.id, limit=4)
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the repository.

        Args:
            db: Async database session
        """
        self.db = db

    async def add(self, record: ModelT) -> ModelT:
        """Insert a record and load its server-side defaults."""
        self.db.add(record)
        await self.db.flush()
        await self.db.refresh(record)
        return record

    # =========================================================================
    # Users
    # =========================================================================

    async def get_user(self, user_id: str) -> Optional[UserDB]:
        return await self.db.get(UserDB, user_id)

    async def get_user_by_email(self, email: str) -> Optional[UserDB]:
        result = await self.db.execute(
            select(UserDB).where(UserDB.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_users(self, user_ids: Iterable[str]) -> Dict[str, UserDB]:
        """Fetch users by ID, keyed by ID. Unknown IDs are skipped."""
        ids = {uid for uid in user_ids if uid}
        if not ids:
            return {}
        result = await self.db.execute(select(UserDB).where(UserDB.id.in_(ids)))
        return {user.id: user for user in result.scalars()}

    async def list_users(self, role: Optional[str] = None) -> List[UserDB]:
        query = select(UserDB).order_by(UserDB.name)
        if role:
            query = query.where(UserDB.role == role)
        result = await self.db.execute(query)
        return list(result.scalars())

    # =========================================================================
    # Projects
    # =========================================================================

    async def get_project(self, project_id: str) -> Optional[ProjectDB]:
        return await self.db.get(ProjectDB, project_id)

    async def list_projects(
        self,
        client_id: Optional[str] = None,
        employee_id: Optional[str] = None,
    ) -> List[ProjectDB]:
        """List projects, optionally restricted to a client or an employee."""
        query = select(ProjectDB).order_by(ProjectDB.created_at.desc())
        if client_id:
            query = query.where(ProjectDB.client_id == client_id)
        if employee_id:
            query = query.join(
                ProjectEmployeeDB, ProjectEmployeeDB.project_id == ProjectDB.id
            ).where(ProjectEmployeeDB.employee_id == employee_id)
        result = await self.db.execute(query)
        return list(result.scalars())

    async def get_employee_ids(
        self,
        project_ids: Sequence[str],
    ) -> Dict[str, List[str]]:
        """Employee assignments for each project ID."""
        assignments: Dict[str, List[str]] = defaultdict(list)
        if not project_ids:
            return assignments
        result = await self.db.execute(
            select(ProjectEmployeeDB).where(ProjectEmployeeDB.project_id.in_(project_ids))
        )
        for row in result.scalars():
            assignments[row.project_id].append(row.employee_id)
        return assignments

    async def set_employees(self, project_id: str, employee_ids: Iterable[str]) -> None:
        """Replace the employee assignments of a project."""
        await self.db.execute(
            delete(ProjectEmployeeDB).where(ProjectEmployeeDB.project_id == project_id)
        )
        for employee_id in dict.fromkeys(employee_ids):
            self.db.add(ProjectEmployeeDB(project_id=project_id, employee_id=employee_id))
        await self.db.flush()

    async def is_employee_assigned(self, project_id: str, employee_id: str) -> bool:
        result = await self.db.execute(
            select(ProjectEmployeeDB.employee_id).where(
                ProjectEmployeeDB.project_id == project_id,
                ProjectEmployeeDB.employee_id == employee_id,
            )
        )
        return result.first() is not None

    async def delete_project(self, project_id: str) -> bool:
        """Delete a project and every record that belongs to it."""
        project = await self.get_project(project_id)
        if project is None:
            return False

        for model in (CheckInDB, FeedbackDB, RiskDB, ActivityLogDB, ProjectEmployeeDB):
            await self.db.execute(delete(model).where(model.project_id == project_id))
        await self.db.delete(project)
        await self.db.flush()

        logger.info(f"Deleted project {project_id} and related records")
        return True

    async def save_health(
        self,
        project: ProjectDB,
        health_score: int,
        status: ProjectStatus,
    ) -> None:
        """Persist a derived health score and status onto the project."""
        project.health_score = health_score
        project.status = status.value
        project.updated_at = utc_now()
        await self.db.flush()

    # =========================================================================
    # Check-ins
    # =========================================================================

    async def find_check_in(
        self,
        project_id: str,
        employee_id: str,
        week_start_date: date,
    ) -> Optional[CheckInDB]:
        result = await self.db.execute(
            select(CheckInDB).where(
                CheckInDB.project_id == project_id,
                CheckInDB.employee_id == employee_id,
                CheckInDB.week_start_date == week_start_date,
            )
        )
        return result.scalar_one_or_none()

    async def list_check_ins(
        self,
        project_ids: Optional[Sequence[str]] = None,
        employee_id: Optional[str] = None,
    ) -> List[CheckInDB]:
        query = select(CheckInDB).order_by(CheckInDB.created_at.desc())
        if project_ids is not None:
            query = query.where(CheckInDB.project_id.in_(project_ids))
        if employee_id:
            query = query.where(CheckInDB.employee_id == employee_id)
        result = await self.db.execute(query)
        return list(result.scalars())

    async def recent_check_ins(self, project_id: str, limit: int) -> List[CheckInDB]:
        """The ``limit`` newest check-ins of a project, newest-first."""
        result = await self.db.execute(
            select(CheckInDB)
            .where(CheckInDB.project_id == project_id)
            .order_by(CheckInDB.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars())

    # =========================================================================
    # Feedback
    # =========================================================================

    async def find_feedback(
        self,
        project_id: str,
        client_id: str,
        week_start_date: date,
    ) -> Optional[FeedbackDB]:
        result = await self.db.execute(
            select(FeedbackDB).where(
                FeedbackDB.project_id == project_id,
                FeedbackDB.client_id == client_id,
                FeedbackDB.week_start_date == week_start_date,
            )
        )
        return result.scalar_one_or_none()

    async def list_feedback(
        self,
        project_ids: Optional[Sequence[str]] = None,
        client_id: Optional[str] = None,
    ) -> List[FeedbackDB]:
        query = select(FeedbackDB).order_by(FeedbackDB.created_at.desc())
        if project_ids is not None:
            query = query.where(FeedbackDB.project_id.in_(project_ids))
        if client_id:
            query = query.where(FeedbackDB.client_id == client_id)
        result = await self.db.execute(query)
        return list(result.scalars())

    async def recent_feedback(self, project_id: str, limit: int) -> List[FeedbackDB]:
        """The ``limit`` newest feedback entries of a project, newest-first."""
        result = await self.db.execute(
            select(FeedbackDB)
            .where(FeedbackDB.project_id == project_id)
            .order_by(FeedbackDB.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars())

    # =========================================================================
    # Risks
    # =========================================================================

    async def get_risk(self, risk_id: str) -> Optional[RiskDB]:
        return await self.db.get(RiskDB, risk_id)

    async def list_risks(
        self,
        project_ids: Optional[Sequence[str]] = None,
        status: Optional[str] = None,
        employee_id: Optional[str] = None,
    ) -> List[RiskDB]:
        query = select(RiskDB).order_by(RiskDB.created_at.desc())
        if project_ids is not None:
            query = query.where(RiskDB.project_id.in_(project_ids))
        if status:
            query = query.where(RiskDB.status == status)
        if employee_id:
            query = query.where(RiskDB.employee_id == employee_id)
        result = await self.db.execute(query)
        return list(result.scalars())

    async def open_risks(self, project_id: str) -> List[RiskDB]:
        """Every open risk of a project."""
        result = await self.db.execute(
            select(RiskDB).where(
                RiskDB.project_id == project_id,
                RiskDB.status == RiskStatus.OPEN.value,
            )
        )
        return list(result.scalars())

    # =========================================================================
    # Activity Log
    # =========================================================================

    async def log_activity(
        self,
        project_id: str,
        user_id: str,
        activity_type: ActivityType,
        description: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> ActivityLogDB:
        """Append an activity entry."""
        entry = ActivityLogDB(
            project_id=project_id,
            user_id=user_id,
            type=activity_type.value,
            description=description,
            details=details or {},
        )
        self.db.add(entry)
        await self.db.flush()
        return entry

    async def list_activities(self, project_id: str, limit: int) -> List[ActivityLogDB]:
        result = await self.db.execute(
            select(ActivityLogDB)
            .where(ActivityLogDB.project_id == project_id)
            .order_by(ActivityLogDB.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars())
