"""
Feedback Service
================

Weekly client feedback. Each submission recomputes the project health
score in the same unit of work.

Author: ProjectPulse Team
Version: 1.0.0
"""

import logging
from datetime import date
from typing import Dict, List, Optional

from shared.schemas.tracking import (
    ActivityType,
    FeedbackCreate,
    FeedbackResponse,
    UserRole,
    UserSummary,
)
from pulse.db.base import utc_now
from pulse.db.models import FeedbackDB, UserDB
from pulse.tracking.access import Actor, ensure_project_access, start_of_week
from pulse.tracking.errors import (
    AccessDeniedError,
    DuplicateSubmissionError,
    NotFoundError,
)
from pulse.tracking.health import HealthRecomputer
from pulse.tracking.repository import TrackingRepository


logger = logging.getLogger(__name__)


def build_feedback_response(
    feedback: FeedbackDB,
    users: Dict[str, UserDB],
) -> FeedbackResponse:
    client = users.get(feedback.client_id)
    return FeedbackResponse(
        id=feedback.id,
        project_id=feedback.project_id,
        client_id=feedback.client_id,
        week_start_date=feedback.week_start_date,
        satisfaction_rating=feedback.satisfaction_rating,
        communication_rating=feedback.communication_rating,
        comments=feedback.comments,
        issue_flagged=feedback.issue_flagged,
        created_at=feedback.created_at,
        client=UserSummary.model_validate(client) if client else None,
    )


class FeedbackService:
    """
    Service for client feedback.

    Example:
        service = FeedbackService(TrackingRepository(db))
        feedback = await service.create_feedback(data, actor)
    """

    def __init__(
        self,
        repository: TrackingRepository,
        recomputer: Optional[HealthRecomputer] = None,
    ):
        self.repository = repository
        self.recomputer = recomputer or HealthRecomputer(repository)

    async def list_feedback(
        self,
        actor: Actor,
        project_id: Optional[str] = None,
    ) -> List[FeedbackResponse]:
        """
        List feedback visible to ``actor``.

        Clients see their own feedback, employees see feedback on projects
        they are assigned to and admins see everything.
        """
        project_ids = None
        client_id = None

        if project_id:
            project = await self.repository.get_project(project_id)
            if project is None:
                raise NotFoundError("Project not found")
            assignments = await self.repository.get_employee_ids([project.id])
            ensure_project_access(project, assignments.get(project.id, []), actor)
            project_ids = [project_id]

        if actor.role == UserRole.CLIENT:
            client_id = actor.user_id
        elif actor.role == UserRole.EMPLOYEE and project_ids is None:
            project_ids = [
                p.id for p in await self.repository.list_projects(employee_id=actor.user_id)
            ]

        entries = await self.repository.list_feedback(
            project_ids=project_ids, client_id=client_id
        )
        users = await self.repository.get_users(f.client_id for f in entries)
        return [build_feedback_response(f, users) for f in entries]

    async def create_feedback(
        self,
        data: FeedbackCreate,
        actor: Actor,
        today: Optional[date] = None,
    ) -> FeedbackResponse:
        """
        Submit weekly feedback.

        Raises:
            NotFoundError: Unknown project
            AccessDeniedError: Client does not own the project
            DuplicateSubmissionError: Already submitted for that week
        """
        project = await self.repository.get_project(data.project_id)
        if project is None:
            raise NotFoundError("Project not found")

        if project.client_id != actor.user_id:
            raise AccessDeniedError("You are not the client for this project")

        week_start = start_of_week(data.week_start_date or today or utc_now().date())

        existing = await self.repository.find_feedback(project.id, actor.user_id, week_start)
        if existing is not None:
            raise DuplicateSubmissionError("Feedback already submitted for this week")

        feedback = await self.repository.add(FeedbackDB(
            project_id=project.id,
            client_id=actor.user_id,
            week_start_date=week_start,
            satisfaction_rating=data.satisfaction_rating,
            communication_rating=data.communication_rating,
            comments=data.comments,
            issue_flagged=data.issue_flagged,
        ))

        description = f"Client feedback submitted (satisfaction {data.satisfaction_rating}/5)"
        if data.issue_flagged:
            description += " with a flagged issue"

        await self.repository.log_activity(
            project_id=project.id,
            user_id=actor.user_id,
            activity_type=ActivityType.FEEDBACK,
            description=description,
            details={
                "satisfaction_rating": data.satisfaction_rating,
                "communication_rating": data.communication_rating,
                "issue_flagged": data.issue_flagged,
            },
        )

        await self.recomputer.recompute(project, actor.user_id)

        logger.info(f"Feedback {feedback.id} recorded for project {project.id}")

        users = await self.repository.get_users([actor.user_id])
        return build_feedback_response(feedback, users)
