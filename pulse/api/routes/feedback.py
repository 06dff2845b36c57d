"""
Feedback Routes
===============

Weekly client feedback.

Author: ProjectPulse Team
Version: 1.0.0
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from shared.schemas.tracking import FeedbackCreate, FeedbackResponse
from pulse.api.auth import CurrentUser, get_current_user, require_role
from pulse.api.dependencies import get_feedback_service
from pulse.tracking import FeedbackService


router = APIRouter(
    prefix="/api/v1/feedback",
    tags=["Feedback"],
    responses={401: {"description": "Unauthorized"}},
)


@router.get(
    "",
    response_model=List[FeedbackResponse],
    summary="List feedback",
)
async def list_feedback(
    project_id: Optional[str] = Query(None, description="Filter by project"),
    user: CurrentUser = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> List[FeedbackResponse]:
    return await service.list_feedback(user, project_id=project_id)


@router.post(
    "",
    response_model=FeedbackResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit feedback",
    description="One entry per client, project and week. Recomputes the project health score.",
)
async def create_feedback(
    request: FeedbackCreate,
    user: CurrentUser = Depends(require_role("client")),
    service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackResponse:
    return await service.create_feedback(request, user)
