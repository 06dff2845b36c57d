"""
Activity Routes
===============

Project activity trail.

Author: ProjectPulse Team
Version: 1.0.0
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from shared.schemas.tracking import ActivityResponse
from pulse.api.auth import CurrentUser, get_current_user
from pulse.api.dependencies import get_projects_service
from pulse.tracking import ProjectsService


router = APIRouter(
    prefix="/api/v1/activities",
    tags=["Activities"],
    responses={401: {"description": "Unauthorized"}},
)


@router.get(
    "",
    response_model=List[ActivityResponse],
    summary="List project activity",
    description="Newest entries first.",
)
async def list_activities(
    project_id: str = Query(..., description="Project to list activity for"),
    user: CurrentUser = Depends(get_current_user),
    service: ProjectsService = Depends(get_projects_service),
) -> List[ActivityResponse]:
    return await service.list_activities(project_id, user)
