"""
Check-in Routes
===============

Weekly employee check-ins.

Author: ProjectPulse Team
Version: 1.0.0
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from shared.schemas.tracking import CheckInCreate, CheckInResponse
from pulse.api.auth import CurrentUser, get_current_user, require_role
from pulse.api.dependencies import get_checkins_service
from pulse.tracking import CheckInsService


router = APIRouter(
    prefix="/api/v1/checkins",
    tags=["Check-ins"],
    responses={401: {"description": "Unauthorized"}},
)


@router.get(
    "",
    response_model=List[CheckInResponse],
    summary="List check-ins",
)
async def list_check_ins(
    project_id: Optional[str] = Query(None, description="Filter by project"),
    user: CurrentUser = Depends(get_current_user),
    service: CheckInsService = Depends(get_checkins_service),
) -> List[CheckInResponse]:
    return await service.list_check_ins(user, project_id=project_id)


@router.post(
    "",
    response_model=CheckInResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit check-in",
    description="One check-in per employee, project and week. Recomputes the project health score.",
)
async def create_check_in(
    request: CheckInCreate,
    user: CurrentUser = Depends(require_role("employee")),
    service: CheckInsService = Depends(get_checkins_service),
) -> CheckInResponse:
    return await service.create_check_in(request, user)
