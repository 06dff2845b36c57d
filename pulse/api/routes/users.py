"""
User Routes
===========

Admin-only user directory, used to pick clients and employees for
projects.

Author: ProjectPulse Team
Version: 1.0.0
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from shared.schemas.tracking import UserResponse, UserRole
from pulse.api.auth import CurrentUser, require_role
from pulse.api.dependencies import get_users_service
from pulse.tracking import UsersService


router = APIRouter(
    prefix="/api/v1/users",
    tags=["Users"],
    responses={401: {"description": "Unauthorized"}},
)


@router.get(
    "",
    response_model=List[UserResponse],
    summary="List users",
)
async def list_users(
    role: Optional[UserRole] = Query(None, description="Filter by role"),
    user: CurrentUser = Depends(require_role("admin")),
    service: UsersService = Depends(get_users_service),
) -> List[UserResponse]:
    return await service.list_users(role)
