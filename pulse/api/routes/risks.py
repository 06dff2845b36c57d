"""
Risk Routes
===========

Project risk reporting and lifecycle.

Author: ProjectPulse Team
Version: 1.0.0
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from shared.schemas.tracking import RiskCreate, RiskResponse, RiskStatus, RiskUpdate
from pulse.api.auth import CurrentUser, get_current_user, require_role
from pulse.api.dependencies import get_risks_service
from pulse.tracking import RisksService


router = APIRouter(
    prefix="/api/v1/risks",
    tags=["Risks"],
    responses={401: {"description": "Unauthorized"}},
)


@router.get(
    "",
    response_model=List[RiskResponse],
    summary="List risks",
)
async def list_risks(
    project_id: Optional[str] = Query(None, description="Filter by project"),
    risk_status: Optional[RiskStatus] = Query(None, alias="status", description="Filter by status"),
    user: CurrentUser = Depends(get_current_user),
    service: RisksService = Depends(get_risks_service),
) -> List[RiskResponse]:
    return await service.list_risks(user, project_id=project_id, status=risk_status)


@router.post(
    "",
    response_model=RiskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Report risk",
)
async def create_risk(
    request: RiskCreate,
    user: CurrentUser = Depends(require_role("employee", "admin")),
    service: RisksService = Depends(get_risks_service),
) -> RiskResponse:
    return await service.create_risk(request, user)


@router.put(
    "/{risk_id}",
    response_model=RiskResponse,
    summary="Update risk",
    description="Reporters may update their own risks; admins may update any risk.",
)
async def update_risk(
    risk_id: str,
    request: RiskUpdate,
    user: CurrentUser = Depends(require_role("employee", "admin")),
    service: RisksService = Depends(get_risks_service),
) -> RiskResponse:
    return await service.update_risk(risk_id, request, user)
