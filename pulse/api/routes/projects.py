"""
Project Routes
==============

REST API endpoints for projects and their health score.

All endpoints under /api/v1/projects require authentication. Reads are
scoped by role; mutations are admin-only.

Author: ProjectPulse Team
Version: 1.0.0
"""

from typing import List

from fastapi import APIRouter, Depends, status

from shared.schemas.tracking import (
    MessageResponse,
    ProjectCreate,
    ProjectHealthResponse,
    ProjectResponse,
    ProjectUpdate,
)
from pulse.api.auth import CurrentUser, get_current_user, require_role
from pulse.api.dependencies import get_projects_service
from pulse.tracking import ProjectsService


router = APIRouter(
    prefix="/api/v1/projects",
    tags=["Projects"],
    responses={401: {"description": "Unauthorized"}},
)


@router.get(
    "",
    response_model=List[ProjectResponse],
    summary="List projects",
    description="Admins see every project, employees their assigned projects and clients their own.",
)
async def list_projects(
    user: CurrentUser = Depends(get_current_user),
    service: ProjectsService = Depends(get_projects_service),
) -> List[ProjectResponse]:
    return await service.list_projects(user)


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
)
async def create_project(
    request: ProjectCreate,
    user: CurrentUser = Depends(require_role("admin")),
    service: ProjectsService = Depends(get_projects_service),
) -> ProjectResponse:
    return await service.create_project(request, user)


@router.get(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Get project",
    description="Returns the project with a freshly computed health score.",
)
async def get_project(
    project_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: ProjectsService = Depends(get_projects_service),
) -> ProjectResponse:
    return await service.get_project(project_id, user)


@router.get(
    "/{project_id}/health",
    response_model=ProjectHealthResponse,
    summary="Project health breakdown",
    description="Component scores, weakest components and recommendations.",
)
async def get_project_health(
    project_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: ProjectsService = Depends(get_projects_service),
) -> ProjectHealthResponse:
    return await service.get_project_health(project_id, user)


@router.put(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Update project",
)
async def update_project(
    project_id: str,
    request: ProjectUpdate,
    user: CurrentUser = Depends(require_role("admin")),
    service: ProjectsService = Depends(get_projects_service),
) -> ProjectResponse:
    return await service.update_project(project_id, request, user)


@router.delete(
    "/{project_id}",
    response_model=MessageResponse,
    summary="Delete project",
)
async def delete_project(
    project_id: str,
    user: CurrentUser = Depends(require_role("admin")),
    service: ProjectsService = Depends(get_projects_service),
) -> MessageResponse:
    await service.delete_project(project_id, user)
    return MessageResponse(message="Project deleted successfully")
