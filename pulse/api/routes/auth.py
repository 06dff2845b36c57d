"""
Authentication Routes
=====================

Login, logout and the current-user profile.

Endpoints:
    POST /api/v1/auth/login    - Exchange credentials for a JWT
    GET  /api/v1/auth/me       - Current user profile
    POST /api/v1/auth/logout   - Clear the auth cookie

Author: ProjectPulse Team
Version: 1.0.0
"""

import logging

from fastapi import APIRouter, Depends, Response

from shared.schemas.tracking import LoginRequest, LoginResponse, MessageResponse, UserSummary
from pulse.config import settings
from pulse.api.auth import CurrentUser, create_access_token, get_current_user
from pulse.api.dependencies import get_users_service
from pulse.tracking import UsersService


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/auth",
    tags=["Auth"],
)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    description="Verify credentials and return a JWT. The token is also set as an HttpOnly cookie.",
)
async def login(
    request: LoginRequest,
    response: Response,
    service: UsersService = Depends(get_users_service),
) -> LoginResponse:
    user = await service.authenticate(request.email, request.password)
    token = create_access_token(user.id, role=user.role, email=user.email)

    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite="lax",
        max_age=settings.jwt_expire_minutes * 60,
    )

    logger.info(f"User {user.id} logged in")
    return LoginResponse(user=UserSummary.model_validate(user), token=token)


@router.get(
    "/me",
    response_model=UserSummary,
    summary="Current user",
)
async def me(
    user: CurrentUser = Depends(get_current_user),
    service: UsersService = Depends(get_users_service),
) -> UserSummary:
    return await service.get_user(user.user_id)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log out",
)
async def logout(response: Response) -> MessageResponse:
    response.delete_cookie(settings.auth_cookie_name)
    return MessageResponse(message="Logged out successfully")
