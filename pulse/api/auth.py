"""
ProjectPulse API Authentication
===============================

JWT-based authentication and role checks.

Tokens are accepted from an ``Authorization: Bearer`` header or from the
auth cookie set at login.

Usage:
    from pulse.api.auth import get_current_user, require_role

    @router.get("/protected")
    async def protected(user: CurrentUser = Depends(get_current_user)):
        return {"user_id": user.user_id}

    @router.delete("/admin-only")
    async def admin_only(user: CurrentUser = Depends(require_role("admin"))):
        return {"msg": "admin action"}

Author: ProjectPulse Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shared.schemas.tracking import UserRole
from pulse.config import settings
from pulse.logging import set_request_user
from pulse.tracking.access import Actor


logger = logging.getLogger(__name__)


# =============================================================================
# Models
# =============================================================================


@dataclass
class CurrentUser(Actor):
    """Authenticated user context from a validated JWT."""
    email: Optional[str] = None


# =============================================================================
# Token Utilities
# =============================================================================


def create_access_token(
    user_id: str,
    role: str,
    email: Optional[str] = None,
    expires_minutes: Optional[int] = None,
) -> str:
    """
    Create a signed JWT access token.

    Args:
        user_id: Unique user identifier
        role: User role (admin, employee, client)
        email: Optional email
        expires_minutes: Token TTL in minutes (settings default if omitted)

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    ttl = expires_minutes or settings.jwt_expire_minutes

    payload = {
        "sub": user_id,
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=ttl),
    }
    if email:
        payload["email"] = email

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> Dict[str, Any]:
    """
    Verify and decode a JWT token.

    Args:
        token: Encoded JWT

    Returns:
        Decoded payload dict

    Raises:
        HTTPException 401 if token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except jwt.PyJWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid or expired token: {e}",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if "sub" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing subject",
        )
    return payload


# =============================================================================
# FastAPI Dependencies
# =============================================================================

_bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> CurrentUser:
    """
    FastAPI dependency that extracts and validates the current user from JWT.

    Usage:
        @router.get("/me")
        async def me(user: CurrentUser = Depends(get_current_user)):
            ...
    """
    token = credentials.credentials if credentials else None
    if token is None:
        token = request.cookies.get(settings.auth_cookie_name)

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_token(token)

    try:
        role = UserRole(payload.get("role"))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: unknown role",
        )

    set_request_user(payload["sub"])

    return CurrentUser(
        user_id=payload["sub"],
        role=role,
        email=payload.get("email"),
    )


def require_role(*allowed_roles: str):
    """
    FastAPI dependency factory for role-based access control.

    Args:
        allowed_roles: One or more role strings that are permitted

    Returns:
        FastAPI dependency that validates the user's role

    Usage:
        @router.post("/checkins")
        async def submit(user = Depends(require_role("employee"))):
            ...

        @router.post("/risks")
        async def report(user = Depends(require_role("employee", "admin"))):
            ...
    """
    allowed = {UserRole(r) for r in allowed_roles}

    async def _check(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{user.role.value}' is not authorized. "
                       f"Required: {', '.join(r.value for r in allowed)}",
            )
        return user

    return _check
