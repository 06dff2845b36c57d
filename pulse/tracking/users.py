"""
Users Service
=============

Account lookup, credential checks and password hashing.

Author: ProjectPulse Team
Version: 1.0.0
"""

import logging
from typing import List, Optional

import bcrypt

from shared.schemas.tracking import UserResponse, UserRole, UserSummary
from pulse.db.models import UserDB
from pulse.tracking.errors import AuthenticationError, NotFoundError, ValidationFailedError
from pulse.tracking.repository import TrackingRepository


logger = logging.getLogger(__name__)

# bcrypt only considers the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    encoded = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    encoded = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
    except ValueError:
        # Stored hash is malformed
        return False


class UsersService:
    """
    Service for user accounts.

    Example:
        service = UsersService(TrackingRepository(db))
        user = await service.authenticate("admin@projectpulse.com", "secret")
    """

    def __init__(self, repository: TrackingRepository):
        self.repository = repository

    async def authenticate(self, email: str, password: str) -> UserDB:
        """
        Verify credentials.

        Raises:
            AuthenticationError: Unknown email or wrong password
        """
        user = await self.repository.get_user_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Rejected login attempt")
            raise AuthenticationError("Invalid credentials")
        return user

    async def get_user(self, user_id: str) -> UserSummary:
        user = await self.repository.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return UserSummary.model_validate(user)

    async def list_users(self, role: Optional[UserRole] = None) -> List[UserResponse]:
        users = await self.repository.list_users(role.value if role else None)
        return [UserResponse.model_validate(user) for user in users]

    async def create_user(
        self,
        email: str,
        password: str,
        name: str,
        role: UserRole,
    ) -> UserDB:
        """Create an account; emails are stored lower-cased and must be unique."""
        email = email.strip().lower()
        if await self.repository.get_user_by_email(email) is not None:
            raise ValidationFailedError(f"Email already registered: {email}")

        user = await self.repository.add(UserDB(
            email=email,
            password_hash=hash_password(password),
            name=name,
            role=role.value,
        ))
        logger.info(f"Created {role.value} user {user.id}")
        return user
