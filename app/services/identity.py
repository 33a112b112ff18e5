"""
Identity Service

Registration, login, bearer-token verification, role authorization and
self-service profile updates.

Roles requested at registration are limited to student/faculty; anything
else (including staff/admin) is silently stored as student. Login failures
never reveal whether the email exists.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from typing import Any, Iterable, Optional

import jwt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.exceptions import BadRequest, Conflict, Forbidden, Unauthorized
from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from app.models import SELF_SERVICE_ROLES, User, UserRole

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def coerce_role(requested: Any) -> UserRole:
    """Map a requested role to one a user may self-assign."""
    for role in SELF_SERVICE_ROLES:
        if requested == role.value:
            return role
    return UserRole.STUDENT


def authorize(user: Optional[User], allowed_roles: Iterable[UserRole]) -> User:
    """
    Role check applied in front of every restricted operation.

    Raises:
        Unauthorized: No authenticated user
        Forbidden: The user's role is not in ``allowed_roles``
    """
    if user is None:
        raise Unauthorized()
    if user.role not in tuple(allowed_roles):
        raise Forbidden()
    return user


class IdentityService:
    """User accounts and credentials backed by the ``users`` table."""

    def __init__(self, session: AsyncSession, settings: Settings):
        self.session = session
        self.settings = settings

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        requested_role: Any = None,
    ) -> User:
        """
        Create a new account.

        Raises:
            BadRequest: Name, email or password missing
            Conflict: Email already registered
        """
        if not name or not email or not password:
            raise BadRequest("Name, email, and password are required")

        if await self.get_by_email(email) is not None:
            raise Conflict("Email already in use")

        role = coerce_role(requested_role)
        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=role,
        )
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            # Lost a race against another registration with the same email
            await self.session.rollback()
            raise Conflict("Email already in use")
        await self.session.refresh(user)

        if requested_role and requested_role != role.value:
            logger.info(f"Requested role '{requested_role}' replaced by '{role.value}' for user #{user.id}")
        logger.info(f"User #{user.id} registered as {role.value}")
        return user

    def issue_token(self, user: User) -> str:
        return create_access_token(
            {
                "id": user.id,
                "role": user.role.value,
                "name": user.name,
                "email": user.email,
            },
            self.settings,
        )

    async def login(self, email: str, password: str) -> tuple[str, User]:
        """
        Exchange credentials for a bearer token.

        Unknown email and wrong password fail identically.
        """
        if not email or not password:
            raise BadRequest("Email and password required")

        user = await self.get_by_email(email)
        if user is None or not verify_password(user.password_hash, password):
            raise Unauthorized(INVALID_CREDENTIALS)

        logger.info(f"User #{user.id} logged in")
        return self.issue_token(user), user

    async def authenticate(self, token: Optional[str]) -> User:
        """
        Resolve a bearer token to the current user row.

        The row is re-read on every call so name/role changes apply without
        a new login.
        """
        if not token:
            raise Unauthorized()

        try:
            payload = decode_access_token(token, self.settings)
        except jwt.PyJWTError as e:
            logger.debug(f"Rejected bearer token: {e}")
            raise Unauthorized()

        user_id = payload.get("id")
        if not isinstance(user_id, int):
            raise Unauthorized()

        user = await self.session.get(User, user_id)
        if user is None:
            raise Unauthorized()
        return user

    async def update_profile(
        self,
        user: User,
        name: str,
        email: str,
        phone: Optional[str] = None,
    ) -> User:
        """
        Update the caller's own name, email and phone.

        Raises:
            BadRequest: Empty name/email, or email owned by another user
        """
        if not name or not email:
            raise BadRequest("Name and email required")

        result = await self.session.execute(
            select(User.id).where(User.email == email, User.id != user.id)
        )
        if result.first() is not None:
            raise BadRequest("Email already in use")

        user.name = name
        user.email = email
        user.phone = phone or None
        await self.session.commit()
        await self.session.refresh(user)

        logger.info(f"User #{user.id} updated profile")
        return user
