"""
Authentication and Authorization Module

Provides authentication dependencies for FastAPI endpoints.
Identity is established by verifying the bearer ID token with the identity
provider (see security.py); the role is then resolved from the users table.

The gates compose in a fixed order: authentication first, role check second.
A missing or invalid token always yields 401 before any role is consulted.

SECURITY NOTE:
- Development mode auth bypass is ONLY enabled when PYTHON_ENV=development
- Production environments MUST set PYTHON_ENV=production to disable test tokens
"""

import logging
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from scholarstream.core.config import settings
from scholarstream.core.database import get_db
from scholarstream.core.exceptions import ForbiddenError, UnauthenticatedError
from scholarstream.core.security import verify_id_token
from scholarstream.modules.users.models import UserRole
from scholarstream.modules.users.service import resolve_role

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is reported as 401, not 403
security = HTTPBearer(
    auto_error=False,
    description="Identity provider ID token",
)

DEV_TOKEN_PREFIX = "dev:"


@dataclass
class Principal:
    """
    The authenticated identity behind a request.

    Attributes:
        email: Verified email address (lower case)
        role: Role resolved from the users table (Student if no record)
    """

    email: str
    role: UserRole

    @property
    def is_staff(self) -> bool:
        return self.role in (UserRole.MODERATOR, UserRole.ADMIN)

    def __str__(self) -> str:
        return f"Principal(email={self.email}, role={self.role.value})"


def _is_dev_mode_safe() -> bool:
    """
    Check if development token mode is safe to enable.

    Requires settings.is_development, not settings.is_production, and a
    PYTHON_ENV environment variable that is neither production nor staging.
    """
    env_var = os.getenv("PYTHON_ENV", "").lower()

    is_safe = (
        settings.is_development
        and not settings.is_production
        and env_var not in ("production", "staging")
    )

    if is_safe:
        logger.warning(
            "SECURITY: Development auth mode is ENABLED. This MUST NOT be used in production!"
        )

    return is_safe


_DEVELOPMENT_MODE = _is_dev_mode_safe()


async def _authenticate(token: str) -> str:
    """Verify a bearer token and return the principal's email."""
    if _DEVELOPMENT_MODE and token.startswith(DEV_TOKEN_PREFIX):
        email = token[len(DEV_TOKEN_PREFIX) :].strip().lower()
        if email:
            logger.debug("Development mode: accepted dev token")
            return email

    claims = await verify_id_token(token)
    return claims.email


async def get_current_email(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """
    FastAPI dependency that verifies the bearer token.

    Raises:
        UnauthenticatedError: If the header is missing or the token is invalid
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError()

    return await _authenticate(credentials.credentials)


async def get_current_principal(
    email: str = Depends(get_current_email),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """FastAPI dependency returning the authenticated principal with its role."""
    role = await resolve_role(db, email)
    return Principal(email=email, role=role)


def require_role(*roles: UserRole) -> Callable[..., Awaitable[Principal]]:
    """
    Build a dependency that only admits principals holding one of ``roles``.

    Usage:
        @router.get("/users")
        async def list_users(admin: Principal = Depends(require_admin)):
            ...

    Raises:
        UnauthenticatedError: If the token is missing or invalid
        ForbiddenError: If the principal's role is not allowed
    """
    allowed = frozenset(roles)

    async def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in allowed:
            logger.warning(
                f"Access denied: {principal.email} has role '{principal.role.value}', "
                f"required one of {sorted(r.value for r in allowed)}"
            )
            raise ForbiddenError()
        return principal

    return dependency


require_admin = require_role(UserRole.ADMIN)
require_moderator = require_role(UserRole.MODERATOR, UserRole.ADMIN)


__all__ = [
    "Principal",
    "get_current_email",
    "get_current_principal",
    "require_role",
    "require_admin",
    "require_moderator",
]
