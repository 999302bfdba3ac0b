"""
Users Service Layer

Registration, role resolution and admin user management.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from scholarstream.core.exceptions import ConflictError, NotFoundError
from scholarstream.modules.users.models import User, UserRole
from scholarstream.modules.users.repository import UserRepository
from scholarstream.modules.users.schemas import UserCreate

logger = logging.getLogger(__name__)


class UserNotFoundError(NotFoundError):
    entity = "User"


async def register_user(db: AsyncSession, data: UserCreate) -> tuple[User, bool]:
    """
    Register a user with role Student.

    Idempotent: re-registering an existing email returns the stored record
    untouched (its role is never reset).

    Returns:
        Tuple of (user, created)
    """
    user, created = await UserRepository.create_if_absent(
        db,
        email=data.email,
        display_name=data.display_name,
        photo_url=data.photo_url,
        role=UserRole.STUDENT,
    )
    if not created:
        logger.debug(f"Registration for existing user {data.email} ignored")
    return user, created


async def resolve_role(db: AsyncSession, email: str) -> UserRole:
    """
    Look up the role for an email.

    Emails without a user record resolve to Student; this never raises for a
    missing user.
    """
    user = await UserRepository.get_by_email(db, email.strip().lower())
    if user is None:
        return UserRole.STUDENT
    return user.role


async def get_user_by_email(db: AsyncSession, email: str) -> User:
    user = await UserRepository.get_by_email(db, email.strip().lower())
    if user is None:
        raise UserNotFoundError(email)
    return user


async def list_users(
    db: AsyncSession,
    *,
    search: str | None = None,
    role: UserRole | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[User], int]:
    return await UserRepository.list_users(db, search=search, role=role, skip=skip, limit=limit)


async def update_role(
    db: AsyncSession,
    user_id: UUID,
    role: UserRole,
    acting_email: str,
) -> User:
    """
    Change a user's role (Admin only).

    Raises:
        UserNotFoundError: If the user doesn't exist
        ConflictError: If an admin tries to demote their own account
    """
    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise UserNotFoundError(user_id)

    if user.email == acting_email and role != UserRole.ADMIN:
        raise ConflictError("Admins cannot remove their own admin role.", "SELF_DEMOTION")

    logger.info(f"Admin {acting_email} changing role of {user.email}: {user.role.value} -> {role.value}")
    return await UserRepository.update_role(db, user, role)


async def delete_user(db: AsyncSession, user_id: UUID, acting_email: str) -> bool:
    """
    Hard-delete a user (Admin only).

    Raises:
        UserNotFoundError: If the user doesn't exist
        ConflictError: If an admin tries to delete their own account
    """
    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise UserNotFoundError(user_id)

    if user.email == acting_email:
        raise ConflictError("Admins cannot delete their own account.", "SELF_DELETION")

    deleted = await UserRepository.delete(db, user_id)
    logger.info(f"Admin {acting_email} deleted user {user.email}")
    return deleted
