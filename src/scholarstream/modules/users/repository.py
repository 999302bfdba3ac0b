"""
User Repository

Database operations for user management.
"""

import logging
from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from scholarstream.modules.shared import LIKE_ESCAPE, escape_like
from scholarstream.modules.users.models import User, UserRole

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create_if_absent(
        db: AsyncSession,
        *,
        email: str,
        display_name: str | None = None,
        photo_url: str | None = None,
        role: UserRole = UserRole.STUDENT,
    ) -> tuple[User, bool]:
        """
        Insert a user unless the email is already registered.

        Uses INSERT ... ON CONFLICT DO NOTHING so concurrent registrations of
        the same email never fail.

        Returns:
            Tuple of (user, created)
        """
        stmt = (
            insert(User)
            .values(email=email, display_name=display_name, photo_url=photo_url, role=role)
            .on_conflict_do_nothing(index_elements=[User.email])
            .returning(User.id)
        )
        result = await db.execute(stmt)
        inserted_id = result.scalar_one_or_none()
        await db.commit()

        user = await UserRepository.get_by_email(db, email)
        created = inserted_id is not None
        if created:
            logger.info(f"Created user: {inserted_id} - {email}")
        return user, created

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: UUID) -> User | None:
        return await db.get(User, user_id)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """
        Get a user by email address.

        Args:
            db: Database session
            email: Email address (already normalized to lower case)

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def list_users(
        db: AsyncSession,
        *,
        search: str | None = None,
        role: UserRole | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[User], int]:
        """
        List users newest first, optionally filtered.

        ``search`` is a case-insensitive substring match on display name or email.

        Returns:
            Tuple of (users, total matching count)
        """
        query = select(User)

        if search:
            pattern = f"%{escape_like(search)}%"
            query = query.where(
                or_(
                    User.display_name.ilike(pattern, escape=LIKE_ESCAPE),
                    User.email.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        if role:
            query = query.where(User.role == role)

        total_result = await db.execute(select(func.count()).select_from(query.subquery()))
        total = total_result.scalar() or 0

        query = query.order_by(User.created_at.desc()).offset(skip).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all()), total

    @staticmethod
    async def update_role(db: AsyncSession, user: User, role: UserRole) -> User:
        user.role = role
        await db.commit()
        await db.refresh(user)

        logger.info(f"Updated user {user.id} role to {role.value}")
        return user

    @staticmethod
    async def delete(db: AsyncSession, user_id: UUID) -> bool:
        """Hard-delete a user. Returns True if a row was removed."""
        result = await db.execute(delete(User).where(User.id == user_id))
        await db.commit()
        return result.rowcount > 0
