"""
User Models

Platform users. Identity is owned by the external identity provider; this
table only records the profile and the role used for authorization.
"""

from enum import Enum

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import ENUM
from sqlalchemy.orm import Mapped, mapped_column

from scholarstream.modules.shared import BaseModel


class UserRole(str, Enum):
    """User roles in the system."""

    STUDENT = "Student"
    MODERATOR = "Moderator"
    ADMIN = "Admin"

    @classmethod
    def _missing_(cls, value: object) -> "UserRole | None":
        # Accept "admin", "ADMIN", " Admin " etc.
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value.lower() == normalized:
                    return member
        return None


class User(BaseModel):
    """
    User profile and role.

    Created on first registration with role Student. Only an Admin can change
    a role afterwards.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    display_name: Mapped[str | None] = mapped_column(
        String(200),
        nullable=True,
    )
    photo_url: Mapped[str | None] = mapped_column(
        String(1000),
        nullable=True,
    )
    role: Mapped[UserRole] = mapped_column(
        ENUM(
            UserRole,
            name="user_role",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=UserRole.STUDENT,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role.value})>"
