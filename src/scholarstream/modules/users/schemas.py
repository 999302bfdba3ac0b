"""User schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from scholarstream.modules.shared import CamelSchema
from scholarstream.modules.users.models import UserRole


class UserCreate(CamelSchema):
    """Request body for POST /users."""

    email: EmailStr
    display_name: str | None = Field(None, max_length=200)
    photo_url: str | None = Field(None, max_length=1000)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class UserResponse(CamelSchema):
    id: UUID
    email: str
    display_name: str | None = None
    photo_url: str | None = None
    role: UserRole
    created_at: datetime


class UserRegisterResponse(CamelSchema):
    """Registration is idempotent; ``created`` is False when the email already existed."""

    created: bool
    message: str
    user: UserResponse


class UserListResponse(CamelSchema):
    users: list[UserResponse]
    total: int
    skip: int
    limit: int


class RoleResponse(CamelSchema):
    role: UserRole


class RoleUpdateRequest(CamelSchema):
    role: UserRole


class DeleteResponse(CamelSchema):
    success: bool
