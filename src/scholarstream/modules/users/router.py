"""
Users Router

Endpoints:
- POST /users - Register (idempotent, role Student)
- GET /users - List/search users (Admin)
- GET /users/{email}/role - Role lookup, Student when unknown (authenticated)
- PATCH /users/{id}/role - Change role (Admin)
- DELETE /users/{id} - Hard delete (Admin)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from scholarstream.core.auth import Principal, get_current_email, require_admin
from scholarstream.core.database import get_db
from scholarstream.modules.users import service
from scholarstream.modules.users.models import UserRole
from scholarstream.modules.users.schemas import (
    DeleteResponse,
    RoleResponse,
    RoleUpdateRequest,
    UserCreate,
    UserListResponse,
    UserRegisterResponse,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=UserRegisterResponse,
    summary="Register User",
)
async def register_user(
    data: UserCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> UserRegisterResponse:
    """
    Register a user on first sign-in.

    Returns 201 when the user was created and 200 when the email already
    existed (the existing record is returned unchanged).
    """
    user, created = await service.register_user(db, data)

    if created:
        response.status_code = status.HTTP_201_CREATED

    return UserRegisterResponse(
        created=created,
        message="User created" if created else "user exists",
        user=UserResponse.model_validate(user),
    )


@router.get("", response_model=UserListResponse, summary="List Users")
async def list_users(
    search_text: str | None = Query(
        None, alias="searchText", max_length=100, description="Match display name or email"
    ),
    role: UserRole | None = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_admin),
) -> UserListResponse:
    users, total = await service.list_users(
        db, search=search_text, role=role, skip=skip, limit=limit
    )
    logger.info(f"Admin {admin.email} listed users: total={total}, returned={len(users)}")

    return UserListResponse(
        users=[UserResponse.model_validate(user) for user in users],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.get("/{email}/role", response_model=RoleResponse, summary="Get User Role")
async def get_user_role(
    email: str,
    db: AsyncSession = Depends(get_db),
    _caller: str = Depends(get_current_email),
) -> RoleResponse:
    """Return the user's role; unknown emails resolve to Student."""
    return RoleResponse(role=await service.resolve_role(db, email))


@router.patch("/{user_id}/role", response_model=UserResponse, summary="Update User Role")
async def update_user_role(
    user_id: UUID,
    data: RoleUpdateRequest,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_admin),
) -> UserResponse:
    user = await service.update_role(db, user_id, data.role, acting_email=admin.email)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=DeleteResponse, summary="Delete User")
async def delete_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_admin),
) -> DeleteResponse:
    deleted = await service.delete_user(db, user_id, acting_email=admin.email)
    return DeleteResponse(success=deleted)
