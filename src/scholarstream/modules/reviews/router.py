"""
Reviews Router

Endpoints:
- GET /reviews?scholarshipId=... - Reviews for a scholarship (public)
- GET /reviews/mine - The principal's own reviews
- POST /reviews - Create review (authenticated, registered users)
- DELETE /reviews/{id} - Delete review (author or Moderator/Admin)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from scholarstream.core.auth import Principal, get_current_principal
from scholarstream.core.database import get_db
from scholarstream.modules.reviews import service
from scholarstream.modules.reviews.schemas import (
    ReviewCreate,
    ReviewDeleteResponse,
    ReviewResponse,
)

router = APIRouter()


@router.get("", response_model=list[ReviewResponse], summary="List Reviews")
async def list_reviews(
    scholarship_id: UUID | None = Query(None, alias="scholarshipId"),
    db: AsyncSession = Depends(get_db),
) -> list[ReviewResponse]:
    reviews = await service.list_reviews(db, scholarship_id=scholarship_id)
    return [ReviewResponse.model_validate(review) for review in reviews]


@router.get("/mine", response_model=list[ReviewResponse], summary="List My Reviews")
async def list_my_reviews(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> list[ReviewResponse]:
    reviews = await service.list_reviews(db, user_email=principal.email)
    return [ReviewResponse.model_validate(review) for review in reviews]


@router.post(
    "",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Review",
)
async def create_review(
    data: ReviewCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ReviewResponse:
    return ReviewResponse.model_validate(await service.create_review(db, principal, data))


@router.delete("/{review_id}", response_model=ReviewDeleteResponse, summary="Delete Review")
async def delete_review(
    review_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ReviewDeleteResponse:
    await service.delete_review(db, principal, review_id)
    return ReviewDeleteResponse()
