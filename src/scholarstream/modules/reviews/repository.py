"""
Reviews Repository

Database operations for scholarship reviews.
"""

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Review


async def create(
    db: AsyncSession,
    *,
    scholarship_id: UUID,
    user_name: str | None,
    user_email: str,
    rating_point: int,
    review_comment: str | None,
) -> Review:
    review = Review(
        scholarship_id=scholarship_id,
        user_name=user_name,
        user_email=user_email,
        rating_point=rating_point,
        review_comment=review_comment,
    )

    db.add(review)
    await db.commit()
    await db.refresh(review)

    return review


async def get_by_id(db: AsyncSession, id: UUID) -> Review | None:
    return await db.get(Review, id)


async def list_reviews(
    db: AsyncSession,
    *,
    scholarship_id: UUID | None = None,
    user_email: str | None = None,
) -> list[Review]:
    """List reviews newest first, optionally for one scholarship and/or one author."""
    query = select(Review)

    if scholarship_id:
        query = query.where(Review.scholarship_id == scholarship_id)
    if user_email:
        query = query.where(Review.user_email == user_email)

    result = await db.execute(query.order_by(Review.review_date.desc()))
    return list(result.scalars().all())


async def delete_by_id(db: AsyncSession, id: UUID) -> bool:
    result = await db.execute(delete(Review).where(Review.id == id))
    await db.commit()
    return result.rowcount > 0
