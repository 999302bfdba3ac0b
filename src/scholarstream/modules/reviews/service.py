"""
Reviews Service Layer
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from scholarstream.core.auth import Principal
from scholarstream.core.exceptions import ForbiddenError, NotFoundError
from scholarstream.modules.reviews import repository
from scholarstream.modules.reviews.models import Review
from scholarstream.modules.reviews.schemas import ReviewCreate
from scholarstream.modules.users.repository import UserRepository
from scholarstream.modules.users.service import UserNotFoundError

logger = logging.getLogger(__name__)


class ReviewNotFoundError(NotFoundError):
    entity = "Review"


async def list_reviews(
    db: AsyncSession,
    scholarship_id: UUID | None = None,
    user_email: str | None = None,
) -> list[Review]:
    return await repository.list_reviews(db, scholarship_id=scholarship_id, user_email=user_email)


async def create_review(db: AsyncSession, author: Principal, data: ReviewCreate) -> Review:
    """
    Create a review authored by the principal.

    Name and email are copied from the author's user record.

    Raises:
        UserNotFoundError: If the principal has never registered
    """
    user = await UserRepository.get_by_email(db, author.email)
    if user is None:
        raise UserNotFoundError(author.email)

    review = await repository.create(
        db,
        scholarship_id=data.scholarship_id,
        user_name=user.display_name,
        user_email=user.email,
        rating_point=data.rating_point,
        review_comment=data.review_comment,
    )
    logger.info(f"Review {review.id} created by {user.email} for scholarship {data.scholarship_id}")
    return review


async def delete_review(db: AsyncSession, actor: Principal, review_id: UUID) -> None:
    """
    Delete a review. Allowed for its author and for Moderators/Admins.

    Raises:
        ReviewNotFoundError: If the review doesn't exist
        ForbiddenError: If the principal is neither author nor staff
    """
    review = await repository.get_by_id(db, review_id)
    if review is None:
        raise ReviewNotFoundError(review_id)

    if review.user_email != actor.email and not actor.is_staff:
        logger.warning(f"{actor.email} attempted to delete review {review_id} they do not own")
        raise ForbiddenError("You can only delete your own reviews.")

    await repository.delete_by_id(db, review_id)
    logger.info(f"Review {review_id} deleted by {actor.email}")
