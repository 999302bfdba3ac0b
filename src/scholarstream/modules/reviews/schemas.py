"""Review schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from scholarstream.modules.shared import CamelSchema

MIN_RATING = 1
MAX_RATING = 5


class ReviewCreate(CamelSchema):
    """Request body for POST /reviews. The author is always the authenticated user."""

    scholarship_id: UUID
    rating_point: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    review_comment: str | None = Field(None, max_length=2000)


class ReviewResponse(CamelSchema):
    id: UUID
    scholarship_id: UUID
    user_name: str | None = None
    user_email: str
    rating_point: int
    review_comment: str | None = None
    review_date: datetime


class ReviewDeleteResponse(CamelSchema):
    success: bool = True
