"""
Review Models

Student reviews of scholarships. ``scholarship_id`` is a plain reference;
reviews outlive the scholarship they describe.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from scholarstream.modules.shared import BaseModel


class Review(BaseModel):
    """A rating and comment left by a registered user."""

    __tablename__ = "reviews"

    scholarship_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)

    # Denormalized from the author's user record at creation time
    user_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    user_email: Mapped[str] = mapped_column(String(255), nullable=False)

    rating_point: Mapped[int] = mapped_column(Integer, nullable=False)
    review_comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    review_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("ix_reviews_scholarship_id", "scholarship_id"),
        Index("ix_reviews_user_email", "user_email"),
    )
