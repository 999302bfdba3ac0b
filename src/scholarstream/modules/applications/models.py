"""
Application Models

Student applications to scholarships. Each application keeps a snapshot of
the scholarship fields it was created against (fees, category, degree);
later edits to the scholarship do not change existing applications.
"""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Index, Numeric, String, Text, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import ENUM, UUID
from sqlalchemy.orm import Mapped, mapped_column

from scholarstream.modules.shared import BaseModel


class ApplicationStatus(str, Enum):
    """Review status of an application."""

    PENDING = "pending"
    COMPLETED = "completed"
    REJECTED = "rejected"


class PaymentStatus(str, Enum):
    """Application fee payment status."""

    UNPAID = "unpaid"
    PENDING = "pending"  # Checkout session started, not yet confirmed
    PAID = "paid"


def _enum_values(enum: type[Enum]) -> list[str]:
    return [member.value for member in enum]


class Application(BaseModel):
    """
    A student's application to one scholarship.

    At most one application exists per (scholarship, student email); the
    database enforces this with ``uq_applications_scholarship_student``.
    """

    __tablename__ = "applications"

    # References (not enforced: applications outlive deleted scholarships/users)
    scholarship_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    user_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)

    # Applicant
    student_email: Mapped[str] = mapped_column(String(255), nullable=False)
    student_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    # Scholarship snapshot
    scholarship_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    university_name: Mapped[str] = mapped_column(String(200), nullable=False)
    scholarship_category: Mapped[str] = mapped_column(String(100), nullable=False)
    degree: Mapped[str] = mapped_column(String(50), nullable=False)
    application_fees: Mapped[float] = mapped_column(
        Numeric(12, 2, asdecimal=False), nullable=False, default=0
    )
    service_charge: Mapped[float] = mapped_column(
        Numeric(12, 2, asdecimal=False), nullable=False, default=0
    )

    # Status tracking
    application_status: Mapped[ApplicationStatus] = mapped_column(
        ENUM(ApplicationStatus, name="application_status", values_callable=_enum_values),
        nullable=False,
        default=ApplicationStatus.PENDING,
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        ENUM(PaymentStatus, name="payment_status", values_callable=_enum_values),
        nullable=False,
        default=PaymentStatus.UNPAID,
    )
    application_feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    application_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Checkout tracking
    checkout_session_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    checkout_started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "scholarship_id",
            "student_email",
            name="uq_applications_scholarship_student",
        ),
        Index("ix_applications_student_email", "student_email"),
        Index("ix_applications_application_status", "application_status"),
        Index("ix_applications_payment_status", "payment_status"),
    )

    @property
    def amount_due(self) -> float:
        """Fee charged at checkout, in major currency units."""
        return (self.application_fees or 0) + (self.service_charge or 0)

    def __repr__(self) -> str:
        return (
            f"<Application(id={self.id}, scholarship_id={self.scholarship_id}, "
            f"student_email={self.student_email}, status={self.application_status.value})>"
        )
