"""
Scholarship Models

Scholarships offered on the platform. Fees are stored as fixed-point
numbers in major currency units; dates are stored as DATE values.
"""

from datetime import date

from sqlalchemy import Date, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from scholarstream.modules.shared import BaseModel


class Scholarship(BaseModel):
    """A scholarship listing created by an Admin."""

    __tablename__ = "scholarships"

    scholarship_name: Mapped[str] = mapped_column(String(200), nullable=False)

    # University
    university_name: Mapped[str] = mapped_column(String(200), nullable=False)
    university_image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    university_country: Mapped[str] = mapped_column(String(100), nullable=False)
    university_city: Mapped[str] = mapped_column(String(100), nullable=False)
    university_world_rank: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Classification
    subject_category: Mapped[str] = mapped_column(String(100), nullable=False)
    scholarship_category: Mapped[str] = mapped_column(String(100), nullable=False)
    degree: Mapped[str] = mapped_column(String(50), nullable=False)

    # Fees
    tuition_fees: Mapped[float] = mapped_column(
        Numeric(12, 2, asdecimal=False), nullable=False, default=0
    )
    application_fees: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    service_charge: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)

    # Dates
    application_deadline: Mapped[date] = mapped_column(Date, nullable=False)
    scholarship_post_date: Mapped[date] = mapped_column(Date, nullable=False)

    owner_email: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (
        Index("ix_scholarships_university_country", "university_country"),
        Index("ix_scholarships_application_deadline", "application_deadline"),
    )

    def __repr__(self) -> str:
        return f"<Scholarship(id={self.id}, name={self.scholarship_name})>"
