"""
Scholarships Repository

Database operations for scholarship listings.
"""

from typing import Any
from uuid import UUID

from sqlalchemy import asc, delete, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from scholarstream.modules.shared import LIKE_ESCAPE, escape_like

from .models import Scholarship

SORTABLE_COLUMNS = {"scholarship_post_date", "application_deadline", "application_fees", "created_at"}


async def create(db: AsyncSession, values: dict[str, Any]) -> Scholarship:
    """Insert a scholarship from already-validated column values."""
    scholarship = Scholarship(**values)

    db.add(scholarship)
    await db.commit()
    await db.refresh(scholarship)

    return scholarship


async def get_by_id(db: AsyncSession, id: UUID) -> Scholarship | None:
    """Get scholarship by ID."""
    return await db.get(Scholarship, id)


async def list_scholarships(
    db: AsyncSession,
    *,
    search: str | None = None,
    country: str | None = None,
    degree: str | None = None,
    subject_category: str | None = None,
    scholarship_category: str | None = None,
    sort_by: str = "scholarship_post_date",
    sort_order: str = "desc",
    skip: int | None = None,
    limit: int | None = None,
) -> tuple[list[Scholarship], int]:
    """
    List scholarships with optional filters, sorting and pagination.

    ``search`` matches scholarship name, university name or degree
    (case-insensitive). When ``skip``/``limit`` are None all rows are returned.

    Returns:
        Tuple of (scholarships, total count matching filters)
    """
    query = select(Scholarship)

    if search:
        pattern = f"%{escape_like(search)}%"
        query = query.where(
            or_(
                Scholarship.scholarship_name.ilike(pattern, escape=LIKE_ESCAPE),
                Scholarship.university_name.ilike(pattern, escape=LIKE_ESCAPE),
                Scholarship.degree.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )

    # Exact, case-insensitive matches on the categorical filters
    exact_filters = (
        (Scholarship.university_country, country),
        (Scholarship.degree, degree),
        (Scholarship.subject_category, subject_category),
        (Scholarship.scholarship_category, scholarship_category),
    )
    for column, value in exact_filters:
        if value:
            query = query.where(column.ilike(escape_like(value), escape=LIKE_ESCAPE))

    total_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = total_result.scalar() or 0

    if sort_by not in SORTABLE_COLUMNS:
        sort_by = "scholarship_post_date"
    sort_column = getattr(Scholarship, sort_by)
    query = query.order_by(desc(sort_column) if sort_order.lower() == "desc" else asc(sort_column))

    if skip is not None:
        query = query.offset(skip)
    if limit is not None:
        query = query.limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all()), total


async def update(db: AsyncSession, scholarship: Scholarship, values: dict[str, Any]) -> Scholarship:
    """Apply ``values`` to the scholarship; columns not present are left untouched."""
    for key, value in values.items():
        if hasattr(scholarship, key):
            setattr(scholarship, key, value)

    await db.commit()
    await db.refresh(scholarship)

    return scholarship


async def delete_by_id(db: AsyncSession, id: UUID) -> bool:
    result = await db.execute(delete(Scholarship).where(Scholarship.id == id))
    await db.commit()
    return result.rowcount > 0
