"""
Scholarships Service Layer

Validation and orchestration around scholarship CRUD.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from scholarstream.core.exceptions import InvalidRequestError, NotFoundError
from scholarstream.modules.scholarships import repository
from scholarstream.modules.scholarships.models import Scholarship
from scholarstream.modules.scholarships.schemas import ScholarshipCreate, ScholarshipUpdate

logger = logging.getLogger(__name__)


class ScholarshipNotFoundError(NotFoundError):
    entity = "Scholarship"


def _create_values(data: ScholarshipCreate, acting_email: str) -> dict:
    values = data.model_dump(exclude={"owner_email"})
    values["owner_email"] = (data.owner_email or acting_email).lower()
    return values


async def create_scholarship(
    db: AsyncSession,
    data: ScholarshipCreate,
    acting_email: str,
) -> Scholarship:
    scholarship = await repository.create(db, _create_values(data, acting_email))
    logger.info(f"Admin {acting_email} created scholarship {scholarship.id}")
    return scholarship


async def get_scholarship(db: AsyncSession, scholarship_id: UUID) -> Scholarship:
    scholarship = await repository.get_by_id(db, scholarship_id)
    if scholarship is None:
        raise ScholarshipNotFoundError(scholarship_id)
    return scholarship


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
    page: int | None = None,
    limit: int | None = None,
) -> dict:
    """
    List scholarships.

    Pagination is optional: when either ``page`` or ``limit`` is given the
    missing one defaults (page 1, limit 10); otherwise every match is returned.
    """
    skip = None
    if page is not None or limit is not None:
        page = page or 1
        limit = limit or 10
        skip = (page - 1) * limit

    items, total = await repository.list_scholarships(
        db,
        search=search,
        country=country,
        degree=degree,
        subject_category=subject_category,
        scholarship_category=scholarship_category,
        sort_by=sort_by,
        sort_order=sort_order,
        skip=skip,
        limit=limit,
    )
    return {"items": items, "total": total, "page": page, "limit": limit}


async def update_scholarship(
    db: AsyncSession,
    scholarship_id: UUID,
    data: ScholarshipUpdate,
) -> Scholarship:
    """
    Partially update a scholarship (merge semantics).

    Raises:
        ScholarshipNotFoundError: If the scholarship doesn't exist
        InvalidRequestError: If nothing to update or the resulting dates are inconsistent
    """
    values = data.model_dump(exclude_unset=True)
    if not values:
        raise InvalidRequestError("No fields to update")

    scholarship = await get_scholarship(db, scholarship_id)

    deadline = values.get("application_deadline", scholarship.application_deadline)
    post_date = values.get("scholarship_post_date", scholarship.scholarship_post_date)
    if deadline < post_date:
        raise InvalidRequestError("applicationDeadline cannot be earlier than scholarshipPostDate")

    return await repository.update(db, scholarship, values)


async def replace_scholarship(
    db: AsyncSession,
    scholarship_id: UUID,
    data: ScholarshipCreate,
    acting_email: str,
) -> Scholarship:
    """Replace every field of a scholarship (PUT semantics); the owner is kept unless given."""
    scholarship = await get_scholarship(db, scholarship_id)
    updated = await repository.update(db, scholarship, _create_values(data, scholarship.owner_email))
    logger.info(f"Admin {acting_email} replaced scholarship {scholarship_id}")
    return updated


async def delete_scholarship(db: AsyncSession, scholarship_id: UUID, acting_email: str) -> None:
    deleted = await repository.delete_by_id(db, scholarship_id)
    if not deleted:
        raise ScholarshipNotFoundError(scholarship_id)
    logger.info(f"Admin {acting_email} deleted scholarship {scholarship_id}")
