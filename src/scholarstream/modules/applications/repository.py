"""
Applications Repository

Database operations for scholarship applications. Only data access lives
here; ownership checks, state rules and notifications belong to the service.

Payment transitions are conditional UPDATEs so concurrent confirmations
(webhook and polling) change a row at most once.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy import update as sa_update
from sqlalchemy.ext.asyncio import AsyncSession

from scholarstream.modules.shared import LIKE_ESCAPE, escape_like

from .models import Application, ApplicationStatus, PaymentStatus


async def create(db: AsyncSession, values: dict[str, Any]) -> Application:
    """
    Insert an application.

    Raises:
        IntegrityError: If the (scholarship, student email) pair already exists
    """
    application = Application(**values)

    db.add(application)
    await db.commit()
    await db.refresh(application)

    return application


async def get_by_id(db: AsyncSession, id: UUID) -> Application | None:
    """Get application by ID."""
    return await db.get(Application, id)


async def get_by_scholarship_and_email(
    db: AsyncSession, scholarship_id: UUID, student_email: str
) -> Application | None:
    result = await db.execute(
        select(Application).where(
            Application.scholarship_id == scholarship_id,
            Application.student_email == student_email,
        )
    )
    return result.scalar_one_or_none()


async def list_by_student_email(db: AsyncSession, student_email: str) -> list[Application]:
    """All applications of one student, newest first."""
    result = await db.execute(
        select(Application)
        .where(Application.student_email == student_email)
        .order_by(Application.application_date.desc())
    )
    return list(result.scalars().all())


async def list_applications(
    db: AsyncSession,
    *,
    status: ApplicationStatus | None = None,
    payment_status: PaymentStatus | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Application], int]:
    """
    List applications with optional filtering.

    ``search`` matches student email, student name, scholarship name or
    university name (case-insensitive).

    Returns:
        Tuple of (applications, total count matching filters)
    """
    query = select(Application)

    if status:
        query = query.where(Application.application_status == status)
    if payment_status:
        query = query.where(Application.payment_status == payment_status)
    if search:
        pattern = f"%{escape_like(search)}%"
        query = query.where(
            or_(
                Application.student_email.ilike(pattern, escape=LIKE_ESCAPE),
                Application.student_name.ilike(pattern, escape=LIKE_ESCAPE),
                Application.scholarship_name.ilike(pattern, escape=LIKE_ESCAPE),
                Application.university_name.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )

    total_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = total_result.scalar() or 0

    query = query.order_by(Application.application_date.desc()).offset(skip).limit(limit)
    result = await db.execute(query)

    return list(result.scalars().all()), total


async def update(db: AsyncSession, application: Application, values: dict[str, Any]) -> Application:
    """Apply ``values`` to the application; columns not present are left untouched."""
    for key, value in values.items():
        setattr(application, key, value)

    await db.commit()
    await db.refresh(application)

    return application


async def mark_paid(db: AsyncSession, id: UUID, paid_at: datetime) -> bool:
    """
    Mark an application paid and completed unless it already is paid.

    Returns:
        True if this call performed the transition
    """
    result = await db.execute(
        sa_update(Application)
        .where(Application.id == id, Application.payment_status != PaymentStatus.PAID)
        .values(
            payment_status=PaymentStatus.PAID,
            application_status=ApplicationStatus.COMPLETED,
            paid_at=paid_at,
        )
    )
    await db.commit()
    return result.rowcount > 0


async def mark_unpaid(db: AsyncSession, id: UUID) -> bool:
    """
    Return an unpaid or pending-payment application to unpaid/pending.

    Paid and rejected applications are never touched.

    Returns:
        True if a row was updated
    """
    result = await db.execute(
        sa_update(Application)
        .where(
            Application.id == id,
            Application.payment_status != PaymentStatus.PAID,
            Application.application_status != ApplicationStatus.REJECTED,
        )
        .values(
            payment_status=PaymentStatus.UNPAID,
            application_status=ApplicationStatus.PENDING,
            checkout_started_at=None,
        )
    )
    await db.commit()
    return result.rowcount > 0


async def release_stale_checkouts(db: AsyncSession, started_before: datetime) -> int:
    """
    Reset payment status of checkouts started before ``started_before``.

    Returns:
        Number of applications released
    """
    result = await db.execute(
        sa_update(Application)
        .where(
            Application.payment_status == PaymentStatus.PENDING,
            Application.checkout_started_at < started_before,
        )
        .values(payment_status=PaymentStatus.UNPAID, checkout_started_at=None)
    )
    await db.commit()
    return result.rowcount
