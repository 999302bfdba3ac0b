"""
Applications Service Layer

Business logic for the scholarship application lifecycle.

1. Submission:
   - Students apply only for themselves; staff may apply on a student's behalf
   - Only an Admin may record an application that is already paid
   - Scholarship fields are snapshotted onto the application
   - One application per (scholarship, student email), enforced by the database

2. Review:
   - Moderators/Admins set status (pending, completed, rejected) and feedback
   - Status changes are emailed to the student
   - A student "deleting" an application soft-cancels it to rejected

3. Payment:
   - start_checkout creates a provider checkout session for the recorded fee
   - verify_checkout asks the provider whether the session was paid
   - confirm_payment is idempotent and emails a receipt only once
   - cancel_payment never downgrades a paid application

Client redirect parameters are never trusted as proof of payment; confirmation
comes from the signed webhook or from retrieving the session server-side.
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from scholarstream.core import payments
from scholarstream.core.auth import Principal
from scholarstream.core.email import send_application_status_update, send_payment_receipt
from scholarstream.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidRequestError,
    NotFoundError,
)
from scholarstream.modules.applications import repository
from scholarstream.modules.applications.models import (
    Application,
    ApplicationStatus,
    PaymentStatus,
)
from scholarstream.modules.applications.schemas import ApplicationCreate
from scholarstream.modules.scholarships import repository as scholarship_repository
from scholarstream.modules.scholarships.service import ScholarshipNotFoundError
from scholarstream.modules.users.models import UserRole
from scholarstream.modules.users.repository import UserRepository
from scholarstream.modules.users.service import UserNotFoundError

logger = logging.getLogger(__name__)


class ApplicationNotFoundError(NotFoundError):
    entity = "Application"


class DuplicateApplicationError(ConflictError):
    """Raised when the student already applied to the scholarship."""

    def __init__(self):
        super().__init__("Already applied", "DUPLICATE_APPLICATION")


class InvalidApplicationStateError(ConflictError):
    """Raised when an application is not in the expected state for an operation."""

    def __init__(self, message: str, expected_state: str | None = None):
        detail = message
        if expected_state:
            detail = f"{message} Expected state: {expected_state}"
        super().__init__(detail, "INVALID_APPLICATION_STATE")


class ApplicationAlreadyPaidError(InvalidApplicationStateError):
    """Raised when an operation would reopen or repeat a confirmed payment."""

    def __init__(self, application_id: UUID):
        super().__init__(
            f"Application {application_id} has already been paid.",
            expected_state="unpaid or pending payment",
        )


class ApplicationRejectedError(InvalidApplicationStateError):
    """Raised when a payment operation targets a rejected or cancelled application."""

    def __init__(self, application_id: UUID):
        super().__init__(
            f"Application {application_id} was rejected or cancelled.",
            expected_state="pending",
        )


def _ensure_owner_or_staff(actor: Principal, application: Application) -> None:
    if application.student_email != actor.email and not actor.is_staff:
        logger.warning(f"{actor.email} denied access to application {application.id}")
        raise ForbiddenError("You can only access your own applications.")


# =============================================================================
# Submission
# =============================================================================


async def submit_application(
    db: AsyncSession,
    actor: Principal,
    data: ApplicationCreate,
) -> Application:
    """
    Create an application for a scholarship.

    Flow:
    1. Check the actor may apply for this email and payment status
    2. Look up the student's user record and the scholarship
    3. Reject a duplicate (scholarship, email) pair
    4. Insert the application with a snapshot of the scholarship fields

    Raises:
        ForbiddenError: Student applying for someone else, or non-Admin creating a paid record
        InvalidRequestError: If payment status is "pending"
        UserNotFoundError: If the student has no user record
        ScholarshipNotFoundError: If the scholarship doesn't exist
        DuplicateApplicationError: If the student already applied
    """
    email = data.student_email

    if actor.role == UserRole.STUDENT and email != actor.email:
        logger.warning(f"Student {actor.email} attempted to apply as {email}")
        raise ForbiddenError("Students can only apply for themselves.")

    if data.payment_status == PaymentStatus.PENDING:
        raise InvalidRequestError("paymentStatus must be 'unpaid' or 'paid'")

    if data.payment_status == PaymentStatus.PAID and actor.role != UserRole.ADMIN:
        logger.warning(f"{actor.email} attempted to create a paid application")
        raise ForbiddenError("Only an Admin can record a paid application.")

    user = await UserRepository.get_by_email(db, email)
    if user is None:
        raise UserNotFoundError(email)

    scholarship = await scholarship_repository.get_by_id(db, data.scholarship_id)
    if scholarship is None:
        raise ScholarshipNotFoundError(data.scholarship_id)

    # Fast path; the unique constraint below is the actual guarantee
    existing = await repository.get_by_scholarship_and_email(db, data.scholarship_id, email)
    if existing is not None:
        raise DuplicateApplicationError()

    paid = data.payment_status == PaymentStatus.PAID
    values = {
        "scholarship_id": scholarship.id,
        "user_id": user.id,
        "student_email": email,
        "student_name": user.display_name,
        "scholarship_name": scholarship.scholarship_name,
        "university_name": scholarship.university_name,
        "scholarship_category": scholarship.scholarship_category,
        "degree": scholarship.degree,
        "application_fees": scholarship.application_fees,
        "service_charge": 0,
        "application_status": ApplicationStatus.COMPLETED if paid else ApplicationStatus.PENDING,
        "payment_status": data.payment_status,
        "paid_at": datetime.now(UTC) if paid else None,
    }

    try:
        application = await repository.create(db, values)
    except IntegrityError as e:
        await db.rollback()
        logger.info(f"Concurrent duplicate application for {email} on {data.scholarship_id}")
        raise DuplicateApplicationError() from e

    logger.info(
        f"Application {application.id} submitted for scholarship {scholarship.id} by {email}"
    )
    return application


async def has_applied(db: AsyncSession, scholarship_id: UUID, student_email: str) -> bool:
    existing = await repository.get_by_scholarship_and_email(
        db, scholarship_id, student_email.strip().lower()
    )
    return existing is not None


# =============================================================================
# Reads
# =============================================================================


async def get_application(db: AsyncSession, application_id: UUID) -> Application:
    application = await repository.get_by_id(db, application_id)
    if application is None:
        raise ApplicationNotFoundError(application_id)
    return application


async def get_application_for(
    db: AsyncSession, actor: Principal, application_id: UUID
) -> Application:
    """Get an application visible to the actor (its owner or staff)."""
    application = await get_application(db, application_id)
    _ensure_owner_or_staff(actor, application)
    return application


async def list_applications(
    db: AsyncSession,
    *,
    status: ApplicationStatus | None = None,
    payment_status: PaymentStatus | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Application], int]:
    return await repository.list_applications(
        db,
        status=status,
        payment_status=payment_status,
        search=search,
        skip=skip,
        limit=limit,
    )


async def list_student_applications(
    db: AsyncSession, actor: Principal, student_email: str
) -> list[Application]:
    """
    List a student's applications.

    Raises:
        ForbiddenError: If a student asks for someone else's applications
    """
    email = student_email.strip().lower()
    if email != actor.email and not actor.is_staff:
        logger.warning(f"{actor.email} attempted to list applications of {email}")
        raise ForbiddenError("You can only view your own applications.")

    return await repository.list_by_student_email(db, email)


# =============================================================================
# Review
# =============================================================================


async def update_status(
    db: AsyncSession,
    application_id: UUID,
    status: ApplicationStatus,
    feedback: str | None,
    acting_email: str,
) -> Application:
    """
    Set an application's status and, when given, its feedback.

    Any status may be set from any status. The student is notified by email;
    a failed notification is logged and does not fail the update.
    """
    application = await get_application(db, application_id)
    previous = application.application_status

    values: dict = {"application_status": status}
    if feedback is not None:
        values["application_feedback"] = feedback

    application = await repository.update(db, application, values)
    logger.info(
        f"{acting_email} changed application {application_id} status: "
        f"{previous.value} -> {status.value}"
    )

    email_sent = await send_application_status_update(
        to_email=application.student_email,
        university_name=application.university_name,
        scholarship_category=application.scholarship_category,
        status=status.value,
        feedback=application.application_feedback,
    )
    if not email_sent:
        logger.error(f"Failed to send status update email for application {application_id}")

    return application


async def update_feedback(
    db: AsyncSession,
    application_id: UUID,
    feedback: str,
    acting_email: str,
) -> Application:
    application = await get_application(db, application_id)
    application = await repository.update(db, application, {"application_feedback": feedback})
    logger.info(f"{acting_email} updated feedback on application {application_id}")
    return application


async def cancel_application(
    db: AsyncSession, actor: Principal, application_id: UUID
) -> Application:
    """
    Soft-cancel an application by moving it to rejected.

    The record is kept; only its status changes.

    Raises:
        ApplicationNotFoundError: If the application doesn't exist
        ForbiddenError: If the actor is neither the owner nor staff
    """
    application = await get_application_for(db, actor, application_id)

    if application.application_status == ApplicationStatus.REJECTED:
        return application

    application = await repository.update(
        db, application, {"application_status": ApplicationStatus.REJECTED}
    )
    logger.info(f"Application {application_id} cancelled by {actor.email}")
    return application


# =============================================================================
# Payment
# =============================================================================


async def confirm_payment(db: AsyncSession, application_id: UUID) -> tuple[Application, bool]:
    """
    Mark an application paid and completed.

    Idempotent: confirming an already-paid application succeeds without
    further side effects. The receipt email is sent only by the call that
    performs the transition.

    Returns:
        Tuple of (application, changed)
    """
    application = await get_application(db, application_id)

    if application.payment_status == PaymentStatus.PAID:
        logger.debug(f"Payment for application {application_id} already confirmed")
        return application, False

    changed = await repository.mark_paid(db, application_id, datetime.now(UTC))
    await db.refresh(application)

    if changed:
        logger.info(f"Payment confirmed for application {application_id}")
        receipt_sent = await send_payment_receipt(
            to_email=application.student_email,
            university_name=application.university_name,
            amount=application.amount_due,
        )
        if not receipt_sent:
            logger.error(f"Failed to send payment receipt for application {application_id}")

    return application, changed


async def cancel_payment(
    db: AsyncSession,
    application_id: UUID,
    actor: Principal | None = None,
) -> Application:
    """
    Return an application to unpaid/pending after an abandoned checkout.

    ``actor`` is None for trusted callers (provider webhook); otherwise the
    actor must own the application or be staff. Rejected applications stay
    rejected.

    Raises:
        ApplicationAlreadyPaidError: If the payment was already confirmed
        ApplicationRejectedError: If the application was rejected or cancelled
    """
    if actor is None:
        application = await get_application(db, application_id)
    else:
        application = await get_application_for(db, actor, application_id)

    if application.payment_status == PaymentStatus.PAID:
        raise ApplicationAlreadyPaidError(application_id)
    if application.application_status == ApplicationStatus.REJECTED:
        raise ApplicationRejectedError(application_id)

    changed = await repository.mark_unpaid(db, application_id)
    await db.refresh(application)

    if not changed:
        # Paid or rejected between the read and the update
        if application.application_status == ApplicationStatus.REJECTED:
            raise ApplicationRejectedError(application_id)
        raise ApplicationAlreadyPaidError(application_id)

    logger.info(f"Payment cancelled for application {application_id}")
    return application


async def start_checkout(
    db: AsyncSession,
    actor: Principal,
    application_id: UUID,
    amount: float,
) -> payments.CheckoutSession:
    """
    Start a checkout session for an application's fee.

    Raises:
        InvalidRequestError: If the amount is invalid or differs from the recorded fee
        ForbiddenError: If the actor does not own the application
        ApplicationAlreadyPaidError: If the fee was already paid
        InvalidApplicationStateError: If the application was rejected
        PaymentGatewayError: If the provider call fails
    """
    unit_amount = payments.to_minor_units(amount)

    application = await get_application(db, application_id)
    if application.student_email != actor.email:
        logger.warning(f"{actor.email} attempted checkout for application {application_id}")
        raise ForbiddenError("You can only pay for your own applications.")

    if application.payment_status == PaymentStatus.PAID:
        raise ApplicationAlreadyPaidError(application_id)

    if application.application_status == ApplicationStatus.REJECTED:
        raise InvalidApplicationStateError("Cannot pay for a rejected application.")

    if application.amount_due <= 0:
        raise InvalidRequestError("This application has no fee to pay")

    if unit_amount != payments.to_minor_units(application.amount_due):
        logger.warning(
            f"Checkout amount {amount} does not match fee {application.amount_due} "
            f"for application {application_id}"
        )
        raise InvalidRequestError("Amount does not match the application fee")

    session = await payments.create_checkout_session(
        scholarship_id=application.scholarship_id,
        application_id=application.id,
        student_email=application.student_email,
        amount=application.amount_due,
    )

    await repository.update(
        db,
        application,
        {
            "payment_status": PaymentStatus.PENDING,
            "checkout_session_id": session.id,
            "checkout_started_at": datetime.now(UTC),
        },
    )
    return session


async def verify_checkout(
    db: AsyncSession, actor: Principal, application_id: UUID
) -> Application:
    """
    Confirm payment by asking the provider about the stored checkout session.

    The application is only confirmed when the provider reports the session
    paid; otherwise it is returned unchanged.

    Raises:
        InvalidRequestError: If no checkout was started or the session belongs elsewhere
        PaymentGatewayError: If the provider call fails
    """
    application = await get_application_for(db, actor, application_id)

    if application.payment_status == PaymentStatus.PAID:
        return application

    if not application.checkout_session_id:
        raise InvalidRequestError("No checkout session has been started for this application")

    session = await payments.retrieve_checkout_session(application.checkout_session_id)

    if session.metadata.get("applicationId") != str(application.id):
        logger.error(
            f"Checkout session {session.id} does not belong to application {application_id}"
        )
        raise InvalidRequestError("Checkout session does not match this application")

    if not session.is_paid:
        logger.info(
            f"Checkout session {session.id} for application {application_id} "
            f"is {session.payment_status}"
        )
        return application

    application, _ = await confirm_payment(db, application_id)
    return application
