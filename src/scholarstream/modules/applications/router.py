"""
Applications Router

Endpoints:
- POST /applications - Submit an application (authenticated)
- GET /applications - List all applications (Moderator/Admin)
- GET /applications/student - The principal's own applications
- GET /applications/student/{email} - A student's applications (self or staff)
- GET /applications/check - Whether a student already applied (public)
- PATCH /applications/feedback/{id} - Update feedback only (Moderator/Admin)
- GET /applications/{id} - Application detail (owner or staff)
- PATCH /applications/{id} - Update status and feedback (Moderator/Admin)
- DELETE /applications/{id} - Soft-cancel to rejected (owner or staff)

Submission is rate limited per principal.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import EmailStr
from sqlalchemy.ext.asyncio import AsyncSession

from scholarstream.core.auth import Principal, get_current_principal, require_moderator
from scholarstream.core.database import get_db
from scholarstream.core.rate_limit import enforce_rate_limit
from scholarstream.modules.applications import service
from scholarstream.modules.applications.models import ApplicationStatus, PaymentStatus
from scholarstream.modules.applications.schemas import (
    ApplicationCheckResponse,
    ApplicationCreate,
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationStatusUpdate,
    ApplicationSummary,
    ApplicationWriteResponse,
    FeedbackUpdate,
)

router = APIRouter()

SUBMIT_RATE_LIMIT = 10
SUBMIT_RATE_WINDOW_SECONDS = 60


@router.post(
    "",
    response_model=ApplicationWriteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Application",
    responses={
        403: {"description": "Applying for another student, or non-Admin paid record"},
        404: {"description": "User or scholarship not found"},
        409: {"description": "Already applied"},
        429: {"description": "Too many submissions"},
    },
)
async def submit_application(
    data: ApplicationCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ApplicationWriteResponse:
    await enforce_rate_limit(
        f"applications:submit:{principal.email}",
        SUBMIT_RATE_LIMIT,
        SUBMIT_RATE_WINDOW_SECONDS,
    )
    application = await service.submit_application(db, principal, data)
    return ApplicationWriteResponse(
        inserted_id=application.id,
        application=ApplicationResponse.model_validate(application),
    )


@router.get("", response_model=ApplicationListResponse, summary="List Applications")
async def list_applications(
    application_status: ApplicationStatus | None = Query(None, alias="status"),
    payment_status: PaymentStatus | None = Query(None, alias="paymentStatus"),
    search: str | None = Query(None, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    _moderator: Principal = Depends(require_moderator),
) -> ApplicationListResponse:
    items, total = await service.list_applications(
        db,
        status=application_status,
        payment_status=payment_status,
        search=search,
        skip=skip,
        limit=limit,
    )
    return ApplicationListResponse(
        items=[ApplicationSummary.model_validate(item) for item in items],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.get("/student", response_model=list[ApplicationResponse], summary="List My Applications")
async def list_my_applications(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> list[ApplicationResponse]:
    applications = await service.list_student_applications(db, principal, principal.email)
    return [ApplicationResponse.model_validate(item) for item in applications]


@router.get(
    "/student/{email}",
    response_model=list[ApplicationResponse],
    summary="List Student Applications",
)
async def list_student_applications(
    email: str,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> list[ApplicationResponse]:
    applications = await service.list_student_applications(db, principal, email)
    return [ApplicationResponse.model_validate(item) for item in applications]


@router.get("/check", response_model=ApplicationCheckResponse, summary="Check Application")
async def check_application(
    scholarship_id: UUID = Query(..., alias="scholarshipId"),
    student_email: EmailStr = Query(..., alias="studentEmail"),
    db: AsyncSession = Depends(get_db),
) -> ApplicationCheckResponse:
    applied = await service.has_applied(db, scholarship_id, student_email)
    return ApplicationCheckResponse(applied=applied)


@router.patch(
    "/feedback/{application_id}",
    response_model=ApplicationWriteResponse,
    summary="Update Feedback",
)
async def update_feedback(
    application_id: UUID,
    data: FeedbackUpdate,
    db: AsyncSession = Depends(get_db),
    moderator: Principal = Depends(require_moderator),
) -> ApplicationWriteResponse:
    application = await service.update_feedback(
        db, application_id, data.feedback, acting_email=moderator.email
    )
    return ApplicationWriteResponse(application=ApplicationResponse.model_validate(application))


@router.get("/{application_id}", response_model=ApplicationResponse, summary="Get Application")
async def get_application(
    application_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ApplicationResponse:
    application = await service.get_application_for(db, principal, application_id)
    return ApplicationResponse.model_validate(application)


@router.patch(
    "/{application_id}",
    response_model=ApplicationWriteResponse,
    summary="Update Application Status",
)
async def update_application_status(
    application_id: UUID,
    data: ApplicationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    moderator: Principal = Depends(require_moderator),
) -> ApplicationWriteResponse:
    application = await service.update_status(
        db,
        application_id,
        data.status,
        data.feedback,
        acting_email=moderator.email,
    )
    return ApplicationWriteResponse(application=ApplicationResponse.model_validate(application))


@router.delete(
    "/{application_id}",
    response_model=ApplicationWriteResponse,
    summary="Cancel Application",
)
async def cancel_application(
    application_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ApplicationWriteResponse:
    application = await service.cancel_application(db, principal, application_id)
    return ApplicationWriteResponse(application=ApplicationResponse.model_validate(application))
