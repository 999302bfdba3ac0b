"""
Scholarships Router

Endpoints:
- GET /scholarships - List (public, optional filters and pagination)
- GET /scholarships/{id} - Detail (public)
- POST /scholarships - Create (Admin)
- PATCH /scholarships/{id} - Partial update (Admin)
- PUT /scholarships/{id} - Replace (Admin)
- DELETE /scholarships/{id} - Delete (Admin)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from scholarstream.core.auth import Principal, require_admin
from scholarstream.core.database import get_db
from scholarstream.modules.scholarships import service
from scholarstream.modules.scholarships.schemas import (
    ScholarshipCreate,
    ScholarshipListResponse,
    ScholarshipResponse,
    ScholarshipUpdate,
    ScholarshipWriteResponse,
)

router = APIRouter()


@router.get("", response_model=ScholarshipListResponse, summary="List Scholarships")
async def list_scholarships(
    search: str | None = Query(None, max_length=100),
    country: str | None = Query(None, max_length=100),
    degree: str | None = Query(None, max_length=50),
    subject_category: str | None = Query(None, alias="subjectCategory", max_length=100),
    scholarship_category: str | None = Query(None, alias="scholarshipCategory", max_length=100),
    sort_by: str = Query("scholarship_post_date", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
    page: int | None = Query(None, ge=1),
    limit: int | None = Query(None, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> ScholarshipListResponse:
    result = await service.list_scholarships(
        db,
        search=search,
        country=country,
        degree=degree,
        subject_category=subject_category,
        scholarship_category=scholarship_category,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return ScholarshipListResponse(
        items=[ScholarshipResponse.model_validate(item) for item in result["items"]],
        total=result["total"],
        page=result["page"],
        limit=result["limit"],
    )


@router.get("/{scholarship_id}", response_model=ScholarshipResponse, summary="Get Scholarship")
async def get_scholarship(
    scholarship_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ScholarshipResponse:
    return ScholarshipResponse.model_validate(await service.get_scholarship(db, scholarship_id))


@router.post(
    "",
    response_model=ScholarshipWriteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Scholarship",
)
async def create_scholarship(
    data: ScholarshipCreate,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_admin),
) -> ScholarshipWriteResponse:
    scholarship = await service.create_scholarship(db, data, acting_email=admin.email)
    return ScholarshipWriteResponse(
        inserted_id=scholarship.id,
        scholarship=ScholarshipResponse.model_validate(scholarship),
    )


@router.patch("/{scholarship_id}", response_model=ScholarshipWriteResponse, summary="Update Scholarship")
async def update_scholarship(
    scholarship_id: UUID,
    data: ScholarshipUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_admin),
) -> ScholarshipWriteResponse:
    scholarship = await service.update_scholarship(db, scholarship_id, data)
    return ScholarshipWriteResponse(scholarship=ScholarshipResponse.model_validate(scholarship))


@router.put("/{scholarship_id}", response_model=ScholarshipWriteResponse, summary="Replace Scholarship")
async def replace_scholarship(
    scholarship_id: UUID,
    data: ScholarshipCreate,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_admin),
) -> ScholarshipWriteResponse:
    scholarship = await service.replace_scholarship(
        db, scholarship_id, data, acting_email=admin.email
    )
    return ScholarshipWriteResponse(scholarship=ScholarshipResponse.model_validate(scholarship))


@router.delete("/{scholarship_id}", response_model=ScholarshipWriteResponse, summary="Delete Scholarship")
async def delete_scholarship(
    scholarship_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_admin),
) -> ScholarshipWriteResponse:
    await service.delete_scholarship(db, scholarship_id, acting_email=admin.email)
    return ScholarshipWriteResponse()
