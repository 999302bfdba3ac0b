"""
Tests for the scholarships service layer.
"""

from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from pydantic import ValidationError

from scholarstream.core.exceptions import InvalidRequestError
from scholarstream.modules.scholarships import service
from scholarstream.modules.scholarships.models import Scholarship
from scholarstream.modules.scholarships.schemas import ScholarshipCreate, ScholarshipUpdate

REPO = "scholarstream.modules.scholarships.service.repository"


@pytest.fixture
def scholarship_payload():
    return {
        "scholarshipName": "Global Excellence Award",
        "universityName": "University of Ghana",
        "universityCountry": "Ghana",
        "universityCity": "Accra",
        "subjectCategory": "Engineering",
        "scholarshipCategory": "Full fund",
        "degree": "Masters",
        "applicationFees": 25.5,
        "serviceCharge": 5,
        "applicationDeadline": "2026-12-31",
        "scholarshipPostDate": "2026-09-01",
    }


@pytest.fixture
def sample_scholarship():
    scholarship = MagicMock(spec=Scholarship)
    scholarship.id = uuid4()
    scholarship.owner_email = "owner@x.com"
    scholarship.application_deadline = date(2026, 12, 31)
    scholarship.scholarship_post_date = date(2026, 9, 1)
    return scholarship


class TestCreateScholarship:
    @pytest.mark.asyncio
    async def test_owner_defaults_to_acting_admin(self, mock_db, scholarship_payload, sample_scholarship):
        data = ScholarshipCreate.model_validate(scholarship_payload)
        with patch(REPO) as mock_repo:
            mock_repo.create = AsyncMock(return_value=sample_scholarship)

            await service.create_scholarship(mock_db, data, acting_email="Admin@x.com")

        values = mock_repo.create.call_args.args[1]
        assert values["owner_email"] == "admin@x.com"
        assert values["application_fees"] == 25.5

    @pytest.mark.asyncio
    async def test_user_email_alias_sets_owner(self, mock_db, scholarship_payload, sample_scholarship):
        data = ScholarshipCreate.model_validate({**scholarship_payload, "userEmail": "prof@x.com"})
        with patch(REPO) as mock_repo:
            mock_repo.create = AsyncMock(return_value=sample_scholarship)

            await service.create_scholarship(mock_db, data, acting_email="admin@x.com")

        assert mock_repo.create.call_args.args[1]["owner_email"] == "prof@x.com"

    def test_deadline_before_post_date_is_invalid(self, scholarship_payload):
        with pytest.raises(ValidationError):
            ScholarshipCreate.model_validate(
                {**scholarship_payload, "applicationDeadline": "2026-08-01"}
            )


class TestListScholarships:
    @pytest.mark.asyncio
    async def test_unpaginated_by_default(self, mock_db):
        with patch(REPO) as mock_repo:
            mock_repo.list_scholarships = AsyncMock(return_value=([], 0))

            result = await service.list_scholarships(mock_db)

        kwargs = mock_repo.list_scholarships.call_args.kwargs
        assert kwargs["skip"] is None
        assert kwargs["limit"] is None
        assert result == {"items": [], "total": 0, "page": None, "limit": None}

    @pytest.mark.asyncio
    async def test_page_without_limit_defaults_to_ten(self, mock_db):
        with patch(REPO) as mock_repo:
            mock_repo.list_scholarships = AsyncMock(return_value=([], 0))

            result = await service.list_scholarships(mock_db, page=3)

        kwargs = mock_repo.list_scholarships.call_args.kwargs
        assert kwargs["skip"] == 20
        assert kwargs["limit"] == 10
        assert result["page"] == 3


class TestUpdateScholarship:
    @pytest.mark.asyncio
    async def test_empty_update_is_rejected(self, mock_db):
        with pytest.raises(InvalidRequestError):
            await service.update_scholarship(mock_db, uuid4(), ScholarshipUpdate())

    @pytest.mark.asyncio
    async def test_update_checks_merged_dates(self, mock_db, sample_scholarship):
        data = ScholarshipUpdate(application_deadline=date(2026, 8, 1))
        with patch(REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_scholarship)
            mock_repo.update = AsyncMock()

            with pytest.raises(InvalidRequestError):
                await service.update_scholarship(mock_db, sample_scholarship.id, data)

        mock_repo.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_merges_supplied_fields_only(self, mock_db, sample_scholarship):
        data = ScholarshipUpdate(application_fees=40)
        with patch(REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_scholarship)
            mock_repo.update = AsyncMock(return_value=sample_scholarship)

            await service.update_scholarship(mock_db, sample_scholarship.id, data)

        mock_repo.update.assert_awaited_once_with(
            mock_db, sample_scholarship, {"application_fees": 40}
        )

    @pytest.mark.asyncio
    async def test_missing_scholarship(self, mock_db):
        with patch(REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(service.ScholarshipNotFoundError) as exc_info:
                await service.update_scholarship(mock_db, uuid4(), ScholarshipUpdate(degree="PhD"))

        assert exc_info.value.status_code == 404


class TestDeleteScholarship:
    @pytest.mark.asyncio
    async def test_missing_scholarship(self, mock_db):
        with patch(REPO) as mock_repo:
            mock_repo.delete_by_id = AsyncMock(return_value=False)

            with pytest.raises(service.ScholarshipNotFoundError):
                await service.delete_scholarship(mock_db, uuid4(), acting_email="admin@x.com")


class TestScholarshipUpdateValidation:
    @pytest.mark.parametrize(
        "payload",
        [{"scholarshipName": None}, {"applicationFees": None}, {"applicationDeadline": None}],
    )
    def test_required_fields_cannot_be_nulled(self, payload):
        with pytest.raises(ValidationError):
            ScholarshipUpdate.model_validate(payload)

    def test_optional_fields_can_be_cleared(self):
        data = ScholarshipUpdate.model_validate({"universityImage": None, "universityWorldRank": None})

        assert data.model_dump(exclude_unset=True) == {
            "university_image": None,
            "university_world_rank": None,
        }
