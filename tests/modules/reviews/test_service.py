"""
Tests for the reviews service layer.
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from scholarstream.core.auth import Principal
from scholarstream.core.exceptions import ForbiddenError
from scholarstream.modules.reviews import service
from scholarstream.modules.reviews.models import Review
from scholarstream.modules.reviews.schemas import ReviewCreate
from scholarstream.modules.users.models import User, UserRole
from scholarstream.modules.users.service import UserNotFoundError

SERVICE = "scholarstream.modules.reviews.service"


@pytest.fixture
def author():
    return Principal(email="a@x.com", role=UserRole.STUDENT)


@pytest.fixture
def sample_review():
    review = MagicMock(spec=Review)
    review.id = uuid4()
    review.user_email = "a@x.com"
    return review


class TestCreateReview:
    @pytest.mark.asyncio
    async def test_author_fields_come_from_user_record(self, mock_db, author, sample_review):
        user = MagicMock(spec=User)
        user.email = "a@x.com"
        user.display_name = "Ada"
        data = ReviewCreate(scholarship_id=uuid4(), rating_point=5, review_comment="Great")

        with (
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.repository") as mock_repo,
        ):
            mock_users.get_by_email = AsyncMock(return_value=user)
            mock_repo.create = AsyncMock(return_value=sample_review)

            await service.create_review(mock_db, author, data)

        kwargs = mock_repo.create.call_args.kwargs
        assert kwargs["user_name"] == "Ada"
        assert kwargs["user_email"] == "a@x.com"
        assert kwargs["rating_point"] == 5

    @pytest.mark.asyncio
    async def test_unregistered_author(self, mock_db, author):
        data = ReviewCreate(scholarship_id=uuid4(), rating_point=3)
        with (
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.repository") as mock_repo,
        ):
            mock_users.get_by_email = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock()

            with pytest.raises(UserNotFoundError):
                await service.create_review(mock_db, author, data)

        mock_repo.create.assert_not_called()

    def test_rating_out_of_range(self):
        with pytest.raises(ValueError):
            ReviewCreate(scholarship_id=uuid4(), rating_point=6)


class TestDeleteReview:
    @pytest.mark.asyncio
    async def test_other_student_is_forbidden(self, mock_db, sample_review):
        intruder = Principal(email="b@x.com", role=UserRole.STUDENT)
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_review)
            mock_repo.delete_by_id = AsyncMock()

            with pytest.raises(ForbiddenError):
                await service.delete_review(mock_db, intruder, sample_review.id)

        mock_repo.delete_by_id.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [UserRole.MODERATOR, UserRole.ADMIN])
    async def test_staff_may_delete(self, mock_db, sample_review, role):
        staff = Principal(email="staff@x.com", role=role)
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_review)
            mock_repo.delete_by_id = AsyncMock(return_value=True)

            await service.delete_review(mock_db, staff, sample_review.id)

        mock_repo.delete_by_id.assert_awaited_once_with(mock_db, sample_review.id)

    @pytest.mark.asyncio
    async def test_author_may_delete(self, mock_db, author, sample_review):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_review)
            mock_repo.delete_by_id = AsyncMock(return_value=True)

            await service.delete_review(mock_db, author, sample_review.id)

        mock_repo.delete_by_id.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_review(self, mock_db, author):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(service.ReviewNotFoundError):
                await service.delete_review(mock_db, author, uuid4())
