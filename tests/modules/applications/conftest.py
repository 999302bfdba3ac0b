"""
Fixtures for applications tests.
"""

from datetime import UTC, date, datetime
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from scholarstream.core.auth import Principal
from scholarstream.modules.applications.models import (
    Application,
    ApplicationStatus,
    PaymentStatus,
)
from scholarstream.modules.applications.schemas import ApplicationCreate
from scholarstream.modules.scholarships.models import Scholarship
from scholarstream.modules.users.models import User, UserRole

STUDENT_EMAIL = "a@x.com"


@pytest.fixture
def student():
    return Principal(email=STUDENT_EMAIL, role=UserRole.STUDENT)


@pytest.fixture
def other_student():
    return Principal(email="b@x.com", role=UserRole.STUDENT)


@pytest.fixture
def moderator():
    return Principal(email="mod@x.com", role=UserRole.MODERATOR)


@pytest.fixture
def admin():
    return Principal(email="admin@x.com", role=UserRole.ADMIN)


@pytest.fixture
def sample_user():
    user = MagicMock(spec=User)
    user.id = uuid4()
    user.email = STUDENT_EMAIL
    user.display_name = "Ada Student"
    user.role = UserRole.STUDENT
    return user


@pytest.fixture
def sample_scholarship():
    scholarship = MagicMock(spec=Scholarship)
    scholarship.id = uuid4()
    scholarship.scholarship_name = "Global Excellence Award"
    scholarship.university_name = "University of Ghana"
    scholarship.scholarship_category = "Full fund"
    scholarship.degree = "Masters"
    scholarship.application_fees = 25.5
    scholarship.service_charge = 5.0
    scholarship.application_deadline = date(2026, 12, 31)
    scholarship.scholarship_post_date = date(2026, 9, 1)
    return scholarship


@pytest.fixture
def application_create(sample_scholarship):
    return ApplicationCreate(
        scholarship_id=sample_scholarship.id,
        student_email=STUDENT_EMAIL,
        payment_status=PaymentStatus.UNPAID,
    )


@pytest.fixture
def sample_application(sample_scholarship, sample_user):
    """An unpaid, pending application owned by the sample student."""
    application = MagicMock(spec=Application)
    application.id = uuid4()
    application.scholarship_id = sample_scholarship.id
    application.user_id = sample_user.id
    application.student_email = STUDENT_EMAIL
    application.student_name = "Ada Student"
    application.scholarship_name = sample_scholarship.scholarship_name
    application.university_name = sample_scholarship.university_name
    application.scholarship_category = sample_scholarship.scholarship_category
    application.degree = sample_scholarship.degree
    application.application_fees = 25.5
    application.service_charge = 0
    application.amount_due = 25.5
    application.application_status = ApplicationStatus.PENDING
    application.payment_status = PaymentStatus.UNPAID
    application.application_feedback = None
    application.application_date = datetime.now(UTC)
    application.checkout_session_id = None
    application.checkout_started_at = None
    application.paid_at = None
    application.updated_at = datetime.now(UTC)
    return application
