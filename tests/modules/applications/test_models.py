"""
Unit tests for application models.
"""

from sqlalchemy import UniqueConstraint

from scholarstream.modules.applications.models import (
    Application,
    ApplicationStatus,
    PaymentStatus,
)


class TestApplicationTable:
    def test_unique_scholarship_student_constraint(self):
        """One application per (scholarship, student email) is enforced by the table."""
        constraints = [
            c for c in Application.__table__.constraints if isinstance(c, UniqueConstraint)
        ]
        names = {c.name: [col.name for col in c.columns] for c in constraints}

        assert names["uq_applications_scholarship_student"] == ["scholarship_id", "student_email"]

    def test_scholarship_id_is_uuid(self):
        column = Application.__table__.c.scholarship_id
        assert column.type.as_uuid is True
        assert not column.foreign_keys


class TestEnums:
    def test_application_status_is_closed(self):
        assert {s.value for s in ApplicationStatus} == {"pending", "completed", "rejected"}

    def test_payment_status_values(self):
        assert {s.value for s in PaymentStatus} == {"unpaid", "pending", "paid"}

    def test_amount_due_adds_service_charge(self):
        application = Application(application_fees=25.5, service_charge=4.5)
        assert application.amount_due == 30.0
