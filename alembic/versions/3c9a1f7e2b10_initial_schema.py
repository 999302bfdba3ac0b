"""initial schema: users, scholarships, reviews, applications

Revision ID: 3c9a1f7e2b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

Creates the four tables and their enum types. The applications table
carries a unique constraint on (scholarship_id, student_email) so
concurrent submissions for the same pair cannot both be stored.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3c9a1f7e2b10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create all tables."""
    user_role_enum = postgresql.ENUM(
        "Student", "Moderator", "Admin", name="user_role", create_type=False
    )
    application_status_enum = postgresql.ENUM(
        "pending", "completed", "rejected", name="application_status", create_type=False
    )
    payment_status_enum = postgresql.ENUM(
        "unpaid", "pending", "paid", name="payment_status", create_type=False
    )
    bind = op.get_bind()
    user_role_enum.create(bind, checkfirst=True)
    application_status_enum.create(bind, checkfirst=True)
    payment_status_enum.create(bind, checkfirst=True)

    # Users
    op.create_table(
        "users",
        *_audit_columns(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=200), nullable=True),
        sa.Column("photo_url", sa.String(length=1000), nullable=True),
        sa.Column("role", user_role_enum, nullable=False, server_default="Student"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    # Scholarships
    op.create_table(
        "scholarships",
        *_audit_columns(),
        sa.Column("scholarship_name", sa.String(length=200), nullable=False),
        sa.Column("university_name", sa.String(length=200), nullable=False),
        sa.Column("university_image", sa.String(length=1000), nullable=True),
        sa.Column("university_country", sa.String(length=100), nullable=False),
        sa.Column("university_city", sa.String(length=100), nullable=False),
        sa.Column("university_world_rank", sa.Integer(), nullable=True),
        sa.Column("subject_category", sa.String(length=100), nullable=False),
        sa.Column("scholarship_category", sa.String(length=100), nullable=False),
        sa.Column("degree", sa.String(length=50), nullable=False),
        sa.Column(
            "tuition_fees", sa.Numeric(precision=12, scale=2), nullable=False, server_default="0"
        ),
        sa.Column("application_fees", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("service_charge", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("application_deadline", sa.Date(), nullable=False),
        sa.Column("scholarship_post_date", sa.Date(), nullable=False),
        sa.Column("owner_email", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_scholarships_university_country", "scholarships", ["university_country"], unique=False
    )
    op.create_index(
        "ix_scholarships_application_deadline",
        "scholarships",
        ["application_deadline"],
        unique=False,
    )

    # Reviews
    op.create_table(
        "reviews",
        *_audit_columns(),
        sa.Column("scholarship_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_name", sa.String(length=200), nullable=True),
        sa.Column("user_email", sa.String(length=255), nullable=False),
        sa.Column("rating_point", sa.Integer(), nullable=False),
        sa.Column("review_comment", sa.Text(), nullable=True),
        sa.Column(
            "review_date",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reviews_scholarship_id", "reviews", ["scholarship_id"], unique=False)
    op.create_index("ix_reviews_user_email", "reviews", ["user_email"], unique=False)

    # Applications
    op.create_table(
        "applications",
        *_audit_columns(),
        sa.Column("scholarship_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("student_email", sa.String(length=255), nullable=False),
        sa.Column("student_name", sa.String(length=200), nullable=True),
        sa.Column("scholarship_name", sa.String(length=200), nullable=True),
        sa.Column("university_name", sa.String(length=200), nullable=False),
        sa.Column("scholarship_category", sa.String(length=100), nullable=False),
        sa.Column("degree", sa.String(length=50), nullable=False),
        sa.Column(
            "application_fees",
            sa.Numeric(precision=12, scale=2),
            nullable=False,
            server_default="0",
        ),
        sa.Column(
            "service_charge",
            sa.Numeric(precision=12, scale=2),
            nullable=False,
            server_default="0",
        ),
        sa.Column(
            "application_status",
            application_status_enum,
            nullable=False,
            server_default="pending",
        ),
        sa.Column(
            "payment_status",
            payment_status_enum,
            nullable=False,
            server_default="unpaid",
        ),
        sa.Column("application_feedback", sa.Text(), nullable=True),
        sa.Column(
            "application_date",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("checkout_session_id", sa.String(length=255), nullable=True),
        sa.Column("checkout_started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "scholarship_id",
            "student_email",
            name="uq_applications_scholarship_student",
        ),
    )
    op.create_index(
        "ix_applications_student_email", "applications", ["student_email"], unique=False
    )
    op.create_index(
        "ix_applications_application_status",
        "applications",
        ["application_status"],
        unique=False,
    )
    op.create_index(
        "ix_applications_payment_status", "applications", ["payment_status"], unique=False
    )


def downgrade() -> None:
    """Drop all tables and enum types."""
    op.drop_index("ix_applications_payment_status", table_name="applications")
    op.drop_index("ix_applications_application_status", table_name="applications")
    op.drop_index("ix_applications_student_email", table_name="applications")
    op.drop_table("applications")

    op.drop_index("ix_reviews_user_email", table_name="reviews")
    op.drop_index("ix_reviews_scholarship_id", table_name="reviews")
    op.drop_table("reviews")

    op.drop_index("ix_scholarships_application_deadline", table_name="scholarships")
    op.drop_index("ix_scholarships_university_country", table_name="scholarships")
    op.drop_table("scholarships")

    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")

    op.execute("DROP TYPE IF EXISTS payment_status")
    op.execute("DROP TYPE IF EXISTS application_status")
    op.execute("DROP TYPE IF EXISTS user_role")
