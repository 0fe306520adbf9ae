"""Initial admissions schema

Revision ID: a0b1c2d3e4f5
Revises:
Create Date: 2026-10-19

Creates the full schema:

1. users, applicant_profiles
2. applications and the append-only application_status_history
3. documents, academic_records (both cascade with their application)
4. notifications
"""

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision = "a0b1c2d3e4f5"
down_revision = None
branch_labels = None
depends_on = None

user_role = postgresql.ENUM(
    "APPLICANT", "ADMIN", "ADMISSION_COMMITTEE", name="user_role", create_type=False
)
school_level = postgresql.ENUM("JUNIOR_HIGH", "SENIOR_HIGH", name="school_level", create_type=False)
application_status = postgresql.ENUM(
    "INITIAL_REGISTRATION",
    "DOCUMENT_UPLOAD",
    "SELECTION",
    "ANNOUNCEMENT",
    "RE_REGISTRATION",
    name="application_status",
    create_type=False,
)
document_type = postgresql.ENUM(
    "BIRTH_CERTIFICATE",
    "REPORT_CARD",
    "PHOTO",
    "PARENT_ID",
    "OTHER",
    name="document_type",
    create_type=False,
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in (user_role, school_level, application_status, document_type):
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("role", user_role, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "applicant_profiles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("phone_number", sa.String(30), nullable=False),
        sa.Column("parent_full_name", sa.String(200), nullable=False),
        sa.Column("parent_phone_number", sa.String(30), nullable=False),
        sa.Column("parent_email", sa.String(255), nullable=False),
        sa.Column("school_level", school_level, nullable=False),
        *_timestamps(),
    )
    op.create_index(
        "ix_applicant_profiles_school_level", "applicant_profiles", ["school_level"]
    )

    op.create_table(
        "applications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "applicant_id",
            sa.Integer(),
            sa.ForeignKey("applicant_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("application_number", sa.String(64), nullable=False, unique=True),
        sa.Column("status", application_status, nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reminder_sent_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_applications_applicant_id", "applications", ["applicant_id"])
    op.create_index("ix_applications_status", "applications", ["status"])
    op.create_index("ix_applications_created_at", "applications", ["created_at"])

    op.create_table(
        "application_status_history",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "application_id",
            sa.Integer(),
            sa.ForeignKey("applications.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("previous_status", application_status, nullable=True),
        sa.Column("new_status", application_status, nullable=False),
        sa.Column("changed_by_user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    )
    op.create_index(
        "ix_application_status_history_application_created",
        "application_status_history",
        ["application_id", "created_at"],
    )
    op.create_index(
        "ix_application_status_history_changed_by_user_id",
        "application_status_history",
        ["changed_by_user_id"],
    )

    op.create_table(
        "documents",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "application_id",
            sa.Integer(),
            sa.ForeignKey("applications.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("document_type", document_type, nullable=False),
        sa.Column("original_filename", sa.String(255), nullable=False),
        sa.Column("stored_filename", sa.String(255), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("mime_type", sa.String(100), nullable=False),
        sa.Column(
            "uploaded_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    )
    op.create_index("ix_documents_application_id", "documents", ["application_id"])

    op.create_table(
        "academic_records",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "application_id",
            sa.Integer(),
            sa.ForeignKey("applications.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("subject", sa.String(100), nullable=False),
        sa.Column("grade", sa.String(20), nullable=False),
        sa.Column("semester", sa.String(50), nullable=False),
        sa.Column("academic_year", sa.String(20), nullable=False),
        *_timestamps(),
    )
    op.create_index(
        "ix_academic_records_application_created",
        "academic_records",
        ["application_id", "created_at"],
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("academic_records")
    op.drop_table("documents")
    op.drop_table("application_status_history")
    op.drop_table("applications")
    op.drop_table("applicant_profiles")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (document_type, application_status, school_level, user_role):
        enum_type.drop(bind, checkfirst=True)
