"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "courses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("course_name", sa.String(), nullable=False),
        sa.Column("duration", sa.String(), nullable=True),
        sa.Column("fees", sa.Numeric(12, 2), nullable=False),
        sa.Column("subjects", sa.JSON(), nullable=False),
    )
    op.create_index("ix_courses_id", "courses", ["id"])
    op.create_index("ix_courses_course_name", "courses", ["course_name"])

    op.create_table(
        "students",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("enrollment_no", sa.String(), nullable=False),
        sa.Column("password", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("father_name", sa.String(), nullable=True),
        sa.Column("mother_name", sa.String(), nullable=True),
        sa.Column("dob", sa.String(), nullable=True),
        sa.Column("gender", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("guardian_phone", sa.String(), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("pincode", sa.String(), nullable=True),
        sa.Column("qualification", sa.String(), nullable=True),
        sa.Column("course", sa.String(), nullable=True),
        sa.Column("batch_time", sa.String(), nullable=True),
        sa.Column("admission_date", sa.String(), nullable=True),
        sa.Column("session_start", sa.String(), nullable=True),
        sa.Column("session_end", sa.String(), nullable=True),
        sa.Column("photo_url", sa.String(), nullable=True),
        sa.Column("paid_fee", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_students_id", "students", ["id"])
    op.create_index("ix_students_enrollment_no", "students", ["enrollment_no"], unique=True)
    op.create_index("ix_students_name", "students", ["name"])

    op.create_table(
        "fee_transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "student_id",
            sa.Integer(),
            sa.ForeignKey("students.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("date", sa.String(), nullable=True),
        sa.Column("narration", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_fee_transactions_id", "fee_transactions", ["id"])
    op.create_index("ix_fee_transactions_student_id", "fee_transactions", ["student_id"])
    op.create_index("ix_fee_transactions_created_at", "fee_transactions", ["created_at"])

    op.create_table(
        "certificates",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("certificate_no", sa.String(), nullable=False),
        sa.Column(
            "student_id",
            sa.Integer(),
            sa.ForeignKey("students.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("student_name", sa.String(), nullable=True),
        sa.Column("enrollment_no", sa.String(), nullable=False),
        sa.Column("course_name", sa.String(), nullable=True),
        sa.Column("issue_date", sa.String(), nullable=False),
        sa.Column("batch", sa.String(), nullable=True),
        sa.Column("admission_date", sa.String(), nullable=True),
        sa.Column("father_name", sa.String(), nullable=True),
        sa.Column("dob", sa.String(), nullable=True),
        sa.Column("marks", sa.JSON(), nullable=True),
        sa.Column("percentage", sa.Float(), nullable=True),
        sa.Column("grade", sa.String(), nullable=True),
    )
    op.create_index("ix_certificates_id", "certificates", ["id"])
    op.create_index("ix_certificates_certificate_no", "certificates", ["certificate_no"], unique=True)
    op.create_index("ix_certificates_enrollment_no", "certificates", ["enrollment_no"], unique=True)
    op.create_index("ix_certificates_student_id", "certificates", ["student_id"])


def downgrade() -> None:
    op.drop_table("certificates")
    op.drop_table("fee_transactions")
    op.drop_table("students")
    op.drop_table("courses")
