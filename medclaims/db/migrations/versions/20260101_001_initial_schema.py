"""Initial schema: users, claims, appointments, payments, documents, reports, status changes.

Revision ID: 20260101_001
Revises:
Create Date: 2026-01-01
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# Revision identifiers
revision = "20260101_001"
down_revision = None
branch_labels = None
depends_on = None


# Enum types are created once up front; several tables share user_role
user_role = postgresql.ENUM(
    "PATIENT", "DOCTOR", "INSURANCE", "BANK", name="user_role", create_type=False
)
claim_status = postgresql.ENUM(
    "DRAFT", "SUBMITTED", "UNDER_REVIEW", "APPROVED", "REJECTED", "PAID",
    name="claim_status", create_type=False,
)
appointment_status = postgresql.ENUM(
    "PENDING", "ACCEPTED", "CANCELLED", "COMPLETED", "CONSULTED",
    name="appointment_status", create_type=False,
)
payment_status = postgresql.ENUM(
    "PENDING", "PROCESSING", "COMPLETED", "FAILED", name="payment_status", create_type=False
)
_REPORT_KINDS = (
    "DIAGNOSIS_REPORT",
    "TREATMENT_SUMMARY",
    "PRESCRIPTION_REPORT",
    "LAB_REPORT",
    "SCAN_REPORT",
    "FOLLOW_UP_REPORT",
    "DISCHARGE_SUMMARY",
)
report_type = postgresql.ENUM(*_REPORT_KINDS, name="report_type", create_type=False)
document_type = postgresql.ENUM(*_REPORT_KINDS, "OTHER", name="document_type", create_type=False)
lifecycle_entity = postgresql.ENUM(
    "CLAIM", "APPOINTMENT", "PAYMENT", name="lifecycle_entity", create_type=False
)

ENUMS = (
    user_role,
    claim_status,
    appointment_status,
    payment_status,
    report_type,
    document_type,
    lifecycle_entity,
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


def _user_fk(name: str, nullable: bool = False, ondelete: str = "CASCADE") -> sa.Column:
    return sa.Column(
        name,
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("users.id", ondelete=ondelete),
        nullable=nullable,
        index=True,
    )


def upgrade() -> None:
    bind = op.get_bind()
    for enum in ENUMS:
        enum.create(bind, checkfirst=True)
    op.execute(sa.schema.CreateSequence(sa.Sequence("claim_number_seq")))

    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True, index=True),
        sa.Column("hashed_password", sa.String(255), nullable=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("role", user_role, nullable=False, index=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=True),
        sa.Column("oauth_provider", sa.String(50), nullable=True),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "claims",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("claim_number", sa.String(50), nullable=False, unique=True, index=True),
        _user_fk("patient_id"),
        _user_fk("doctor_id", nullable=True, ondelete="SET NULL"),
        sa.Column("diagnosis", sa.String(500), nullable=False),
        sa.Column("treatment_date", sa.Date, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("claim_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("approved_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("status", claim_status, nullable=False, index=True),
        sa.Column("rejection_reason", sa.String(1000), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("claim_amount >= 0", name="claim_amount_non_negative"),
        sa.CheckConstraint(
            "approved_amount IS NULL OR status IN ('APPROVED', 'PAID')",
            name="approved_amount_requires_approval",
        ),
    )
    op.create_index("ix_claims_patient_status", "claims", ["patient_id", "status"])

    op.create_table(
        "appointments",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        _user_fk("patient_id"),
        _user_fk("doctor_id"),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", appointment_status, nullable=False),
        sa.Column("reason", sa.String(500), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_appointments_doctor_status", "appointments", ["doctor_id", "status"])

    op.create_table(
        "payments",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "claim_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("claims.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", payment_status, nullable=False, index=True),
        sa.Column("payment_method", sa.String(100), nullable=True),
        sa.Column("transaction_id", sa.String(255), nullable=True, index=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("failure_reason", sa.String(1000), nullable=True),
        sa.Column("payment_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "processed_by",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
        sa.CheckConstraint("amount > 0", name="amount_positive"),
    )

    op.create_table(
        "documents",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "appointment_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("appointments.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        _user_fk("uploaded_by_id"),
        sa.Column("type", document_type, nullable=False),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("original_name", sa.String(500), nullable=False),
        sa.Column("object_key", sa.Text, nullable=False),
        sa.Column("url", sa.Text, nullable=False),
        sa.Column("size", sa.BigInteger, nullable=False),
        sa.Column("mime_type", sa.String(150), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "patient_reports",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        _user_fk("patient_id"),
        _user_fk("doctor_id"),
        sa.Column(
            "appointment_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("appointments.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("report_type", report_type, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("diagnosis", sa.Text, nullable=True),
        sa.Column("treatment", sa.Text, nullable=True),
        sa.Column("medications", sa.Text, nullable=True),
        sa.Column("recommendations", sa.Text, nullable=True),
        sa.Column("document_url", sa.Text, nullable=True),
        sa.Column("follow_up_date", sa.Date, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "status_changes",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("entity_type", lifecycle_entity, nullable=False),
        sa.Column("entity_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("previous_status", sa.String(30), nullable=True),
        sa.Column("new_status", sa.String(30), nullable=False),
        sa.Column("actor_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("actor_role", user_role, nullable=True),
        sa.Column("note", sa.String(1000), nullable=True),
        sa.Column(
            "changed_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
            index=True,
        ),
    )
    op.create_index("ix_status_changes_entity", "status_changes", ["entity_type", "entity_id"])


def downgrade() -> None:
    op.drop_index("ix_status_changes_entity", table_name="status_changes")
    op.drop_table("status_changes")
    op.drop_table("patient_reports")
    op.drop_table("documents")
    op.drop_table("payments")
    op.drop_index("ix_appointments_doctor_status", table_name="appointments")
    op.drop_table("appointments")
    op.drop_index("ix_claims_patient_status", table_name="claims")
    op.drop_table("claims")
    op.drop_table("users")
    op.execute(sa.schema.DropSequence(sa.Sequence("claim_number_seq")))

    bind = op.get_bind()
    for enum in reversed(ENUMS):
        enum.drop(bind, checkfirst=True)
