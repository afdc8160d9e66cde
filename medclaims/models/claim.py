"""
Claim Model for Medical Reimbursement Claims.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Numeric,
    Sequence,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medclaims.core.enums import ClaimStatus
from medclaims.models.base import Base, TimeStampedModel, UUIDModel

if TYPE_CHECKING:
    from medclaims.models.user import User

# Source of the numeric part of claim numbers on databases with sequences
CLAIM_NUMBER_SEQUENCE = Sequence("claim_number_seq", metadata=Base.metadata)


class Claim(Base, UUIDModel, TimeStampedModel):
    """
    A patient's request for reimbursement of a medical expense.

    Owned by the patient. The patient drafts and submits it, an insurance
    agent reviews and approves or rejects it, and a bank representative settles
    it once a payment has completed.
    """

    __tablename__ = "claims"
    __table_args__ = (
        CheckConstraint("claim_amount >= 0", name="claim_amount_non_negative"),
        CheckConstraint(
            "approved_amount IS NULL OR status IN ('APPROVED', 'PAID')",
            name="approved_amount_requires_approval",
        ),
        Index("ix_claims_patient_status", "patient_id", "status"),
    )

    claim_number: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
        comment="Human-readable claim number (e.g., CLM-2025-000001)",
    )

    # Parties
    patient_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning patient",
    )
    doctor_id: Mapped[Optional[UUID]] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Treating doctor, if known",
    )

    # Clinical details
    diagnosis: Mapped[str] = mapped_column(String(500), nullable=False)
    treatment_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Amounts
    claim_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    approved_amount: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(12, 2),
        nullable=True,
        comment="Set only when the claim is APPROVED or PAID",
    )

    # Workflow
    status: Mapped[ClaimStatus] = mapped_column(
        Enum(ClaimStatus, name="claim_status"),
        nullable=False,
        default=ClaimStatus.DRAFT,
        index=True,
    )
    rejection_reason: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    submitted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    # Relationships are loaded explicitly with selectinload
    patient: Mapped["User"] = relationship("User", foreign_keys=[patient_id], lazy="raise")

    def __repr__(self) -> str:
        return f"<Claim {self.claim_number} ({self.status.value if self.status else None})>"
