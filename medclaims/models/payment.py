"""
Payment Model.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medclaims.core.enums import PaymentStatus
from medclaims.models.base import Base, TimeStampedModel, UUIDModel

if TYPE_CHECKING:
    from medclaims.models.claim import Claim


class Payment(Base, UUIDModel, TimeStampedModel):
    """
    Disbursement of an approved claim, recorded by a bank representative.

    A claim may have several payment rows over time, but at most one that is
    not FAILED.
    """

    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="amount_positive"),
    )

    claim_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("claims.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, name="payment_status"),
        nullable=False,
        default=PaymentStatus.PENDING,
        index=True,
    )

    payment_method: Mapped[Optional[str]] = mapped_column(String(100))
    transaction_id: Mapped[Optional[str]] = mapped_column(String(255), index=True)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    failure_reason: Mapped[Optional[str]] = mapped_column(String(1000))
    payment_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    processed_by: Mapped[Optional[UUID]] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        comment="Bank user who recorded the payment",
    )

    # Relationships
    claim: Mapped["Claim"] = relationship("Claim", lazy="raise")

    def __repr__(self) -> str:
        return f"<Payment {self.id} {self.amount} ({self.status.value if self.status else None})>"
