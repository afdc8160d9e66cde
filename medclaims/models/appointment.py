"""
Appointment Model.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medclaims.core.enums import AppointmentStatus
from medclaims.models.base import Base, TimeStampedModel, UUIDModel

if TYPE_CHECKING:
    from medclaims.models.user import User


class Appointment(Base, UUIDModel, TimeStampedModel):
    """
    A scheduled patient-doctor encounter.

    Booked by the patient in PENDING; only the assigned doctor advances it.
    Appointments are never deleted.
    """

    __tablename__ = "appointments"
    __table_args__ = (
        Index("ix_appointments_doctor_status", "doctor_id", "status"),
    )

    patient_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    doctor_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    scheduled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[AppointmentStatus] = mapped_column(
        Enum(AppointmentStatus, name="appointment_status"),
        nullable=False,
        default=AppointmentStatus.PENDING,
    )
    reason: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Relationships
    patient: Mapped["User"] = relationship("User", foreign_keys=[patient_id], lazy="raise")
    doctor: Mapped["User"] = relationship("User", foreign_keys=[doctor_id], lazy="raise")

    def __repr__(self) -> str:
        return f"<Appointment {self.id} ({self.status.value if self.status else None})>"
