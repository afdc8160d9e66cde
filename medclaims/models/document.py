"""
Document Model
Medical documents uploaded by doctors to object storage
"""

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import BigInteger, Enum, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medclaims.core.enums import DocumentType
from medclaims.models.base import Base, TimeStampedModel, UUIDModel

if TYPE_CHECKING:
    from medclaims.models.appointment import Appointment
    from medclaims.models.user import User


class Document(Base, UUIDModel, TimeStampedModel):
    """
    Medical document attached to an appointment.

    Created only by the appointment's doctor; immutable afterwards.
    """

    __tablename__ = "documents"

    appointment_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    uploaded_by_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    type: Mapped[DocumentType] = mapped_column(
        Enum(DocumentType, name="document_type"), nullable=False
    )

    # File Metadata
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    original_name: Mapped[str] = mapped_column(String(500), nullable=False)
    object_key: Mapped[str] = mapped_column(Text, nullable=False)  # Object storage key
    url: Mapped[str] = mapped_column(Text, nullable=False)
    size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    mime_type: Mapped[str] = mapped_column(String(150), nullable=False)

    # Relationships
    appointment: Mapped["Appointment"] = relationship("Appointment", lazy="raise")
    uploaded_by: Mapped["User"] = relationship("User", lazy="raise")

    def __repr__(self) -> str:
        return f"<Document {self.original_name}>"
