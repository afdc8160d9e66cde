"""
Status Change Audit Trail.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import BigInteger, DateTime, Enum, Index, Integer, String, func
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from medclaims.core.enums import LifecycleEntity, UserRole
from medclaims.models.base import Base


class StatusChange(Base):
    """
    One accepted status transition of a claim, appointment or payment.

    Statuses are stored as plain strings since the three entities use
    different enumerations. Rows written in one transaction share
    ``changed_at``; the increasing ``id`` keeps them in insertion order.
    """

    __tablename__ = "status_changes"
    __table_args__ = (
        Index("ix_status_changes_entity", "entity_type", "entity_id"),
    )

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )

    entity_type: Mapped[LifecycleEntity] = mapped_column(
        Enum(LifecycleEntity, name="lifecycle_entity"), nullable=False
    )
    entity_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)

    previous_status: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    new_status: Mapped[str] = mapped_column(String(30), nullable=False)

    actor_id: Mapped[Optional[UUID]] = mapped_column(PG_UUID(as_uuid=True), nullable=True)
    actor_role: Mapped[Optional[UserRole]] = mapped_column(
        Enum(UserRole, name="user_role"), nullable=True
    )
    note: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<StatusChange {self.entity_type.value}:{self.entity_id} {self.previous_status}->{self.new_status}>"
