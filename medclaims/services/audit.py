"""
Status change audit trail.
"""

from enum import Enum
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from medclaims.core.enums import LifecycleEntity
from medclaims.models.status_change import StatusChange
from medclaims.models.user import User


def record_status_change(
    session: AsyncSession,
    entity_type: LifecycleEntity,
    entity_id: UUID,
    previous_status: Optional[Enum],
    new_status: Enum,
    actor: Optional[User] = None,
    note: Optional[str] = None,
) -> StatusChange:
    """Add a StatusChange row to the session; flushed with the surrounding transaction."""
    change = StatusChange(
        entity_type=entity_type,
        entity_id=entity_id,
        previous_status=previous_status.value if previous_status is not None else None,
        new_status=new_status.value,
        actor_id=actor.id if actor is not None else None,
        actor_role=actor.role if actor is not None else None,
        note=note,
    )
    session.add(change)
    return change


async def get_status_history(
    session: AsyncSession,
    entity_type: LifecycleEntity,
    entity_id: UUID,
) -> list[StatusChange]:
    """Status changes of one record, oldest first."""
    result = await session.execute(
        select(StatusChange)
        .where(StatusChange.entity_type == entity_type, StatusChange.entity_id == entity_id)
        .order_by(StatusChange.changed_at, StatusChange.id)
    )
    return list(result.scalars().all())
