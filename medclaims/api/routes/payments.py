"""
Payment Routes
Bank-only payment creation and status progression
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from medclaims.api.config import settings
from medclaims.api.deps import get_notification_center, require_roles
from medclaims.core.enums import NotificationKind, PaymentStatus, UserRole
from medclaims.db.connection import get_session
from medclaims.models.payment import Payment
from medclaims.models.user import User
from medclaims.schemas.payment import PaymentCreate, PaymentResponse, PaymentStatusUpdate
from medclaims.services.notifications import NotificationCenter
from medclaims.services.payments_service import PaymentsService

router = APIRouter(prefix="/api/payments", tags=["Payments"])

require_bank = require_roles(UserRole.BANK)


@router.get("", response_model=list[PaymentResponse])
async def list_payments(
    status_filter: Optional[PaymentStatus] = Query(None, alias="status"),
    claim_id: Optional[UUID] = Query(None),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    current_user: User = Depends(require_bank),
    session: AsyncSession = Depends(get_session),
) -> list[Payment]:
    return await PaymentsService(session).list_payments(
        current_user, status_filter, claim_id, limit
    )


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_payment(
    data: PaymentCreate,
    current_user: User = Depends(require_bank),
    session: AsyncSession = Depends(get_session),
    notifications: NotificationCenter = Depends(get_notification_center),
) -> Payment:
    """Create a PENDING payment for an APPROVED claim."""
    payment = await PaymentsService(session).create_payment(
        current_user, data.claim_id, data.amount, data.payment_method, data.notes
    )
    await session.commit()

    notifications.publish(
        payment.claim.patient_id,
        "Payment initiated",
        f"A payment of {payment.amount} has been initiated for claim {payment.claim.claim_number}",
        NotificationKind.SUCCESS,
    )
    return payment


@router.patch("/{payment_id}", response_model=PaymentResponse)
async def update_payment_status(
    payment_id: UUID,
    update: PaymentStatusUpdate,
    current_user: User = Depends(require_bank),
    session: AsyncSession = Depends(get_session),
) -> Payment:
    return await PaymentsService(session).transition(current_user, payment_id, update)
