"""
Payments Service.

Provides:
- Payment creation gate (bank only, approved claims only)
- Payment status progression by the bank
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from medclaims.api.config import Settings, get_settings
from medclaims.core.enums import ClaimStatus, LifecycleEntity, PaymentStatus, UserRole
from medclaims.models.claim import Claim
from medclaims.models.payment import Payment
from medclaims.models.user import User
from medclaims.schemas.payment import PaymentStatusUpdate
from medclaims.services.audit import record_status_change
from medclaims.services.exceptions import (
    ForbiddenActionError,
    InvalidInputError,
    InvalidStateError,
    ResourceNotFoundError,
)
from medclaims.services.lifecycle import payment_lifecycle
from medclaims.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentsService:
    """Service for payment operations. Every operation is restricted to BANK users."""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()

    @staticmethod
    def _require_bank(actor: User) -> None:
        if actor.role != UserRole.BANK:
            raise ForbiddenActionError("Only bank users can manage payments")

    async def create_payment(
        self,
        actor: User,
        claim_id: UUID,
        amount: Decimal,
        payment_method: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Payment:
        """
        Record a PENDING payment against an approved claim.

        The claim itself is left unchanged; settlement is a separate step.

        Raises:
            ForbiddenActionError: Actor is not a bank user
            ResourceNotFoundError: Claim does not exist
            InvalidStateError: Claim is not APPROVED, or already has an active payment
            InvalidInputError: Amount is not positive
        """
        self._require_bank(actor)

        result = await self.session.execute(
            select(Claim).where(Claim.id == claim_id).options(selectinload(Claim.patient))
        )
        claim = result.scalar_one_or_none()
        if claim is None:
            raise ResourceNotFoundError("Claim not found")

        if claim.status != ClaimStatus.APPROVED:
            raise InvalidStateError(
                f"Payments can only be created for approved claims (claim is {claim.status.value})"
            )

        result = await self.session.execute(
            select(Payment)
            .where(Payment.claim_id == claim.id, Payment.status != PaymentStatus.FAILED)
            .limit(1)
        )
        if result.scalars().first() is not None:
            raise InvalidStateError("Claim already has an active payment")

        if amount is None or amount <= 0:
            raise InvalidInputError("Payment amount must be greater than zero")

        payment = Payment(
            claim_id=claim.id,
            claim=claim,
            amount=amount,
            status=PaymentStatus.PENDING,
            payment_method=payment_method,
            notes=notes,
            processed_by=actor.id,
        )
        self.session.add(payment)
        await self.session.flush()

        record_status_change(
            self.session, LifecycleEntity.PAYMENT, payment.id, None, PaymentStatus.PENDING, actor
        )
        logger.info(f"Payment {payment.id} of {amount} created for claim {claim.claim_number}")
        return payment

    async def get_payment(self, actor: User, payment_id: UUID) -> Payment:
        self._require_bank(actor)

        result = await self.session.execute(
            select(Payment)
            .where(Payment.id == payment_id)
            .options(selectinload(Payment.claim).selectinload(Claim.patient))
        )
        payment = result.scalar_one_or_none()
        if payment is None:
            raise ResourceNotFoundError("Payment not found")
        return payment

    async def list_payments(
        self,
        actor: User,
        status: Optional[PaymentStatus] = None,
        claim_id: Optional[UUID] = None,
        limit: Optional[int] = None,
    ) -> list[Payment]:
        self._require_bank(actor)

        query = select(Payment).options(selectinload(Payment.claim).selectinload(Claim.patient))
        if status is not None:
            query = query.where(Payment.status == status)
        if claim_id is not None:
            query = query.where(Payment.claim_id == claim_id)
        query = query.order_by(Payment.created_at.desc()).limit(
            limit or self.settings.DEFAULT_PAGE_LIMIT
        )

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def transition(
        self, actor: User, payment_id: UUID, update: PaymentStatusUpdate
    ) -> Payment:
        """
        Move a payment along its lifecycle.

        transaction_id is only recorded on COMPLETED and failure_reason only on FAILED.
        """
        payment = await self.get_payment(actor, payment_id)

        payment_lifecycle.evaluate(payment.status, actor.role, update.status).raise_for_outcome()

        if update.transaction_id and update.status != PaymentStatus.COMPLETED:
            raise InvalidInputError("transaction_id can only be set when completing a payment")
        if update.failure_reason and update.status != PaymentStatus.FAILED:
            raise InvalidInputError("failure_reason can only be set when failing a payment")

        previous = payment.status
        payment_lifecycle.apply(payment, actor.role, update.status)

        if update.transaction_id:
            payment.transaction_id = update.transaction_id
        if update.failure_reason:
            payment.failure_reason = update.failure_reason
        if update.notes is not None:
            payment.notes = update.notes
        payment.processed_by = actor.id

        record_status_change(
            self.session, LifecycleEntity.PAYMENT, payment.id,
            previous, update.status, actor, note=update.failure_reason,
        )
        await self.session.flush()
        return payment

