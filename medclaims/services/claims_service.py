"""
Claims Service.

Provides:
- Claim drafting and submission by patients
- Role-scoped claim queries
- Status transitions through the claim lifecycle
- Claim settlement (APPROVED -> PAID) once a payment has completed
- Claim number generation
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from medclaims.api.config import Settings, get_settings
from medclaims.core.enums import ClaimStatus, LifecycleEntity, PaymentStatus, UserRole
from medclaims.models.claim import CLAIM_NUMBER_SEQUENCE, Claim
from medclaims.models.payment import Payment
from medclaims.models.status_change import StatusChange
from medclaims.models.user import User
from medclaims.schemas.claim import ClaimCreate, ClaimStatusUpdate
from medclaims.services.access import can_view_claim, claim_filters
from medclaims.services.audit import get_status_history, record_status_change
from medclaims.services.exceptions import (
    ForbiddenActionError,
    InvalidInputError,
    InvalidStateError,
    ResourceNotFoundError,
)
from medclaims.services.lifecycle import claim_lifecycle
from medclaims.utils.logging import get_logger

logger = get_logger(__name__)


class ClaimsService:
    """
    Service for claim operations.

    Every method takes the acting user; authorization and visibility are
    decided here so each API entry point enforces identical rules.
    """

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()

    # =========================================================================
    # Claim Number Generation
    # =========================================================================

    async def _generate_claim_number(self) -> str:
        """
        Generate the next claim number.

        Format: CLM-{YEAR}-{SEQUENCE:06d}
        Example: CLM-2025-000001

        The numeric part comes from the ``claim_number_seq`` sequence, which
        never hands the same value to two transactions. Engines without
        sequences continue from the numerically highest number of the year.
        """
        year = datetime.now(timezone.utc).year

        if self.session.get_bind().dialect.supports_sequences:
            result = await self.session.execute(select(CLAIM_NUMBER_SEQUENCE.next_value()))
            return f"CLM-{year}-{result.scalar_one():06d}"

        # Longer numbers sort first so CLM-2025-1000000 outranks CLM-2025-999999
        result = await self.session.execute(
            select(Claim.claim_number)
            .where(Claim.claim_number.like(f"CLM-{year}-%"))
            .order_by(func.length(Claim.claim_number).desc(), Claim.claim_number.desc())
            .limit(1)
        )
        max_number = result.scalar_one_or_none()

        next_seq = 1
        if max_number:
            try:
                next_seq = int(max_number.split("-")[-1]) + 1
            except (ValueError, IndexError):
                next_seq = 1

        return f"CLM-{year}-{next_seq:06d}"

    # =========================================================================
    # Create
    # =========================================================================

    async def create_claim(self, actor: User, data: ClaimCreate) -> Claim:
        """
        Draft a claim owned by the acting patient, submitting it when requested.

        Raises:
            ForbiddenActionError: Actor is not a patient
            InvalidInputError: doctor_id does not name a doctor
        """
        if actor.role != UserRole.PATIENT:
            raise ForbiddenActionError("Only patients can create claims")

        if data.doctor_id is not None:
            result = await self.session.execute(select(User).where(User.id == data.doctor_id))
            doctor = result.scalar_one_or_none()
            if doctor is None or doctor.role != UserRole.DOCTOR:
                raise InvalidInputError("doctor_id does not reference a doctor")

        claim = Claim(
            claim_number=await self._generate_claim_number(),
            patient_id=actor.id,
            doctor_id=data.doctor_id,
            diagnosis=data.diagnosis,
            treatment_date=data.treatment_date,
            claim_amount=data.claim_amount,
            description=data.description,
            status=ClaimStatus.DRAFT,
        )
        self.session.add(claim)
        await self.session.flush()

        record_status_change(
            self.session, LifecycleEntity.CLAIM, claim.id, None, ClaimStatus.DRAFT, actor,
            note="Claim created",
        )
        logger.info(f"Created claim {claim.claim_number} (ID: {claim.id})")

        if data.submit:
            self._apply(claim, actor, ClaimStatus.SUBMITTED)
            await self.session.flush()

        return claim

    # =========================================================================
    # Read
    # =========================================================================

    async def get_claim(self, actor: User, claim_id: UUID) -> Claim:
        """
        Load a claim visible to the actor.

        Raises:
            ResourceNotFoundError: Claim is absent or not visible to the actor
        """
        result = await self.session.execute(select(Claim).where(Claim.id == claim_id))
        claim = result.scalar_one_or_none()

        if claim is None or not can_view_claim(actor, claim):
            raise ResourceNotFoundError("Claim not found")
        return claim

    async def list_claims(
        self,
        actor: User,
        status: Optional[ClaimStatus] = None,
        limit: Optional[int] = None,
    ) -> list[Claim]:
        """Claims visible to the actor, newest first."""
        query = select(Claim).where(*claim_filters(actor))
        if status is not None:
            query = query.where(Claim.status == status)
        query = query.order_by(Claim.created_at.desc()).limit(limit or self.settings.DEFAULT_PAGE_LIMIT)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_stats(self, actor: User) -> list[tuple[ClaimStatus, int, Decimal, Decimal]]:
        """(status, count, total claimed, total approved) over the visible claims."""
        query = (
            select(
                Claim.status,
                func.count(Claim.id),
                func.coalesce(func.sum(Claim.claim_amount), 0),
                func.coalesce(func.sum(Claim.approved_amount), 0),
            )
            .where(*claim_filters(actor))
            .group_by(Claim.status)
        )
        result = await self.session.execute(query)
        return [
            (row[0], int(row[1]), Decimal(row[2]), Decimal(row[3]))
            for row in result.all()
        ]

    async def get_history(self, actor: User, claim_id: UUID) -> list[StatusChange]:
        claim = await self.get_claim(actor, claim_id)
        return await get_status_history(self.session, LifecycleEntity.CLAIM, claim.id)

    # =========================================================================
    # Transitions
    # =========================================================================

    def _apply(self, claim: Claim, actor: User, requested: ClaimStatus, note: Optional[str] = None) -> None:
        previous = claim.status
        claim_lifecycle.apply(claim, actor.role, requested, is_party=claim.patient_id == actor.id)
        record_status_change(
            self.session, LifecycleEntity.CLAIM, claim.id, previous, requested, actor, note=note
        )

    async def transition(self, actor: User, claim_id: UUID, update: ClaimStatusUpdate) -> Claim:
        """
        Move a claim to the requested status.

        Raises:
            ResourceNotFoundError: Claim not visible to the actor
            ForbiddenActionError: Wrong role or not the owner
            InvalidTransitionError: Transition not defined from the current status
            InvalidInputError: approved_amount/rejection_reason misuse
            InvalidStateError: PAID requested without a completed payment
        """
        claim = await self.get_claim(actor, claim_id)

        if update.status == ClaimStatus.PAID:
            if update.approved_amount is not None or update.rejection_reason:
                raise InvalidInputError("Settlement accepts no amount or reason")
            return await self._settle(actor, claim)

        claim_lifecycle.evaluate(
            claim.status, actor.role, update.status, is_party=claim.patient_id == actor.id
        ).raise_for_outcome()

        if update.approved_amount is not None and update.status != ClaimStatus.APPROVED:
            raise InvalidInputError("approved_amount can only be set when approving a claim")
        if update.rejection_reason and update.status != ClaimStatus.REJECTED:
            raise InvalidInputError("rejection_reason can only be set when rejecting a claim")

        if update.status == ClaimStatus.APPROVED:
            claim.approved_amount = self._resolve_approved_amount(claim, update.approved_amount)
        elif update.status == ClaimStatus.REJECTED:
            claim.rejection_reason = update.rejection_reason

        self._apply(claim, actor, update.status, note=update.rejection_reason)
        await self.session.flush()
        return claim

    def _resolve_approved_amount(self, claim: Claim, requested: Optional[Decimal]) -> Decimal:
        if requested is None:
            if self.settings.CLAIMS_REQUIRE_APPROVED_AMOUNT:
                raise InvalidInputError("approved_amount is required to approve a claim")
            logger.warning(
                f"Claim {claim.claim_number} approved without approved_amount; "
                f"approving full claim amount {claim.claim_amount}"
            )
            return claim.claim_amount

        if requested > claim.claim_amount:
            raise InvalidInputError("approved_amount cannot exceed the claim amount")
        return requested

    async def settle_claim(self, actor: User, claim_id: UUID) -> Claim:
        """
        Mark an approved claim as PAID.

        Requires role BANK and a COMPLETED payment for the claim.
        """
        claim = await self.get_claim(actor, claim_id)
        return await self._settle(actor, claim)

    async def _settle(self, actor: User, claim: Claim) -> Claim:
        claim_lifecycle.evaluate(claim.status, actor.role, ClaimStatus.PAID).raise_for_outcome()

        result = await self.session.execute(
            select(Payment)
            .where(Payment.claim_id == claim.id, Payment.status == PaymentStatus.COMPLETED)
            .limit(1)
        )
        payment = result.scalars().first()
        if payment is None:
            raise InvalidStateError("Claim has no completed payment")

        self._apply(claim, actor, ClaimStatus.PAID, note=f"Settled by payment {payment.id}")
        await self.session.flush()
        return claim
