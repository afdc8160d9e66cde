"""
Claims Routes
Claim submission, role-scoped queries and status transitions
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from medclaims.api.config import settings
from medclaims.api.deps import get_current_user, get_notification_center
from medclaims.core.enums import ClaimStatus, NotificationKind
from medclaims.db.connection import get_session
from medclaims.models.claim import Claim
from medclaims.models.status_change import StatusChange
from medclaims.models.user import User
from medclaims.schemas.claim import (
    ClaimCreate,
    ClaimListResponse,
    ClaimResponse,
    ClaimStatsResponse,
    ClaimStatusCount,
    ClaimStatusUpdate,
    StatusChangeResponse,
)
from medclaims.services.claims_service import ClaimsService
from medclaims.services.lifecycle import get_claim_status_display_name
from medclaims.services.notifications import NotificationCenter

router = APIRouter(prefix="/api/claims", tags=["Claims"])


def _notify_patient(notifications: NotificationCenter, claim: Claim) -> None:
    kind = {
        ClaimStatus.APPROVED: NotificationKind.SUCCESS,
        ClaimStatus.PAID: NotificationKind.SUCCESS,
        ClaimStatus.REJECTED: NotificationKind.ERROR,
    }.get(claim.status, NotificationKind.INFO)

    message = f"Claim {claim.claim_number} is now {get_claim_status_display_name(claim.status)}"
    if claim.status == ClaimStatus.REJECTED and claim.rejection_reason:
        message = f"{message}: {claim.rejection_reason}"

    notifications.publish(claim.patient_id, "Claim status updated", message, kind)


@router.post("", response_model=ClaimResponse, status_code=status.HTTP_201_CREATED)
async def create_claim(
    claim_data: ClaimCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> Claim:
    """Create a DRAFT claim for the current patient; ``submit=true`` submits it at once."""
    return await ClaimsService(session).create_claim(current_user, claim_data)


@router.get("", response_model=ClaimListResponse)
async def list_claims(
    status_filter: Optional[ClaimStatus] = Query(None, alias="status"),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> ClaimListResponse:
    """Claims visible to the current user, newest first."""
    claims = await ClaimsService(session).list_claims(current_user, status_filter, limit)
    return ClaimListResponse(
        items=[ClaimResponse.model_validate(c) for c in claims],
        total=len(claims),
    )


@router.get("/stats", response_model=ClaimStatsResponse)
async def claim_stats(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> ClaimStatsResponse:
    """Per-status counts and sums over the claims visible to the current user."""
    rows = await ClaimsService(session).get_stats(current_user)
    by_status = [
        ClaimStatusCount(status=s, count=count, total_claimed=claimed, total_approved=approved)
        for s, count, claimed, approved in rows
    ]
    return ClaimStatsResponse(total=sum(c.count for c in by_status), by_status=by_status)


@router.get("/{claim_id}", response_model=ClaimResponse)
async def get_claim(
    claim_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> Claim:
    return await ClaimsService(session).get_claim(current_user, claim_id)


@router.patch("/{claim_id}", response_model=ClaimResponse)
async def update_claim_status(
    claim_id: UUID,
    update: ClaimStatusUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    notifications: NotificationCenter = Depends(get_notification_center),
) -> Claim:
    """Apply a status transition; ``status=PAID`` settles the claim."""
    claim = await ClaimsService(session).transition(current_user, claim_id, update)
    await session.commit()
    _notify_patient(notifications, claim)
    return claim


@router.post("/{claim_id}/settle", response_model=ClaimResponse)
async def settle_claim(
    claim_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    notifications: NotificationCenter = Depends(get_notification_center),
) -> Claim:
    """Mark an approved claim as PAID once one of its payments has completed."""
    claim = await ClaimsService(session).settle_claim(current_user, claim_id)
    await session.commit()
    _notify_patient(notifications, claim)
    return claim


@router.get("/{claim_id}/history", response_model=list[StatusChangeResponse])
async def claim_history(
    claim_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> list[StatusChange]:
    return await ClaimsService(session).get_history(current_user, claim_id)
