"""
Claim Schemas
Pydantic models for claim API contracts
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from medclaims.core.enums import ClaimStatus, UserRole


class ClaimCreate(BaseModel):
    """Schema for drafting a claim; ``submit`` submits it in the same request."""

    diagnosis: str = Field(..., min_length=1, max_length=500)
    treatment_date: date
    claim_amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    description: Optional[str] = Field(None, max_length=5000)
    doctor_id: Optional[UUID] = None
    submit: bool = False


class ClaimStatusUpdate(BaseModel):
    """
    Requested status transition (PATCH /api/claims/{id}).

    ``approved_amount`` is only accepted together with status APPROVED.
    """

    status: ClaimStatus
    approved_amount: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    rejection_reason: Optional[str] = Field(None, max_length=1000)


class ClaimResponse(BaseModel):
    """Schema for claim responses"""

    id: UUID
    claim_number: str
    patient_id: UUID
    doctor_id: Optional[UUID] = None
    diagnosis: str
    treatment_date: date
    claim_amount: Decimal
    description: Optional[str] = None
    status: ClaimStatus
    approved_amount: Optional[Decimal] = None
    rejection_reason: Optional[str] = None
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ClaimListResponse(BaseModel):
    items: list[ClaimResponse]
    total: int


class ClaimStatusCount(BaseModel):
    status: ClaimStatus
    count: int
    total_claimed: Decimal
    total_approved: Decimal


class ClaimStatsResponse(BaseModel):
    """Per-status counts over the claims visible to the caller."""

    total: int
    by_status: list[ClaimStatusCount]


class StatusChangeResponse(BaseModel):
    previous_status: Optional[str] = None
    new_status: str
    actor_id: Optional[UUID] = None
    actor_role: Optional[UserRole] = None
    note: Optional[str] = None
    changed_at: datetime

    model_config = {"from_attributes": True}
