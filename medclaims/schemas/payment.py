"""
Payment Schemas
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from medclaims.core.enums import PaymentStatus
from medclaims.schemas.user import UserSummary


class PaymentCreate(BaseModel):
    claim_id: UUID
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    payment_method: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=5000)


class PaymentStatusUpdate(BaseModel):
    status: PaymentStatus
    transaction_id: Optional[str] = Field(None, max_length=255)
    failure_reason: Optional[str] = Field(None, max_length=1000)
    notes: Optional[str] = Field(None, max_length=5000)


class PaymentClaimSummary(BaseModel):
    """The claim a payment settles, with its patient."""

    id: UUID
    claim_number: str
    patient: Optional[UserSummary] = None

    model_config = {"from_attributes": True}


class PaymentResponse(BaseModel):
    id: UUID
    claim_id: UUID
    amount: Decimal
    status: PaymentStatus
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    notes: Optional[str] = None
    failure_reason: Optional[str] = None
    payment_date: Optional[datetime] = None
    processed_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime
    claim: Optional[PaymentClaimSummary] = None

    model_config = {"from_attributes": True}
