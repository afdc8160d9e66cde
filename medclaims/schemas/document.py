"""
Document Schemas
Pydantic models for document API contracts
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from medclaims.core.enums import DocumentType
from medclaims.schemas.user import UserSummary


class DocumentAppointmentSummary(BaseModel):
    id: UUID
    scheduled_at: datetime
    patient: Optional[UserSummary] = None
    doctor: Optional[UserSummary] = None

    model_config = {"from_attributes": True}


class DocumentResponse(BaseModel):
    """Schema for document responses"""

    id: UUID
    appointment_id: UUID
    uploaded_by_id: UUID
    type: DocumentType
    filename: str
    original_name: str
    url: str
    size: int
    mime_type: str
    created_at: datetime
    uploaded_by: Optional[UserSummary] = None
    appointment: Optional[DocumentAppointmentSummary] = None

    model_config = {"from_attributes": True}


class DocumentUploadResponse(BaseModel):
    message: str
    documents: list[DocumentResponse]


class DocumentListResponse(BaseModel):
    documents: list[DocumentResponse]
