"""
Patient Report Schemas
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from medclaims.core.enums import ReportType


class PatientReportCreate(BaseModel):
    patient_id: UUID
    appointment_id: UUID
    report_type: ReportType
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    diagnosis: Optional[str] = None
    treatment: Optional[str] = None
    medications: Optional[str] = None
    recommendations: Optional[str] = None
    document_url: Optional[str] = Field(None, max_length=2000)
    follow_up_date: Optional[date] = None


class PatientReportResponse(BaseModel):
    id: UUID
    patient_id: UUID
    doctor_id: UUID
    appointment_id: UUID
    report_type: ReportType
    title: str
    description: str
    diagnosis: Optional[str] = None
    treatment: Optional[str] = None
    medications: Optional[str] = None
    recommendations: Optional[str] = None
    document_url: Optional[str] = None
    follow_up_date: Optional[date] = None
    created_at: datetime

    model_config = {"from_attributes": True}
