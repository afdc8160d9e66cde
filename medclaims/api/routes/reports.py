"""
Patient Report Routes
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from medclaims.api.deps import get_current_user, get_notification_center
from medclaims.db.connection import get_session
from medclaims.models.patient_report import PatientReport
from medclaims.models.user import User
from medclaims.schemas.patient_report import PatientReportCreate, PatientReportResponse
from medclaims.services.notifications import NotificationCenter
from medclaims.services.reports_service import ReportsService

router = APIRouter(prefix="/api/patient-reports", tags=["Patient Reports"])


@router.get("", response_model=list[PatientReportResponse])
async def list_reports(
    patient_id: Optional[UUID] = Query(None, alias="patientId"),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> list[PatientReport]:
    return await ReportsService(session).list_reports(current_user, patient_id)


@router.post("", response_model=PatientReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(
    data: PatientReportCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    notifications: NotificationCenter = Depends(get_notification_center),
) -> PatientReport:
    """Write a report for a CONSULTED appointment of the current doctor."""
    report = await ReportsService(session).create_report(current_user, data)
    await session.commit()

    notifications.publish(report.patient_id, "New patient report", report.title)
    return report
