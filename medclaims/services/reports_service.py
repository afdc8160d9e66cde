"""
Patient Reports Service.

Structured consultation reports written by doctors after a consultation.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from medclaims.api.config import Settings, get_settings
from medclaims.core.enums import AppointmentStatus, UserRole
from medclaims.models.appointment import Appointment
from medclaims.models.patient_report import PatientReport
from medclaims.models.user import User
from medclaims.schemas.patient_report import PatientReportCreate
from medclaims.services.access import report_filters
from medclaims.services.exceptions import (
    ForbiddenActionError,
    InvalidStateError,
    ResourceNotFoundError,
)
from medclaims.utils.logging import get_logger

logger = get_logger(__name__)


class ReportsService:
    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()

    async def create_report(self, actor: User, data: PatientReportCreate) -> PatientReport:
        """
        Write a report for a consulted appointment of the acting doctor.

        Raises:
            ForbiddenActionError: Actor is not a doctor
            ResourceNotFoundError: Appointment is not this doctor's with this patient
            InvalidStateError: Appointment has not been consulted yet
        """
        if actor.role != UserRole.DOCTOR:
            raise ForbiddenActionError("Only doctors can create patient reports")

        result = await self.session.execute(
            select(Appointment).where(Appointment.id == data.appointment_id)
        )
        appointment = result.scalar_one_or_none()
        if (
            appointment is None
            or appointment.doctor_id != actor.id
            or appointment.patient_id != data.patient_id
        ):
            raise ResourceNotFoundError("Appointment not found")

        if appointment.status != AppointmentStatus.CONSULTED:
            raise InvalidStateError("Reports can only be written for consulted appointments")

        report = PatientReport(
            patient_id=data.patient_id,
            doctor_id=actor.id,
            appointment_id=appointment.id,
            report_type=data.report_type,
            title=data.title,
            description=data.description,
            diagnosis=data.diagnosis,
            treatment=data.treatment,
            medications=data.medications,
            recommendations=data.recommendations,
            document_url=data.document_url,
            follow_up_date=data.follow_up_date,
        )
        self.session.add(report)
        await self.session.flush()

        logger.info(f"Report {report.id} created for appointment {appointment.id}")
        return report

    async def list_reports(
        self, actor: User, patient_id: Optional[UUID] = None
    ) -> list[PatientReport]:
        query = select(PatientReport).where(*report_filters(actor))
        if patient_id is not None:
            query = query.where(PatientReport.patient_id == patient_id)

        result = await self.session.execute(
            query.order_by(PatientReport.created_at.desc()).limit(self.settings.MAX_PAGE_LIMIT)
        )
        return list(result.scalars().all())
