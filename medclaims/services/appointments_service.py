"""
Appointments Service.

Booking by patients and status progression by the assigned doctor.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from medclaims.api.config import Settings, get_settings
from medclaims.core.enums import AppointmentStatus, LifecycleEntity, UserRole
from medclaims.models.appointment import Appointment
from medclaims.models.user import User
from medclaims.schemas.appointment import AppointmentCreate, AppointmentStatusUpdate
from medclaims.services.access import appointment_filters, can_view_appointment
from medclaims.services.audit import record_status_change
from medclaims.services.exceptions import (
    ForbiddenActionError,
    InvalidInputError,
    ResourceNotFoundError,
)
from medclaims.services.lifecycle import appointment_lifecycle
from medclaims.utils.logging import get_logger

logger = get_logger(__name__)


class AppointmentsService:
    """Service for appointment operations."""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()

    async def create_appointment(self, actor: User, data: AppointmentCreate) -> Appointment:
        """
        Book an appointment for the acting patient.

        Raises:
            ForbiddenActionError: Actor is not a patient
            InvalidInputError: doctor_id is not an active doctor
        """
        if actor.role != UserRole.PATIENT:
            raise ForbiddenActionError("Only patients can book appointments")

        result = await self.session.execute(select(User).where(User.id == data.doctor_id))
        doctor = result.scalar_one_or_none()
        if doctor is None or doctor.role != UserRole.DOCTOR or not doctor.is_active:
            raise InvalidInputError("doctor_id does not reference an active doctor")

        appointment = Appointment(
            patient_id=actor.id,
            doctor_id=doctor.id,
            scheduled_at=data.scheduled_at,
            reason=data.reason,
            notes=data.notes,
            status=AppointmentStatus.PENDING,
        )
        self.session.add(appointment)
        await self.session.flush()

        record_status_change(
            self.session, LifecycleEntity.APPOINTMENT, appointment.id,
            None, AppointmentStatus.PENDING, actor,
        )
        logger.info(f"Appointment {appointment.id} booked with doctor {doctor.id}")
        return appointment

    async def get_appointment(self, actor: User, appointment_id: UUID) -> Appointment:
        result = await self.session.execute(
            select(Appointment).where(Appointment.id == appointment_id)
        )
        appointment = result.scalar_one_or_none()

        if appointment is None or not can_view_appointment(actor, appointment):
            raise ResourceNotFoundError("Appointment not found")
        return appointment

    async def list_appointments(
        self,
        actor: User,
        status: Optional[AppointmentStatus] = None,
        limit: Optional[int] = None,
    ) -> list[Appointment]:
        query = select(Appointment).where(*appointment_filters(actor))
        if status is not None:
            query = query.where(Appointment.status == status)
        query = query.order_by(Appointment.scheduled_at.desc()).limit(
            limit or self.settings.DEFAULT_PAGE_LIMIT
        )

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def transition(
        self, actor: User, appointment_id: UUID, update: AppointmentStatusUpdate
    ) -> Appointment:
        """
        Move an appointment along its lifecycle. Only the assigned doctor may.

        Raises:
            ResourceNotFoundError: Appointment not visible to the actor
            ForbiddenActionError: Not a doctor, or not the assigned doctor
            InvalidTransitionError: Transition not defined from the current status
        """
        appointment = await self.get_appointment(actor, appointment_id)

        previous = appointment.status
        appointment_lifecycle.apply(
            appointment, actor.role, update.status,
            is_party=appointment.doctor_id == actor.id,
        )
        if update.notes is not None:
            appointment.notes = update.notes

        record_status_change(
            self.session, LifecycleEntity.APPOINTMENT, appointment.id,
            previous, update.status, actor, note=update.notes,
        )
        await self.session.flush()
        return appointment
