"""
Appointment Routes
Booking by patients, status progression by the assigned doctor
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from medclaims.api.config import settings
from medclaims.api.deps import get_current_user, get_notification_center
from medclaims.core.enums import AppointmentStatus, NotificationKind
from medclaims.db.connection import get_session
from medclaims.models.appointment import Appointment
from medclaims.models.user import User
from medclaims.schemas.appointment import (
    AppointmentCreate,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentStatusUpdate,
)
from medclaims.services.appointments_service import AppointmentsService
from medclaims.services.notifications import NotificationCenter

router = APIRouter(prefix="/api/appointments", tags=["Appointments"])


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    data: AppointmentCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    notifications: NotificationCenter = Depends(get_notification_center),
) -> Appointment:
    appointment = await AppointmentsService(session).create_appointment(current_user, data)
    await session.commit()

    notifications.publish(
        appointment.doctor_id,
        "New appointment request",
        f"{current_user.name or current_user.email} requested an appointment "
        f"on {appointment.scheduled_at:%Y-%m-%d %H:%M}",
    )
    return appointment


@router.get("", response_model=AppointmentListResponse)
async def list_appointments(
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status"),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> AppointmentListResponse:
    appointments = await AppointmentsService(session).list_appointments(
        current_user, status_filter, limit
    )
    return AppointmentListResponse(
        items=[AppointmentResponse.model_validate(a) for a in appointments],
        total=len(appointments),
    )


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> Appointment:
    return await AppointmentsService(session).get_appointment(current_user, appointment_id)


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: UUID,
    update: AppointmentStatusUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    notifications: NotificationCenter = Depends(get_notification_center),
) -> Appointment:
    """Status transition by the assigned doctor."""
    appointment = await AppointmentsService(session).transition(
        current_user, appointment_id, update
    )
    await session.commit()

    kind = (
        NotificationKind.WARNING
        if appointment.status == AppointmentStatus.CANCELLED
        else NotificationKind.INFO
    )
    notifications.publish(
        appointment.patient_id,
        "Appointment updated",
        f"Your appointment on {appointment.scheduled_at:%Y-%m-%d %H:%M} "
        f"is now {appointment.status.value.lower()}",
        kind,
    )
    return appointment
