"""
Services layer for the Medical Claims Service.

Exports the lifecycle engine, the per-entity services and the notification center.
"""

from medclaims.services.exceptions import (
    DuplicateResourceError,
    ForbiddenActionError,
    InvalidInputError,
    InvalidStateError,
    InvalidTransitionError,
    ResourceNotFoundError,
    WorkflowError,
)
from medclaims.services.lifecycle import (
    StatusLifecycle,
    Transition,
    TransitionOutcome,
    TransitionResult,
    appointment_lifecycle,
    claim_lifecycle,
    payment_lifecycle,
)
from medclaims.services.appointments_service import AppointmentsService
from medclaims.services.claims_service import ClaimsService
from medclaims.services.documents_service import DocumentsService, UploadedFile
from medclaims.services.notifications import Notification, NotificationCenter
from medclaims.services.payments_service import PaymentsService
from medclaims.services.reports_service import ReportsService
from medclaims.services.storage import StorageService, get_storage
from medclaims.services.users_service import UsersService

__all__ = [
    # Exceptions
    "WorkflowError",
    "ResourceNotFoundError",
    "ForbiddenActionError",
    "InvalidTransitionError",
    "InvalidStateError",
    "InvalidInputError",
    "DuplicateResourceError",
    # Lifecycle
    "StatusLifecycle",
    "Transition",
    "TransitionOutcome",
    "TransitionResult",
    "claim_lifecycle",
    "appointment_lifecycle",
    "payment_lifecycle",
    # Services
    "ClaimsService",
    "AppointmentsService",
    "PaymentsService",
    "DocumentsService",
    "UploadedFile",
    "ReportsService",
    "UsersService",
    "StorageService",
    "get_storage",
    # Notifications
    "Notification",
    "NotificationCenter",
]
