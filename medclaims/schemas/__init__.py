"""
Pydantic schemas for request and response bodies.
"""

from medclaims.schemas.appointment import (
    AppointmentCreate,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentStatusUpdate,
)
from medclaims.schemas.auth import LoginRequest, RefreshTokenRequest, Token
from medclaims.schemas.claim import (
    ClaimCreate,
    ClaimListResponse,
    ClaimResponse,
    ClaimStatsResponse,
    ClaimStatusCount,
    ClaimStatusUpdate,
    StatusChangeResponse,
)
from medclaims.schemas.document import (
    DocumentListResponse,
    DocumentResponse,
    DocumentUploadResponse,
)
from medclaims.schemas.notification import NotificationListResponse, NotificationResponse
from medclaims.schemas.patient_report import PatientReportCreate, PatientReportResponse
from medclaims.schemas.payment import PaymentCreate, PaymentResponse, PaymentStatusUpdate
from medclaims.schemas.user import (
    ProfileUpdate,
    ProfileUpdateResponse,
    UserCreate,
    UserResponse,
    UserSummary,
)

__all__ = [
    # Auth
    "LoginRequest",
    "RefreshTokenRequest",
    "Token",
    # Users
    "UserCreate",
    "UserResponse",
    "UserSummary",
    "ProfileUpdate",
    "ProfileUpdateResponse",
    # Claims
    "ClaimCreate",
    "ClaimStatusUpdate",
    "ClaimResponse",
    "ClaimListResponse",
    "ClaimStatsResponse",
    "ClaimStatusCount",
    "StatusChangeResponse",
    # Appointments
    "AppointmentCreate",
    "AppointmentStatusUpdate",
    "AppointmentResponse",
    "AppointmentListResponse",
    # Payments
    "PaymentCreate",
    "PaymentStatusUpdate",
    "PaymentResponse",
    # Documents and reports
    "DocumentResponse",
    "DocumentUploadResponse",
    "DocumentListResponse",
    "PatientReportCreate",
    "PatientReportResponse",
    # Notifications
    "NotificationResponse",
    "NotificationListResponse",
]
