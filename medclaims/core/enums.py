"""
Core Enumerations for the Medical Claims Service.

Status values are stored as their upper-case names, matching the values exposed
through the API.
"""

from enum import Enum


# =============================================================================
# Identity
# =============================================================================


class UserRole(str, Enum):
    """Actor roles. The role drives every authorization decision."""

    PATIENT = "PATIENT"
    DOCTOR = "DOCTOR"
    INSURANCE = "INSURANCE"  # Insurance agent: reviews and approves claims
    BANK = "BANK"  # Bank representative: disburses payments


# =============================================================================
# Claim Enums
# =============================================================================


class ClaimStatus(str, Enum):
    """Claim lifecycle status.

    State Machine Transitions:
    DRAFT -> SUBMITTED                       (owning patient)
    SUBMITTED -> UNDER_REVIEW | APPROVED | REJECTED   (insurance)
    UNDER_REVIEW -> APPROVED | REJECTED      (insurance)
    APPROVED -> PAID                         (bank, completed payment required)
    """

    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PAID = "PAID"


# =============================================================================
# Appointment Enums
# =============================================================================


class AppointmentStatus(str, Enum):
    """Appointment lifecycle status.

    PENDING -> ACCEPTED | CANCELLED -> ...
    ACCEPTED -> COMPLETED -> CONSULTED
    """

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    CONSULTED = "CONSULTED"


# =============================================================================
# Payment Enums
# =============================================================================


class PaymentStatus(str, Enum):
    """Payment processing status."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


# =============================================================================
# Document Enums
# =============================================================================


class ReportType(str, Enum):
    """Kinds of medical report a doctor can author."""

    DIAGNOSIS_REPORT = "DIAGNOSIS_REPORT"
    TREATMENT_SUMMARY = "TREATMENT_SUMMARY"
    PRESCRIPTION_REPORT = "PRESCRIPTION_REPORT"
    LAB_REPORT = "LAB_REPORT"
    SCAN_REPORT = "SCAN_REPORT"
    FOLLOW_UP_REPORT = "FOLLOW_UP_REPORT"
    DISCHARGE_SUMMARY = "DISCHARGE_SUMMARY"


class DocumentType(str, Enum):
    """Uploaded document kinds (report kinds plus a catch-all)."""

    DIAGNOSIS_REPORT = "DIAGNOSIS_REPORT"
    TREATMENT_SUMMARY = "TREATMENT_SUMMARY"
    PRESCRIPTION_REPORT = "PRESCRIPTION_REPORT"
    LAB_REPORT = "LAB_REPORT"
    SCAN_REPORT = "SCAN_REPORT"
    FOLLOW_UP_REPORT = "FOLLOW_UP_REPORT"
    DISCHARGE_SUMMARY = "DISCHARGE_SUMMARY"
    OTHER = "OTHER"


# =============================================================================
# Audit Enums
# =============================================================================


class LifecycleEntity(str, Enum):
    """Entities whose status changes are recorded in the audit trail."""

    CLAIM = "claim"
    APPOINTMENT = "appointment"
    PAYMENT = "payment"


class NotificationKind(str, Enum):
    """Severity of an in-app notification."""

    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
