"""
SQLAlchemy Models for the Medical Claims Service.
"""

from medclaims.models.base import Base, TimeStampedModel, UUIDModel
from medclaims.models.user import User
from medclaims.models.claim import Claim
from medclaims.models.appointment import Appointment
from medclaims.models.payment import Payment
from medclaims.models.document import Document
from medclaims.models.patient_report import PatientReport
from medclaims.models.status_change import StatusChange

__all__ = [
    # Base classes
    "Base",
    "TimeStampedModel",
    "UUIDModel",
    # Domain models
    "User",
    "Claim",
    "Appointment",
    "Payment",
    "Document",
    "PatientReport",
    "StatusChange",
]
