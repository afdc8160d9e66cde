"""
Role-scoped visibility rules.

Each rule exists twice: as SQL filter clauses for list queries, and as a
predicate applied to a single loaded record. Records a caller cannot see are
reported as not found so their existence does not leak.
"""

from typing import Any

from medclaims.core.enums import UserRole
from medclaims.models.appointment import Appointment
from medclaims.models.claim import Claim
from medclaims.models.patient_report import PatientReport
from medclaims.models.user import User

# Roles that see every claim and appointment
OVERSIGHT_ROLES = frozenset({UserRole.INSURANCE, UserRole.BANK})


def claim_filters(actor: User) -> list[Any]:
    if actor.role == UserRole.PATIENT:
        return [Claim.patient_id == actor.id]
    if actor.role == UserRole.DOCTOR:
        return [Claim.doctor_id == actor.id]
    return []


def can_view_claim(actor: User, claim: Claim) -> bool:
    if actor.role == UserRole.PATIENT:
        return claim.patient_id == actor.id
    if actor.role == UserRole.DOCTOR:
        return claim.doctor_id is not None and claim.doctor_id == actor.id
    return actor.role in OVERSIGHT_ROLES


def appointment_filters(actor: User) -> list[Any]:
    if actor.role == UserRole.PATIENT:
        return [Appointment.patient_id == actor.id]
    if actor.role == UserRole.DOCTOR:
        return [Appointment.doctor_id == actor.id]
    return []


def can_view_appointment(actor: User, appointment: Appointment) -> bool:
    if actor.role == UserRole.PATIENT:
        return appointment.patient_id == actor.id
    if actor.role == UserRole.DOCTOR:
        return appointment.doctor_id == actor.id
    return actor.role in OVERSIGHT_ROLES


def report_filters(actor: User) -> list[Any]:
    if actor.role == UserRole.PATIENT:
        return [PatientReport.patient_id == actor.id]
    if actor.role == UserRole.DOCTOR:
        return [PatientReport.doctor_id == actor.id]
    return []
