"""
Status Lifecycle Engine.

One explicit transition table per entity (claims, appointments, payments),
evaluated by a single generic state machine so every route enforces the same
rules.

A table row is (from status, to status, role, owning party, timestamp field).
Evaluation order:
    1. no row for (current -> requested)        -> INVALID_TRANSITION
    2. row exists, actor has a different role   -> FORBIDDEN
    3. row requires the owning party, actor isn't -> FORBIDDEN
    4. otherwise                                -> ALLOWED

Claim diagram:
    DRAFT -> SUBMITTED                              (owning patient)
    SUBMITTED -> UNDER_REVIEW | APPROVED | REJECTED (insurance)
    UNDER_REVIEW -> APPROVED | REJECTED             (insurance)
    APPROVED -> PAID                                (bank)

Appointment diagram (assigned doctor only):
    PENDING -> ACCEPTED | CANCELLED
    ACCEPTED -> COMPLETED
    COMPLETED -> CONSULTED

Payment diagram (bank only):
    PENDING -> PROCESSING | COMPLETED | FAILED
    PROCESSING -> COMPLETED | FAILED
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from medclaims.core.enums import AppointmentStatus, ClaimStatus, PaymentStatus, UserRole
from medclaims.services.exceptions import ForbiddenActionError, InvalidTransitionError
from medclaims.utils.logging import get_logger

logger = get_logger(__name__)

S = TypeVar("S", bound=Enum)


class TransitionOutcome(str, Enum):
    """Decision for a requested status change."""

    ALLOWED = "allowed"
    FORBIDDEN = "forbidden"
    INVALID_TRANSITION = "invalid_transition"


class Party(str, Enum):
    """Relationship the actor must have to the record."""

    OWNER = "owner"  # Patient who owns the claim
    ASSIGNED_DOCTOR = "assigned_doctor"  # Doctor the appointment is booked with


@dataclass(frozen=True)
class Transition(Generic[S]):
    """A single row of a transition table."""

    from_status: S
    to_status: S
    role: UserRole
    party: Optional[Party] = None
    stamps: Optional[str] = None  # Timestamp attribute set when the transition is applied


@dataclass
class TransitionResult(Generic[S]):
    """Result of evaluating a transition request."""

    outcome: TransitionOutcome
    from_status: S
    requested_status: S
    transition: Optional[Transition[S]] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome == TransitionOutcome.ALLOWED

    @property
    def to_status(self) -> Optional[S]:
        return self.transition.to_status if self.transition else None

    def raise_for_outcome(self) -> None:
        """Raise the matching service exception when the request was refused."""
        if self.outcome == TransitionOutcome.INVALID_TRANSITION:
            raise InvalidTransitionError(self.error or "Invalid status transition")
        if self.outcome == TransitionOutcome.FORBIDDEN:
            raise ForbiddenActionError(self.error or "Forbidden")


class StatusLifecycle(Generic[S]):
    """
    Finite state machine over one status enumeration.

    Pure decision logic: evaluate() never touches the database. apply()
    mutates the in-memory entity only.
    """

    def __init__(self, name: str, initial: S, transitions: list[Transition[S]]):
        self.name = name
        self.initial = initial
        self._rules: dict[tuple[S, S], Transition[S]] = {}
        self._from_status_map: dict[S, list[Transition[S]]] = {}

        for transition in transitions:
            key = (transition.from_status, transition.to_status)
            if key in self._rules:
                raise ValueError(f"Duplicate {name} transition: {key[0].value} -> {key[1].value}")
            if transition.from_status == transition.to_status:
                raise ValueError(f"Self-transition not allowed in {name} table: {key[0].value}")
            self._rules[key] = transition
            self._from_status_map.setdefault(transition.from_status, []).append(transition)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_valid_transitions(
        self, status: S, role: Optional[UserRole] = None
    ) -> list[Transition[S]]:
        """Transitions leaving ``status``, optionally only those open to ``role``."""
        transitions = self._from_status_map.get(status, [])
        if role is None:
            return list(transitions)
        return [t for t in transitions if t.role == role]

    def get_next_statuses(self, status: S, role: Optional[UserRole] = None) -> list[S]:
        return [t.to_status for t in self.get_valid_transitions(status, role)]

    def can_transition(self, from_status: S, to_status: S) -> bool:
        return (from_status, to_status) in self._rules

    def is_terminal(self, status: S) -> bool:
        """A status with no outgoing transitions."""
        return not self._from_status_map.get(status)

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def evaluate(
        self,
        current: S,
        role: UserRole,
        requested: S,
        *,
        is_party: bool = True,
    ) -> TransitionResult[S]:
        """
        Decide whether ``role`` may move a record from ``current`` to ``requested``.

        Args:
            current: Status the record is in now
            role: Role of the acting user
            requested: Status the actor asks for
            is_party: Whether the actor is the owning party (claim owner,
                assigned doctor); only consulted for rows that require it
        """
        transition = self._rules.get((current, requested))

        if transition is None:
            return TransitionResult(
                outcome=TransitionOutcome.INVALID_TRANSITION,
                from_status=current,
                requested_status=requested,
                error=f"Invalid {self.name} transition: {current.value} -> {requested.value}",
            )

        if transition.role != role:
            return TransitionResult(
                outcome=TransitionOutcome.FORBIDDEN,
                from_status=current,
                requested_status=requested,
                error=(
                    f"Role {role.value} may not move a {self.name} "
                    f"from {current.value} to {requested.value}"
                ),
            )

        if transition.party is not None and not is_party:
            return TransitionResult(
                outcome=TransitionOutcome.FORBIDDEN,
                from_status=current,
                requested_status=requested,
                error=f"Only the {transition.party.value.replace('_', ' ')} may perform this {self.name} transition",
            )

        return TransitionResult(
            outcome=TransitionOutcome.ALLOWED,
            from_status=current,
            requested_status=requested,
            transition=transition,
        )

    def apply(
        self,
        entity: Any,
        role: UserRole,
        requested: S,
        *,
        is_party: bool = True,
        now: Optional[datetime] = None,
    ) -> TransitionResult[S]:
        """
        Evaluate and, when allowed, set ``entity.status`` and its timestamp.

        Raises:
            InvalidTransitionError: No rule for the requested change
            ForbiddenActionError: Wrong role or not the owning party
        """
        result = self.evaluate(entity.status, role, requested, is_party=is_party)
        if not result.success:
            logger.info(f"Refused {self.name} {getattr(entity, 'id', '?')}: {result.error}")
            result.raise_for_outcome()

        entity.status = requested
        if result.transition and result.transition.stamps:
            setattr(entity, result.transition.stamps, now or datetime.now(timezone.utc))

        logger.info(
            f"{self.name.capitalize()} {getattr(entity, 'id', '?')} transitioned: "
            f"{result.from_status.value} -> {requested.value} (role: {role.value})"
        )
        return result


# =============================================================================
# Transition Tables
# =============================================================================


CLAIM_TRANSITIONS: list[Transition[ClaimStatus]] = [
    # From DRAFT
    Transition(ClaimStatus.DRAFT, ClaimStatus.SUBMITTED, UserRole.PATIENT,
               party=Party.OWNER, stamps="submitted_at"),

    # From SUBMITTED
    Transition(ClaimStatus.SUBMITTED, ClaimStatus.UNDER_REVIEW, UserRole.INSURANCE),
    Transition(ClaimStatus.SUBMITTED, ClaimStatus.APPROVED, UserRole.INSURANCE,
               stamps="approved_at"),
    Transition(ClaimStatus.SUBMITTED, ClaimStatus.REJECTED, UserRole.INSURANCE),

    # From UNDER_REVIEW
    Transition(ClaimStatus.UNDER_REVIEW, ClaimStatus.APPROVED, UserRole.INSURANCE,
               stamps="approved_at"),
    Transition(ClaimStatus.UNDER_REVIEW, ClaimStatus.REJECTED, UserRole.INSURANCE),

    # From APPROVED; the completed-payment precondition is checked by the claims service
    Transition(ClaimStatus.APPROVED, ClaimStatus.PAID, UserRole.BANK, stamps="paid_at"),
]


APPOINTMENT_TRANSITIONS: list[Transition[AppointmentStatus]] = [
    Transition(AppointmentStatus.PENDING, AppointmentStatus.ACCEPTED, UserRole.DOCTOR,
               party=Party.ASSIGNED_DOCTOR),
    Transition(AppointmentStatus.PENDING, AppointmentStatus.CANCELLED, UserRole.DOCTOR,
               party=Party.ASSIGNED_DOCTOR),
    Transition(AppointmentStatus.ACCEPTED, AppointmentStatus.COMPLETED, UserRole.DOCTOR,
               party=Party.ASSIGNED_DOCTOR),
    Transition(AppointmentStatus.COMPLETED, AppointmentStatus.CONSULTED, UserRole.DOCTOR,
               party=Party.ASSIGNED_DOCTOR),
]


PAYMENT_TRANSITIONS: list[Transition[PaymentStatus]] = [
    Transition(PaymentStatus.PENDING, PaymentStatus.PROCESSING, UserRole.BANK),
    Transition(PaymentStatus.PENDING, PaymentStatus.COMPLETED, UserRole.BANK,
               stamps="payment_date"),
    Transition(PaymentStatus.PENDING, PaymentStatus.FAILED, UserRole.BANK),
    Transition(PaymentStatus.PROCESSING, PaymentStatus.COMPLETED, UserRole.BANK,
               stamps="payment_date"),
    Transition(PaymentStatus.PROCESSING, PaymentStatus.FAILED, UserRole.BANK),
]


claim_lifecycle: StatusLifecycle[ClaimStatus] = StatusLifecycle(
    "claim", ClaimStatus.DRAFT, CLAIM_TRANSITIONS
)
appointment_lifecycle: StatusLifecycle[AppointmentStatus] = StatusLifecycle(
    "appointment", AppointmentStatus.PENDING, APPOINTMENT_TRANSITIONS
)
payment_lifecycle: StatusLifecycle[PaymentStatus] = StatusLifecycle(
    "payment", PaymentStatus.PENDING, PAYMENT_TRANSITIONS
)


# =============================================================================
# Status Helpers
# =============================================================================


def claim_has_approved_amount(status: ClaimStatus) -> bool:
    """Statuses in which a claim may carry an approved amount."""
    return status in (ClaimStatus.APPROVED, ClaimStatus.PAID)


def get_claim_status_display_name(status: ClaimStatus) -> str:
    """Human-readable claim status."""
    display_names = {
        ClaimStatus.DRAFT: "Draft",
        ClaimStatus.SUBMITTED: "Submitted",
        ClaimStatus.UNDER_REVIEW: "Under Review",
        ClaimStatus.APPROVED: "Approved",
        ClaimStatus.REJECTED: "Rejected",
        ClaimStatus.PAID: "Paid",
    }
    return display_names.get(status, status.value)
