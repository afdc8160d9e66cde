"""
Unit Tests for the Claims Service.
Service calls run against an in-memory session; queued results answer the
service's queries in the order it issues them.
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from medclaims.api.config import get_settings
from medclaims.core.enums import ClaimStatus, LifecycleEntity, PaymentStatus, UserRole
from medclaims.models import StatusChange
from medclaims.schemas.claim import ClaimCreate, ClaimStatusUpdate
from medclaims.services.claims_service import ClaimsService
from medclaims.services.exceptions import (
    ForbiddenActionError,
    InvalidInputError,
    InvalidStateError,
    InvalidTransitionError,
    ResourceNotFoundError,
)


def _claim_data(**overrides) -> ClaimCreate:
    values = {
        "diagnosis": "Flu Treatment",
        "treatment_date": "2024-02-10",
        "claim_amount": Decimal("150.00"),
    }
    values.update(overrides)
    return ClaimCreate(**values)


@pytest.mark.unit
class TestCreateClaim:
    @pytest.mark.asyncio
    async def test_creates_draft(self, patient, session_factory):
        session = session_factory([[None]])  # no claim number yet this year

        claim = await ClaimsService(session).create_claim(patient, _claim_data())

        assert claim.status == ClaimStatus.DRAFT
        assert claim.patient_id == patient.id
        assert claim.claim_number.endswith("-000001")
        assert claim.submitted_at is None

        history = session.added_of(StatusChange)
        assert len(history) == 1
        assert history[0].previous_status is None
        assert history[0].new_status == "DRAFT"

    @pytest.mark.asyncio
    async def test_draft_then_submit_stamps_submitted_at(self, patient, session_factory):
        session = session_factory([[None]])

        claim = await ClaimsService(session).create_claim(patient, _claim_data(submit=True))

        assert claim.status == ClaimStatus.SUBMITTED
        assert claim.submitted_at is not None
        assert claim.submitted_at >= claim.created_at
        assert [c.new_status for c in session.added_of(StatusChange)] == ["DRAFT", "SUBMITTED"]

    @pytest.mark.asyncio
    async def test_claim_number_sequence_continues(self, patient, session_factory):
        session = session_factory([["CLM-2099-000041"]])

        claim = await ClaimsService(session).create_claim(patient, _claim_data())

        assert claim.claim_number.endswith("-000042")

    @pytest.mark.asyncio
    async def test_claim_number_from_database_sequence(self, patient, session_factory):
        session = session_factory([[7]])
        session.supports_sequences = True

        claim = await ClaimsService(session).create_claim(patient, _claim_data())

        assert claim.claim_number.endswith("-000007")
        assert "claim_number_seq" in str(session.statements[0])

    @pytest.mark.asyncio
    async def test_claim_number_past_six_digits(self, patient, session_factory):
        session = session_factory([["CLM-2099-1000000"]])

        claim = await ClaimsService(session).create_claim(patient, _claim_data())

        assert claim.claim_number.endswith("-1000001")
        assert "ORDER BY length(claims.claim_number) DESC" in str(session.statements[0])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [UserRole.DOCTOR, UserRole.INSURANCE, UserRole.BANK])
    async def test_only_patients_create(self, role, user_factory, session_factory):
        session = session_factory()

        with pytest.raises(ForbiddenActionError):
            await ClaimsService(session).create_claim(user_factory(role), _claim_data())

        assert session.added == []

    @pytest.mark.asyncio
    async def test_doctor_reference_must_be_doctor(self, patient, other_patient, session_factory):
        session = session_factory([[other_patient]])

        with pytest.raises(InvalidInputError):
            await ClaimsService(session).create_claim(
                patient, _claim_data(doctor_id=other_patient.id)
            )

    @pytest.mark.asyncio
    async def test_doctor_reference_accepted(self, patient, doctor, session_factory):
        session = session_factory([[doctor], [None]])

        claim = await ClaimsService(session).create_claim(patient, _claim_data(doctor_id=doctor.id))

        assert claim.doctor_id == doctor.id


@pytest.mark.unit
class TestClaimVisibility:
    @pytest.mark.asyncio
    async def test_owner_sees_claim(self, patient, claim_factory, session_factory):
        claim = claim_factory(patient)
        session = session_factory([[claim]])

        assert await ClaimsService(session).get_claim(patient, claim.id) is claim

    @pytest.mark.asyncio
    async def test_other_patient_gets_not_found(
        self, patient, other_patient, claim_factory, session_factory
    ):
        """A foreign claim answers 404, not 403, so its existence does not leak."""
        claim = claim_factory(patient)
        session = session_factory([[claim]])

        with pytest.raises(ResourceNotFoundError) as exc_info:
            await ClaimsService(session).get_claim(other_patient, claim.id)

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_doctor_sees_only_claims_naming_them(
        self, patient, doctor, user_factory, claim_factory, session_factory
    ):
        claim = claim_factory(patient, doctor_id=doctor.id)

        found = await ClaimsService(session_factory([[claim]])).get_claim(doctor, claim.id)
        assert found is claim

        other_doctor = user_factory(UserRole.DOCTOR)
        with pytest.raises(ResourceNotFoundError):
            await ClaimsService(session_factory([[claim]])).get_claim(other_doctor, claim.id)

    @pytest.mark.asyncio
    async def test_oversight_roles_see_everything(
        self, patient, insurer, banker, claim_factory, session_factory
    ):
        claim = claim_factory(patient)

        for actor in (insurer, banker):
            found = await ClaimsService(session_factory([[claim]])).get_claim(actor, claim.id)
            assert found is claim

    @pytest.mark.asyncio
    async def test_missing_claim(self, patient, session_factory):
        with pytest.raises(ResourceNotFoundError):
            await ClaimsService(session_factory()).get_claim(patient, uuid4())


@pytest.mark.unit
class TestClaimTransitions:
    @pytest.mark.asyncio
    async def test_review_and_approve_scenario(
        self, patient, insurer, claim_factory, session_factory
    ):
        """SUBMITTED 150.00 -> UNDER_REVIEW -> APPROVED with 135.00."""
        claim = claim_factory(patient, status=ClaimStatus.SUBMITTED)
        session = session_factory([[claim], [claim]])
        service = ClaimsService(session)

        await service.transition(insurer, claim.id, ClaimStatusUpdate(status=ClaimStatus.UNDER_REVIEW))
        assert claim.status == ClaimStatus.UNDER_REVIEW

        await service.transition(
            insurer,
            claim.id,
            ClaimStatusUpdate(status=ClaimStatus.APPROVED, approved_amount=Decimal("135.00")),
        )
        assert claim.status == ClaimStatus.APPROVED
        assert claim.approved_amount == Decimal("135.00")
        assert claim.approved_at is not None

        history = session.added_of(StatusChange)
        assert [(c.previous_status, c.new_status) for c in history] == [
            ("SUBMITTED", "UNDER_REVIEW"),
            ("UNDER_REVIEW", "APPROVED"),
        ]
        assert all(c.entity_type == LifecycleEntity.CLAIM for c in history)
        assert all(c.actor_role == UserRole.INSURANCE for c in history)

    @pytest.mark.asyncio
    async def test_repeated_approval_is_invalid_transition(
        self, patient, insurer, claim_factory, session_factory
    ):
        claim = claim_factory(
            patient, status=ClaimStatus.APPROVED, approved_amount=Decimal("135.00")
        )
        session = session_factory([[claim]])

        with pytest.raises(InvalidTransitionError):
            await ClaimsService(session).transition(
                insurer, claim.id, ClaimStatusUpdate(status=ClaimStatus.APPROVED)
            )

        assert claim.approved_amount == Decimal("135.00")

    @pytest.mark.asyncio
    async def test_patient_cannot_approve_own_claim(self, patient, claim_factory, session_factory):
        claim = claim_factory(patient, status=ClaimStatus.SUBMITTED)

        with pytest.raises(ForbiddenActionError):
            await ClaimsService(session_factory([[claim]])).transition(
                patient, claim.id, ClaimStatusUpdate(status=ClaimStatus.APPROVED)
            )

        assert claim.status == ClaimStatus.SUBMITTED

    @pytest.mark.asyncio
    async def test_approval_without_amount_defaults_to_claim_amount(
        self, patient, insurer, claim_factory, session_factory
    ):
        claim = claim_factory(patient, status=ClaimStatus.SUBMITTED)

        await ClaimsService(session_factory([[claim]])).transition(
            insurer, claim.id, ClaimStatusUpdate(status=ClaimStatus.APPROVED)
        )

        assert claim.approved_amount == Decimal("150.00")

    @pytest.mark.asyncio
    async def test_approval_without_amount_rejected_when_required(
        self, patient, insurer, claim_factory, session_factory
    ):
        claim = claim_factory(patient, status=ClaimStatus.SUBMITTED)
        strict = get_settings().model_copy(update={"CLAIMS_REQUIRE_APPROVED_AMOUNT": True})

        with pytest.raises(InvalidInputError):
            await ClaimsService(session_factory([[claim]]), strict).transition(
                insurer, claim.id, ClaimStatusUpdate(status=ClaimStatus.APPROVED)
            )

        assert claim.status == ClaimStatus.SUBMITTED
        assert claim.approved_amount is None

    @pytest.mark.asyncio
    async def test_approved_amount_cannot_exceed_claim(
        self, patient, insurer, claim_factory, session_factory
    ):
        claim = claim_factory(patient, status=ClaimStatus.SUBMITTED)

        with pytest.raises(InvalidInputError):
            await ClaimsService(session_factory([[claim]])).transition(
                insurer,
                claim.id,
                ClaimStatusUpdate(status=ClaimStatus.APPROVED, approved_amount=Decimal("150.01")),
            )

        assert claim.status == ClaimStatus.SUBMITTED

    @pytest.mark.asyncio
    async def test_approved_amount_only_with_approval(
        self, patient, insurer, claim_factory, session_factory
    ):
        """approvedAmount is only ever present on APPROVED or PAID claims."""
        claim = claim_factory(patient, status=ClaimStatus.SUBMITTED)

        with pytest.raises(InvalidInputError):
            await ClaimsService(session_factory([[claim]])).transition(
                insurer,
                claim.id,
                ClaimStatusUpdate(status=ClaimStatus.REJECTED, approved_amount=Decimal("10.00")),
            )

        assert claim.approved_amount is None

    @pytest.mark.asyncio
    async def test_rejection_records_reason(self, patient, insurer, claim_factory, session_factory):
        claim = claim_factory(patient, status=ClaimStatus.UNDER_REVIEW)
        session = session_factory([[claim]])

        await ClaimsService(session).transition(
            insurer,
            claim.id,
            ClaimStatusUpdate(status=ClaimStatus.REJECTED, rejection_reason="Not covered"),
        )

        assert claim.status == ClaimStatus.REJECTED
        assert claim.rejection_reason == "Not covered"
        assert claim.approved_amount is None
        assert session.added_of(StatusChange)[0].note == "Not covered"


@pytest.mark.unit
class TestSettleClaim:
    @pytest.mark.asyncio
    async def test_settle_requires_completed_payment(
        self, patient, banker, claim_factory, session_factory
    ):
        claim = claim_factory(patient, status=ClaimStatus.APPROVED, approved_amount=Decimal("135"))
        session = session_factory([[claim], []])

        with pytest.raises(InvalidStateError):
            await ClaimsService(session).settle_claim(banker, claim.id)

        assert claim.status == ClaimStatus.APPROVED
        assert claim.paid_at is None

    @pytest.mark.asyncio
    async def test_settle_with_completed_payment(
        self, patient, banker, claim_factory, payment_factory, session_factory
    ):
        claim = claim_factory(patient, status=ClaimStatus.APPROVED, approved_amount=Decimal("135"))
        payment = payment_factory(claim, status=PaymentStatus.COMPLETED)
        session = session_factory([[claim], [payment]])

        settled = await ClaimsService(session).settle_claim(banker, claim.id)

        assert settled.status == ClaimStatus.PAID
        assert settled.paid_at is not None
        assert settled.approved_amount == Decimal("135")

    @pytest.mark.asyncio
    async def test_patch_to_paid_routes_to_settlement(
        self, patient, banker, claim_factory, session_factory
    ):
        claim = claim_factory(patient, status=ClaimStatus.APPROVED, approved_amount=Decimal("135"))
        session = session_factory([[claim], []])

        with pytest.raises(InvalidStateError):
            await ClaimsService(session).transition(
                banker, claim.id, ClaimStatusUpdate(status=ClaimStatus.PAID)
            )

    @pytest.mark.asyncio
    async def test_insurance_cannot_settle(self, patient, insurer, claim_factory, session_factory):
        claim = claim_factory(patient, status=ClaimStatus.APPROVED, approved_amount=Decimal("135"))

        with pytest.raises(ForbiddenActionError):
            await ClaimsService(session_factory([[claim]])).settle_claim(insurer, claim.id)

    @pytest.mark.asyncio
    async def test_unapproved_claim_cannot_be_settled(
        self, patient, banker, claim_factory, session_factory
    ):
        claim = claim_factory(patient, status=ClaimStatus.UNDER_REVIEW)

        with pytest.raises(InvalidTransitionError):
            await ClaimsService(session_factory([[claim]])).settle_claim(banker, claim.id)


@pytest.mark.unit
class TestClaimQueries:
    @pytest.mark.asyncio
    async def test_list_returns_rows(self, patient, claim_factory, session_factory):
        claims = [claim_factory(patient), claim_factory(patient)]
        session = session_factory([claims])

        result = await ClaimsService(session).list_claims(patient, ClaimStatus.DRAFT)

        assert result == claims
        assert len(session.statements) == 1

    @pytest.mark.asyncio
    async def test_stats_rows(self, insurer, session_factory):
        rows = [
            (ClaimStatus.APPROVED, 2, Decimal("300.00"), Decimal("270.00")),
            (ClaimStatus.DRAFT, 1, Decimal("120.00"), 0),
        ]
        stats = await ClaimsService(session_factory([rows])).get_stats(insurer)

        assert stats[0] == (ClaimStatus.APPROVED, 2, Decimal("300.00"), Decimal("270.00"))
        assert stats[1][3] == Decimal("0")

    @pytest.mark.asyncio
    async def test_history_requires_visibility(
        self, patient, other_patient, claim_factory, session_factory
    ):
        claim = claim_factory(patient)

        with pytest.raises(ResourceNotFoundError):
            await ClaimsService(session_factory([[claim]])).get_history(other_patient, claim.id)
