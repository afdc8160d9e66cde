"""
Pytest Configuration and Fixtures.
Shared test fixtures for all test modules.
"""

import os

# Settings are read at import time; the test environment must exist first
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-key-that-is-at-least-32-chars")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from collections import deque
from itertools import count
from types import SimpleNamespace
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any, Iterable
from uuid import uuid4

import pytest

from medclaims.core.enums import (
    AppointmentStatus,
    ClaimStatus,
    PaymentStatus,
    UserRole,
)
from medclaims.models import Appointment, Claim, Payment, StatusChange, User


# =============================================================================
# In-memory session
# =============================================================================


class FakeResult:
    """Stands in for a SQLAlchemy Result over a fixed list of rows."""

    def __init__(self, rows: Iterable[Any] = ()):
        self._rows = list(rows)

    def scalar_one_or_none(self) -> Any:
        return self._rows[0] if self._rows else None

    def scalar_one(self) -> Any:
        if len(self._rows) != 1:
            raise AssertionError(f"Expected exactly one row, got {len(self._rows)}")
        return self._rows[0]

    def scalar(self) -> Any:
        return self.scalar_one_or_none()

    def scalars(self) -> "FakeResult":
        return self

    def first(self) -> Any:
        return self.scalar_one_or_none()

    def all(self) -> list[Any]:
        return list(self._rows)


class FakeSession:
    """
    Async session double.

    ``execute`` answers queued results in order (an empty result once the
    queue is drained). ``flush`` assigns ids and timestamps to added objects
    the way the database would.
    """

    supports_sequences = False

    def __init__(self, results: Iterable[Any] = ()):
        self._results: deque[FakeResult] = deque(
            r if isinstance(r, FakeResult) else FakeResult(r) for r in results
        )
        self.statements: list[Any] = []
        self.added: list[Any] = []
        self.flushes = 0
        self.commits = 0
        self.rollbacks = 0
        self._serial = count(1)

    def queue(self, *results: Any) -> "FakeSession":
        for r in results:
            self._results.append(r if isinstance(r, FakeResult) else FakeResult(r))
        return self

    async def execute(self, statement: Any, *_args: Any, **_kwargs: Any) -> FakeResult:
        self.statements.append(statement)
        return self._results.popleft() if self._results else FakeResult()

    def get_bind(self) -> SimpleNamespace:
        return SimpleNamespace(
            dialect=SimpleNamespace(name="fake", supports_sequences=self.supports_sequences)
        )

    def add(self, obj: Any) -> None:
        self.added.append(obj)

    def added_of(self, model: type) -> list[Any]:
        return [obj for obj in self.added if isinstance(obj, model)]

    async def flush(self) -> None:
        self.flushes += 1
        now = datetime.now(UTC)
        for obj in self.added:
            if getattr(obj, "id", None) is None:
                obj.id = next(self._serial) if isinstance(obj, StatusChange) else uuid4()
            for attr in ("created_at", "updated_at", "changed_at"):
                if hasattr(type(obj), attr) and getattr(obj, attr, None) is None:
                    setattr(obj, attr, now)

    async def commit(self) -> None:
        await self.flush()
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1

    async def refresh(self, _obj: Any) -> None:
        return None

    async def close(self) -> None:
        return None


class FakeStorage:
    """Object storage double recording uploads and deletions."""

    def __init__(self, fail_on_call: int | None = None):
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.calls = 0
        self.fail_on_call = fail_on_call

    async def upload_bytes(self, object_name: str, data: bytes, content_type: str) -> str:
        self.calls += 1
        if self.fail_on_call is not None and self.calls == self.fail_on_call:
            raise ConnectionError("storage unavailable")
        self.objects[object_name] = data
        return f"http://storage.test/medical-documents/{object_name}"

    async def delete(self, object_name: str) -> None:
        self.deleted.append(object_name)
        self.objects.pop(object_name, None)

    async def check(self) -> bool:
        return True


# =============================================================================
# Builders
# =============================================================================


def make_user(role: UserRole = UserRole.PATIENT, **overrides: Any) -> User:
    now = datetime.now(UTC)
    values: dict[str, Any] = {
        "id": uuid4(),
        "email": f"{role.value.lower()}-{uuid4().hex[:6]}@demo.com",
        "name": f"Test {role.value.title()}",
        "role": role,
        "phone": "+1-555-0100",
        "address": "1 Test Street",
        "is_active": True,
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return User(**values)


def make_claim(patient: User, **overrides: Any) -> Claim:
    now = datetime.now(UTC)
    values: dict[str, Any] = {
        "id": uuid4(),
        "claim_number": f"CLM-{now.year}-000001",
        "patient_id": patient.id,
        "doctor_id": None,
        "diagnosis": "Flu Treatment",
        "treatment_date": now.date(),
        "claim_amount": Decimal("150.00"),
        "status": ClaimStatus.DRAFT,
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return Claim(**values)


def make_appointment(patient: User, doctor: User, **overrides: Any) -> Appointment:
    now = datetime.now(UTC)
    values: dict[str, Any] = {
        "id": uuid4(),
        "patient_id": patient.id,
        "doctor_id": doctor.id,
        "scheduled_at": now,
        "status": AppointmentStatus.PENDING,
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return Appointment(**values)


def make_payment(claim: Claim, **overrides: Any) -> Payment:
    now = datetime.now(UTC)
    values: dict[str, Any] = {
        "id": uuid4(),
        "claim_id": claim.id,
        "amount": Decimal("135.00"),
        "status": PaymentStatus.PENDING,
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return Payment(**values)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def patient() -> User:
    return make_user(UserRole.PATIENT)


@pytest.fixture
def other_patient() -> User:
    return make_user(UserRole.PATIENT)


@pytest.fixture
def doctor() -> User:
    return make_user(UserRole.DOCTOR)


@pytest.fixture
def insurer() -> User:
    return make_user(UserRole.INSURANCE)


@pytest.fixture
def banker() -> User:
    return make_user(UserRole.BANK)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def fake_storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def session_factory():
    """Build a FakeSession answering the given results in order."""
    return FakeSession


@pytest.fixture
def storage_factory():
    return FakeStorage


@pytest.fixture
def user_factory():
    return make_user


@pytest.fixture
def claim_factory():
    return make_claim


@pytest.fixture
def appointment_factory():
    return make_appointment


@pytest.fixture
def payment_factory():
    return make_payment


# Configure pytest markers
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "api: mark test as an API test"
    )
    config.addinivalue_line(
        "markers", "security: mark test as security-related"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as running against a real SQL engine"
    )
