"""
Unit Tests for the Documents Service.
Upload gate: role, appointment match, per-file validation before storage.
"""

from uuid import uuid4

import pytest

from medclaims.core.enums import AppointmentStatus, DocumentType, UserRole
from medclaims.models import Document
from medclaims.services.documents_service import DocumentsService, UploadedFile
from medclaims.services.exceptions import (
    ForbiddenActionError,
    InvalidInputError,
    ResourceNotFoundError,
)

MIB = 1024 * 1024


def _pdf(size: int = 1024, declared_type: str | None = "LAB_REPORT", name: str = "lab.pdf"):
    return UploadedFile.from_bytes(name, "application/pdf", b"%" * size, declared_type)


async def _unread() -> bytes:
    raise AssertionError("file content read before the batch was validated")


def _unread_pdf(size: int, declared_type: str | None = "LAB_REPORT") -> UploadedFile:
    """A part whose reported size is all the service may look at."""
    return UploadedFile("lab.pdf", "application/pdf", size, _unread, declared_type)


@pytest.fixture
def accepted_appointment(patient, doctor, appointment_factory):
    return appointment_factory(patient, doctor, status=AppointmentStatus.ACCEPTED)


@pytest.mark.unit
class TestUploadGate:
    @pytest.mark.asyncio
    async def test_stores_each_file(
        self, doctor, patient, accepted_appointment, session_factory, fake_storage
    ):
        session = session_factory([[accepted_appointment]])
        files = [
            _pdf(),
            UploadedFile.from_bytes("scan.png", "image/png", b"\x89PNG", "SCAN_REPORT"),
        ]

        documents = await DocumentsService(session, fake_storage).upload(
            doctor, accepted_appointment.id, patient.id, files
        )

        assert len(documents) == 2
        assert [d.type for d in documents] == [DocumentType.LAB_REPORT, DocumentType.SCAN_REPORT]
        assert documents[0].original_name == "lab.pdf"
        assert documents[0].uploaded_by_id == doctor.id
        assert documents[1].filename.endswith(".png")
        for document in documents:
            assert document.object_key.startswith(f"medical-reports/{accepted_appointment.id}/")
            assert document.object_key in fake_storage.objects
            assert document.url.endswith(document.object_key)

    @pytest.mark.asyncio
    async def test_oversized_pdf_rejected_without_rows(
        self, doctor, patient, accepted_appointment, session_factory, fake_storage
    ):
        """A 12 MiB PDF is refused unread; nothing is stored and no Document row is created."""
        session = session_factory([[accepted_appointment]])

        with pytest.raises(InvalidInputError) as exc_info:
            await DocumentsService(session, fake_storage).upload(
                doctor, accepted_appointment.id, patient.id, [_unread_pdf(12 * MIB)]
            )

        assert exc_info.value.status_code == 400
        assert session.added_of(Document) == []
        assert fake_storage.objects == {}

    @pytest.mark.asyncio
    async def test_one_bad_file_aborts_batch(
        self, doctor, patient, accepted_appointment, session_factory, fake_storage
    ):
        session = session_factory([[accepted_appointment]])
        files = [
            _unread_pdf(1024),
            UploadedFile.from_bytes("notes.txt", "text/plain", b"hello", "OTHER"),
        ]

        with pytest.raises(InvalidInputError):
            await DocumentsService(session, fake_storage).upload(
                doctor, accepted_appointment.id, patient.id, files
            )

        assert fake_storage.calls == 0
        assert session.added_of(Document) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("declared", [None, "", "XRAY"])
    async def test_document_type_required_and_valid(
        self, declared, doctor, patient, accepted_appointment, session_factory, fake_storage
    ):
        session = session_factory([[accepted_appointment]])

        with pytest.raises(InvalidInputError):
            await DocumentsService(session, fake_storage).upload(
                doctor, accepted_appointment.id, patient.id, [_pdf(declared_type=declared)]
            )

    @pytest.mark.asyncio
    async def test_exactly_at_limit_accepted(
        self, doctor, patient, accepted_appointment, session_factory, fake_storage
    ):
        session = session_factory([[accepted_appointment]])

        documents = await DocumentsService(session, fake_storage).upload(
            doctor, accepted_appointment.id, patient.id, [_pdf(size=10 * MIB)]
        )

        assert documents[0].size == 10 * MIB

    @pytest.mark.asyncio
    async def test_content_larger_than_reported_size(
        self, doctor, patient, accepted_appointment, session_factory, fake_storage
    ):
        """A part that under-reports its size is refused once read; earlier files are removed."""
        session = session_factory([[accepted_appointment]])
        oversized = _pdf(size=11 * MIB, name="b.pdf")
        oversized.size = 1024

        with pytest.raises(InvalidInputError):
            await DocumentsService(session, fake_storage).upload(
                doctor, accepted_appointment.id, patient.id, [_pdf(), oversized]
            )

        assert fake_storage.calls == 1
        assert len(fake_storage.deleted) == 1
        assert fake_storage.objects == {}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [UserRole.PATIENT, UserRole.INSURANCE, UserRole.BANK])
    async def test_only_doctors_upload(
        self, role, user_factory, patient, session_factory, fake_storage
    ):
        with pytest.raises(ForbiddenActionError):
            await DocumentsService(session_factory(), fake_storage).upload(
                user_factory(role), uuid4(), patient.id, [_unread_pdf(1024)]
            )

    @pytest.mark.asyncio
    async def test_no_files(self, doctor, patient, session_factory, fake_storage):
        with pytest.raises(InvalidInputError):
            await DocumentsService(session_factory(), fake_storage).upload(
                doctor, uuid4(), patient.id, []
            )

    @pytest.mark.asyncio
    async def test_no_matching_accepted_appointment(
        self, doctor, patient, session_factory, fake_storage
    ):
        with pytest.raises(ResourceNotFoundError):
            await DocumentsService(session_factory([[]]), fake_storage).upload(
                doctor, uuid4(), patient.id, [_pdf()]
            )

    @pytest.mark.asyncio
    async def test_storage_failure_removes_stored_objects(
        self, doctor, patient, accepted_appointment, session_factory, storage_factory
    ):
        storage = storage_factory(fail_on_call=2)
        session = session_factory([[accepted_appointment]])

        with pytest.raises(ConnectionError):
            await DocumentsService(session, storage).upload(
                doctor, accepted_appointment.id, patient.id, [_pdf(), _pdf(name="b.pdf")]
            )

        assert len(storage.deleted) == 1
        assert storage.objects == {}


@pytest.mark.unit
class TestListDocuments:
    @pytest.mark.asyncio
    async def test_foreign_appointment_not_found(
        self, other_patient, accepted_appointment, session_factory, fake_storage
    ):
        session = session_factory([[accepted_appointment]])

        with pytest.raises(ResourceNotFoundError):
            await DocumentsService(session, fake_storage).list_documents(
                other_patient, accepted_appointment.id
            )

    @pytest.mark.asyncio
    async def test_owner_lists_documents(
        self, patient, accepted_appointment, session_factory, fake_storage
    ):
        session = session_factory([[accepted_appointment], ["doc-a", "doc-b"]])

        documents = await DocumentsService(session, fake_storage).list_documents(
            patient, accepted_appointment.id
        )

        assert documents == ["doc-a", "doc-b"]
