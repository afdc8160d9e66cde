"""
Documents Service.

Provides:
- Validated multi-file upload of medical reports by the appointment's doctor
- Role-scoped document listing

All files of a batch are validated before any of them is stored.
"""

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Awaitable, Callable, Optional
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from medclaims.api.config import Settings, get_settings
from medclaims.core.enums import AppointmentStatus, DocumentType, UserRole
from medclaims.models.appointment import Appointment
from medclaims.models.document import Document
from medclaims.models.user import User
from medclaims.services.access import OVERSIGHT_ROLES, can_view_appointment
from medclaims.services.exceptions import (
    ForbiddenActionError,
    InvalidInputError,
    ResourceNotFoundError,
)
from medclaims.services.storage import StorageService
from medclaims.utils.logging import get_logger

logger = get_logger(__name__)

REPORTS_PREFIX = "medical-reports"


def get_extension_from_content_type(content_type: str) -> str:
    """Get file extension from content type."""
    mapping = {
        "application/pdf": "pdf",
        "image/jpeg": "jpg",
        "image/png": "png",
        "application/msword": "doc",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    }
    return mapping.get(content_type.lower(), "bin")


@dataclass
class UploadedFile:
    """
    One file of an upload batch, with the document type declared for it.

    ``size`` is the size reported for the multipart part; the content is only
    fetched through ``read`` once the whole batch has passed validation.
    """

    filename: str
    content_type: str
    size: int
    read: Callable[[], Awaitable[bytes]]
    declared_type: Optional[str] = None

    @classmethod
    def from_bytes(
        cls,
        filename: str,
        content_type: str,
        data: bytes,
        declared_type: Optional[str] = None,
    ) -> "UploadedFile":
        async def read() -> bytes:
            return data

        return cls(filename, content_type, len(data), read, declared_type)

    @property
    def extension(self) -> str:
        suffix = PurePosixPath(self.filename or "").suffix.lstrip(".").lower()
        return suffix or get_extension_from_content_type(self.content_type)


class DocumentsService:
    """Service for medical document uploads."""

    def __init__(
        self,
        session: AsyncSession,
        storage: StorageService,
        settings: Optional[Settings] = None,
    ):
        self.session = session
        self.storage = storage
        self.settings = settings or get_settings()

    # =========================================================================
    # Validation
    # =========================================================================

    def _too_large(self, label: str) -> InvalidInputError:
        return InvalidInputError(
            f"{label} exceeds the {self.settings.UPLOAD_MAX_SIZE_MB} MB size limit"
        )

    def _validate_file(self, index: int, upload: UploadedFile) -> DocumentType:
        label = upload.filename or f"file {index}"

        if not upload.declared_type:
            raise InvalidInputError(f"Missing document type for {label}")
        try:
            doc_type = DocumentType(upload.declared_type)
        except ValueError as err:
            raise InvalidInputError(
                f"Invalid document type '{upload.declared_type}' for {label}"
            ) from err

        if upload.size > self.settings.upload_max_size_bytes:
            raise self._too_large(label)

        if upload.content_type.lower() not in self.settings.UPLOAD_ALLOWED_MIME_TYPES:
            raise InvalidInputError(f"File type {upload.content_type} is not allowed for {label}")

        return doc_type

    # =========================================================================
    # Upload
    # =========================================================================

    async def upload(
        self,
        actor: User,
        appointment_id: UUID,
        patient_id: UUID,
        files: list[UploadedFile],
    ) -> list[Document]:
        """
        Store a batch of reports against an accepted appointment.

        Raises:
            ForbiddenActionError: Actor is not a doctor
            InvalidInputError: No files, or any file fails validation
            ResourceNotFoundError: No accepted appointment of this doctor and patient
        """
        if actor.role != UserRole.DOCTOR:
            raise ForbiddenActionError("Only doctors can upload medical reports")

        if not files:
            raise InvalidInputError("No files provided")

        result = await self.session.execute(
            select(Appointment)
            .where(
                Appointment.id == appointment_id,
                Appointment.doctor_id == actor.id,
                Appointment.patient_id == patient_id,
                Appointment.status == AppointmentStatus.ACCEPTED,
            )
            .options(selectinload(Appointment.patient), selectinload(Appointment.doctor))
        )
        appointment = result.scalar_one_or_none()
        if appointment is None:
            raise ResourceNotFoundError("Appointment not found or not accepted")

        doc_types = [self._validate_file(i, upload) for i, upload in enumerate(files)]

        stored: list[str] = []
        documents: list[Document] = []
        try:
            for index, (upload, doc_type) in enumerate(zip(files, doc_types)):
                data = await upload.read()
                if len(data) > self.settings.upload_max_size_bytes:
                    raise self._too_large(upload.filename or f"file {index}")

                filename = f"{uuid4()}.{upload.extension}"
                object_key = f"{REPORTS_PREFIX}/{appointment.id}/{filename}"

                url = await self.storage.upload_bytes(object_key, data, upload.content_type)
                stored.append(object_key)

                document = Document(
                    appointment_id=appointment.id,
                    appointment=appointment,
                    uploaded_by_id=actor.id,
                    uploaded_by=actor,
                    type=doc_type,
                    filename=filename,
                    original_name=upload.filename or filename,
                    object_key=object_key,
                    url=url,
                    size=len(data),
                    mime_type=upload.content_type,
                )
                self.session.add(document)
                documents.append(document)

            await self.session.flush()
        except InvalidInputError:
            await self._discard(stored)
            raise
        except Exception:
            logger.exception(
                f"Upload for appointment {appointment.id} failed after {len(stored)} file(s)"
            )
            await self._discard(stored)
            raise

        logger.info(
            f"Doctor {actor.id} uploaded {len(documents)} document(s) "
            f"for appointment {appointment.id}"
        )
        return documents

    async def _discard(self, object_keys: list[str]) -> None:
        for key in object_keys:
            try:
                await self.storage.delete(key)
            except Exception as e:
                logger.warning(f"Could not remove orphaned object {key}: {e}")

    # =========================================================================
    # Listing
    # =========================================================================

    async def list_documents(
        self,
        actor: User,
        appointment_id: Optional[UUID] = None,
        patient_id: Optional[UUID] = None,
    ) -> list[Document]:
        """
        Documents visible to the actor, newest first.

        Doctors and patients only see documents of their own appointments.
        """
        if appointment_id is not None:
            result = await self.session.execute(
                select(Appointment).where(Appointment.id == appointment_id)
            )
            appointment = result.scalar_one_or_none()
            if appointment is None or not can_view_appointment(actor, appointment):
                raise ResourceNotFoundError("Appointment not found")

        query = select(Document).join(Appointment, Document.appointment_id == Appointment.id)
        if actor.role == UserRole.PATIENT:
            query = query.where(Appointment.patient_id == actor.id)
        elif actor.role == UserRole.DOCTOR:
            query = query.where(Appointment.doctor_id == actor.id)
        elif actor.role not in OVERSIGHT_ROLES:
            raise ForbiddenActionError("Not allowed to view documents")

        if appointment_id is not None:
            query = query.where(Document.appointment_id == appointment_id)
        if patient_id is not None:
            query = query.where(Appointment.patient_id == patient_id)

        query = query.options(
            selectinload(Document.uploaded_by),
            selectinload(Document.appointment).selectinload(Appointment.patient),
            selectinload(Document.appointment).selectinload(Appointment.doctor),
        )
        result = await self.session.execute(
            query.order_by(Document.created_at.desc()).limit(self.settings.MAX_PAGE_LIMIT)
        )
        return list(result.scalars().all())
