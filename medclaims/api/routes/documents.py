"""
Document Routes
Multipart upload of medical reports and role-scoped listing

The upload form carries ``files`` (repeated), ``appointmentId``, ``patientId``
and one ``type_<i>`` field per file giving its DocumentType.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from medclaims.api.deps import get_current_user, get_notification_center
from medclaims.core.enums import NotificationKind
from medclaims.db.connection import get_session
from medclaims.models.user import User
from medclaims.schemas.document import (
    DocumentListResponse,
    DocumentResponse,
    DocumentUploadResponse,
)
from medclaims.services.documents_service import DocumentsService, UploadedFile
from medclaims.services.notifications import NotificationCenter
from medclaims.services.storage import StorageService, get_storage
from medclaims.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/documents", tags=["Documents"])


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    appointment_id: Optional[UUID] = Query(None, alias="appointmentId"),
    patient_id: Optional[UUID] = Query(None, alias="patientId"),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    storage: StorageService = Depends(get_storage),
) -> DocumentListResponse:
    documents = await DocumentsService(session, storage).list_documents(
        current_user, appointment_id, patient_id
    )
    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(d) for d in documents]
    )


@router.post("", response_model=DocumentUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_documents(
    request: Request,
    appointment_id: UUID = Form(..., alias="appointmentId"),
    patient_id: UUID = Form(..., alias="patientId"),
    files: Optional[list[UploadFile]] = File(None, description="Report files"),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    storage: StorageService = Depends(get_storage),
    notifications: NotificationCenter = Depends(get_notification_center),
) -> DocumentUploadResponse:
    """
    Upload one or more reports for an ACCEPTED appointment of the current doctor.

    Parts stay in the parser's spooled files; each is read only after the
    whole batch has been checked.
    """
    form = await request.form()

    uploads = []
    for index, upload in enumerate(files or []):
        declared = form.get(f"type_{index}")
        uploads.append(
            UploadedFile(
                filename=upload.filename or "",
                content_type=upload.content_type or "application/octet-stream",
                size=upload.size or 0,
                read=upload.read,
                declared_type=declared if isinstance(declared, str) else None,
            )
        )

    documents = await DocumentsService(session, storage).upload(
        current_user, appointment_id, patient_id, uploads
    )
    await session.commit()

    notifications.publish(
        patient_id,
        "New medical report",
        f"Dr. {current_user.name or current_user.email} uploaded {len(documents)} report(s)",
        NotificationKind.INFO,
    )
    return DocumentUploadResponse(
        message=f"{len(documents)} document(s) uploaded successfully",
        documents=[DocumentResponse.model_validate(d) for d in documents],
    )
