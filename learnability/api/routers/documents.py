"""
Document API endpoints.

Routes:
- POST /documents - Upload a file and queue it for ingestion
- POST /documents/text - Create a document from direct text content
- GET /documents - List the caller's documents
- GET /documents/{id} - Get a document with its content or failure reason
- POST /documents/{id}/reprocess - Re-run ingestion (replaces indexed chunks)
- DELETE /documents/{id} - Delete document and its indexed chunks

Dependencies: learnability.application.services, learnability.models
System role: Document HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from learnability.api.deps import get_document_service, get_tenant_id
from learnability.application.services.document_service import DocumentService
from learnability.boundary.db.models.document_model import DocumentStatus
from learnability.models.document import (
    DocumentDetailResponse,
    DocumentListResponse,
    DocumentResponse,
    TextDocumentRequest,
)

from .error_handling import handle_service_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
@handle_service_errors
async def upload_document(
    file: UploadFile = File(...),
    subject_id: UUID | None = Form(default=None),
    tenant_id: str = Depends(get_tenant_id),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """
    Upload a document for background ingestion.

    Returns immediately with status PROCESSING; poll GET /documents/{id}
    for COMPLETED or ERROR.

    Raises:
        HTTPException(400): Unsupported, empty or oversized file
        HTTPException(404): Subject not found
        HTTPException(503): Ingestion queue full
    """
    data = await file.read()
    logger.info(
        f"{__name__}:upload_document - Document upload received",
        extra={"tenant_id": tenant_id, "file_name": file.filename, "size": len(data)},
    )
    document = await document_service.upload_document(
        tenant_id=tenant_id,
        filename=file.filename or "upload",
        data=data,
        subject_id=subject_id,
    )
    return DocumentResponse.model_validate(document)


@router.post("/text", response_model=DocumentDetailResponse, status_code=status.HTTP_201_CREATED)
@handle_service_errors
async def create_text_document(
    request: TextDocumentRequest,
    tenant_id: str = Depends(get_tenant_id),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentDetailResponse:
    """Create a READY document from direct text content. It is not indexed."""
    document = await document_service.create_text_document(
        tenant_id=tenant_id,
        name=request.name,
        content=request.content,
        subject_id=request.subject_id,
    )
    return DocumentDetailResponse.model_validate(document)


@router.get("", response_model=DocumentListResponse)
@handle_service_errors
async def list_documents(
    subject_id: UUID | None = None,
    status_filter: DocumentStatus | None = Query(default=None, alias="status"),
    tenant_id: str = Depends(get_tenant_id),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    documents = await document_service.list_documents(tenant_id, subject_id, status_filter)
    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(doc) for doc in documents],
        total=len(documents),
    )


@router.get("/{document_id}", response_model=DocumentDetailResponse)
@handle_service_errors
async def get_document(
    document_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentDetailResponse:
    document = await document_service.get_document(tenant_id, document_id)
    return DocumentDetailResponse.model_validate(document)


@router.post(
    "/{document_id}/reprocess",
    response_model=DocumentResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
@handle_service_errors
async def reprocess_document(
    document_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """
    Re-run ingestion for a document. Its previous chunks are replaced.

    Raises:
        HTTPException(404): Document not found
        HTTPException(409): Document is already being processed
    """
    document = await document_service.reprocess_document(tenant_id, document_id)
    return DocumentResponse.model_validate(document)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_service_errors
async def delete_document(
    document_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    document_service: DocumentService = Depends(get_document_service),
) -> None:
    """
    Delete a document and every chunk indexed for it.

    Raises:
        HTTPException(404): Document not found
        HTTPException(503): Vector index unavailable, nothing was deleted
    """
    await document_service.delete_document(tenant_id, document_id)
