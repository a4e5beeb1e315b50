"""
Document request/response schemas.

Dependencies: pydantic
System role: Document API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from learnability.boundary.db.models.document_model import DocumentStatus


class DocumentResponse(BaseModel):
    """Document metadata and ingestion status."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    subject_id: uuid.UUID | None = None
    name: str
    file_type: str
    size: int
    status: DocumentStatus
    ingestion_run: int
    created_at: datetime
    updated_at: datetime


class DocumentDetailResponse(DocumentResponse):
    """Document with its extracted text, or the failure reason when status is ERROR."""

    content: str | None = None


class DocumentListResponse(BaseModel):
    """Document list response."""

    documents: list[DocumentResponse]
    total: int


class TextDocumentRequest(BaseModel):
    """Create a document from direct text content (stored READY, not indexed)."""

    name: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    subject_id: uuid.UUID | None = None
