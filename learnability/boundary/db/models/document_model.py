"""
Document ORM model.

Represents learning materials with their ingestion status.
Tracks the lifecycle from upload to vector index and stores the
extracted text (or the failure reason) in `content`.

Dependencies: sqlalchemy, learnability.boundary.db.base
System role: Document persistence for ingestion tracking
"""

import enum
import uuid

from sqlalchemy import Enum, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from learnability.boundary.db.base import Base, TimestampMixin, UUIDMixin


class DocumentStatus(str, enum.Enum):
    """
    Document lifecycle states.

    PROCESSING: Uploaded, background ingestion queued or running
    COMPLETED: Text extracted and chunks searchable in the vector index
    ERROR: Ingestion failed; content holds "Error processing: <reason>"
    READY: Created from direct text content, never indexed
    """

    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"
    READY = "READY"


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model tracking ingestion pipeline state.

    Attributes:
        tenant_id: Owning user; every query is scoped to it
        subject_id: Optional subject grouping (no FK, subjects may be deleted first)
        name: Original filename or title
        file_type: Lower-case extension or "text" for direct content
        file_path: Stored upload path, None for direct content
        size: Upload size in bytes
        status: Current lifecycle state
        content: Extracted text on success, failure reason on error
        ingestion_run: Incremented on each (re)ingestion; stale runs cannot write status
    """

    __tablename__ = "documents"

    tenant_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    subject_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_type: Mapped[str] = mapped_column(String(32), nullable=False)
    file_path: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus, native_enum=False, length=16),
        nullable=False,
        default=DocumentStatus.PROCESSING,
    )
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    ingestion_run: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
