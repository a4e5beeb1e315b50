"""
Document service orchestrator.

Coordinates document upload, background ingestion, reprocessing and
deletion. Uploads return as soon as the row is committed and the job is
queued; the document's status field reports the outcome.

Dependencies: learnability.boundary, learnability.workers, learnability.core
System role: Document management orchestration
"""

import asyncio
import logging
from pathlib import Path
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from learnability.boundary.db.CRUD.document_crud import document_crud
from learnability.boundary.db.CRUD.subject_crud import subject_crud
from learnability.boundary.db.models.document_model import DocumentModel, DocumentStatus
from learnability.boundary.storage.file_store import FileStore
from learnability.boundary.vdb.milvus_index import VectorIndex
from learnability.configs.ingestion import IngestionSettings
from learnability.core.document_processing.entrypoint import failure_reason
from learnability.core.exceptions import (
    DocumentNotFoundError,
    IngestionInProgressError,
    IngestionQueueFullError,
    SubjectNotFoundError,
    ValidationError,
)
from learnability.workers.ingestion_worker import IngestionJob, IngestionWorker

logger = logging.getLogger(__name__)


class DocumentService:
    """
    Document service orchestrator.

    Handles document lifecycle: upload, ingestion hand-off, reprocess, deletion.
    """

    def __init__(
        self,
        db: AsyncSession,
        vector_index: VectorIndex,
        worker: IngestionWorker,
        file_store: FileStore,
        settings: IngestionSettings,
    ) -> None:
        """
        Initialize document service.

        Args:
            db: Request-scoped AsyncSession
            vector_index: Shared vector index for delete cascades
            worker: Background ingestion worker
            file_store: Upload storage
            settings: Upload validation limits
        """
        self.db = db
        self._vector_index = vector_index
        self._worker = worker
        self._file_store = file_store
        self._settings = settings

    async def _require_subject(self, tenant_id: str, subject_id: UUID | None) -> None:
        if subject_id is not None and await subject_crud.get_for_tenant(self.db, subject_id, tenant_id) is None:
            raise SubjectNotFoundError(str(subject_id))

    def _validate_upload(self, filename: str, data: bytes) -> str:
        extension = Path(filename).suffix.lower()
        if extension not in self._settings.allowed_extensions:
            raise ValidationError(
                f"Unsupported file type '{extension or filename}'. "
                f"Allowed: {', '.join(self._settings.allowed_extensions)}",
                field="file",
            )
        if not data:
            raise ValidationError("Uploaded file is empty", field="file")
        if len(data) > self._settings.max_upload_bytes:
            raise ValidationError(
                f"File exceeds the {self._settings.max_upload_bytes} byte limit",
                field="file",
            )
        return extension.lstrip(".")

    async def _submit(self, document: DocumentModel) -> None:
        job = IngestionJob(
            document_id=str(document.id),
            tenant_id=document.tenant_id,
            subject_id=str(document.subject_id) if document.subject_id else None,
            file_path=document.file_path,
            ingestion_run=document.ingestion_run,
        )
        try:
            self._worker.submit(job)
        except IngestionQueueFullError as e:
            await document_crud.mark_failed(self.db, document.id, document.ingestion_run, failure_reason(e))
            await self.db.commit()
            raise

    async def upload_document(
        self,
        tenant_id: str,
        filename: str,
        data: bytes,
        subject_id: UUID | None = None,
    ) -> DocumentModel:
        """
        Store an upload and queue it for ingestion.

        Steps:
        1. Validate file type, size and subject ownership
        2. Save the file and create the document row (PROCESSING)
        3. Commit, then hand the job to the background worker

        Args:
            tenant_id: Owning tenant
            filename: Original filename
            data: File content
            subject_id: Optional subject to file the document under

        Returns:
            DocumentModel: New document in PROCESSING status

        Raises:
            ValidationError: Unsupported, empty or oversized file
            SubjectNotFoundError: Subject missing or owned by another tenant
            IngestionQueueFullError: Worker cannot accept the job (document set to ERROR)
        """
        file_type = self._validate_upload(filename, data)
        await self._require_subject(tenant_id, subject_id)

        path = await asyncio.to_thread(self._file_store.save, tenant_id, filename, data)
        try:
            document = await document_crud.create(
                self.db,
                tenant_id=tenant_id,
                subject_id=subject_id,
                name=filename,
                file_type=file_type,
                file_path=str(path),
                size=len(data),
                status=DocumentStatus.PROCESSING,
                ingestion_run=1,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            await asyncio.to_thread(self._file_store.delete, path)
            raise

        logger.info(
            f"{__name__}:upload_document - Document created",
            extra={"document_id": str(document.id), "tenant_id": tenant_id, "file_type": file_type},
        )
        await self._submit(document)
        return document

    async def create_text_document(
        self,
        tenant_id: str,
        name: str,
        content: str,
        subject_id: UUID | None = None,
    ) -> DocumentModel:
        """
        Create a document from direct text content.

        Stored as READY and not indexed.
        """
        if not content.strip():
            raise ValidationError("Content cannot be empty", field="content")
        await self._require_subject(tenant_id, subject_id)

        document = await document_crud.create(
            self.db,
            tenant_id=tenant_id,
            subject_id=subject_id,
            name=name,
            file_type="text",
            file_path=None,
            size=len(content.encode("utf-8")),
            status=DocumentStatus.READY,
            content=content,
        )
        await self.db.commit()
        return document

    async def get_document(self, tenant_id: str, document_id: UUID) -> DocumentModel:
        """
        Raises:
            DocumentNotFoundError: Missing or owned by another tenant
        """
        document = await document_crud.get_for_tenant(self.db, document_id, tenant_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))
        return document

    async def list_documents(
        self,
        tenant_id: str,
        subject_id: UUID | None = None,
        status: DocumentStatus | None = None,
    ) -> Sequence[DocumentModel]:
        return await document_crud.list_for_tenant(self.db, tenant_id, subject_id, status)

    async def reprocess_document(self, tenant_id: str, document_id: UUID) -> DocumentModel:
        """
        Run ingestion again under a new run; its chunks replace the old ones.

        Raises:
            DocumentNotFoundError: Missing or owned by another tenant
            ValidationError: Document has no stored file (direct text content)
            IngestionInProgressError: Document is already queued or running
        """
        document = await self.get_document(tenant_id, document_id)
        if not document.file_path:
            raise ValidationError("Text documents are not indexed and cannot be reprocessed")
        if self._worker.is_active(str(document_id)):
            raise IngestionInProgressError(str(document_id))

        document = await document_crud.start_new_run(self.db, document_id)
        await self.db.commit()
        logger.info(
            f"{__name__}:reprocess_document - Reprocessing requested",
            extra={"document_id": str(document_id), "ingestion_run": document.ingestion_run},
        )
        await self._submit(document)
        return document

    async def delete_document(self, tenant_id: str, document_id: UUID) -> None:
        """
        Delete a document, its indexed chunks and its stored file.

        Chunks are removed first so a failed index delete leaves the row in
        place for a retry instead of orphaning searchable chunks.

        Raises:
            DocumentNotFoundError: Missing or owned by another tenant
            IndexUnavailableError: Chunks could not be deleted
        """
        document = await self.get_document(tenant_id, document_id)

        deleted_chunks = await asyncio.to_thread(self._vector_index.delete_by_document, str(document_id))
        await asyncio.to_thread(self._file_store.delete, document.file_path)
        await document_crud.delete_by_id(self.db, document_id)
        await self.db.commit()

        logger.info(
            f"{__name__}:delete_document - Document deleted",
            extra={"document_id": str(document_id), "tenant_id": tenant_id, "deleted_chunks": deleted_chunks},
        )
