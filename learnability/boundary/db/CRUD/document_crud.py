"""
Document CRUD operations.

Extends BaseCRUD with tenant-scoped lookups and the run-guarded status
transitions used by the ingestion pipeline.

Dependencies: sqlalchemy, learnability.boundary.db.models
System role: Document persistence operations
"""

from datetime import datetime, timezone
from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from learnability.boundary.db.CRUD.base_crud import BaseCRUD
from learnability.boundary.db.models.document_model import DocumentModel, DocumentStatus

MAX_CONTENT_ERROR_LENGTH = 2000


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """CRUD operations for DocumentModel."""

    def __init__(self) -> None:
        super().__init__(DocumentModel)

    async def get_for_tenant(
        self,
        session: AsyncSession,
        id: UUID,
        tenant_id: str,
    ) -> DocumentModel | None:
        """
        Retrieve a document only if it belongs to the tenant.

        Args:
            session: Async database session
            id: Document UUID
            tenant_id: Owning tenant

        Returns:
            DocumentModel if found and owned, None otherwise
        """
        stmt = select(DocumentModel).where(
            DocumentModel.id == id,
            DocumentModel.tenant_id == tenant_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_tenant(
        self,
        session: AsyncSession,
        tenant_id: str,
        subject_id: UUID | None = None,
        status: DocumentStatus | None = None,
    ) -> Sequence[DocumentModel]:
        """List a tenant's documents, newest first, optionally filtered."""
        stmt = select(DocumentModel).where(DocumentModel.tenant_id == tenant_id)
        if subject_id is not None:
            stmt = stmt.where(DocumentModel.subject_id == subject_id)
        if status is not None:
            stmt = stmt.where(DocumentModel.status == status)
        stmt = stmt.order_by(DocumentModel.created_at.desc())
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_ids_by_subject(
        self,
        session: AsyncSession,
        tenant_id: str,
        subject_id: UUID,
    ) -> list[str]:
        """
        Resolve the document IDs filed under a tenant's subject.

        Returns:
            list[str]: Document IDs as strings, the form stored in the vector index
        """
        stmt = select(DocumentModel.id).where(
            DocumentModel.tenant_id == tenant_id,
            DocumentModel.subject_id == subject_id,
        )
        result = await session.execute(stmt)
        return [str(doc_id) for doc_id in result.scalars().all()]

    async def delete_by_subject(
        self,
        session: AsyncSession,
        tenant_id: str,
        subject_id: UUID,
    ) -> int:
        """Delete every document row under a subject. Returns the row count."""
        stmt = delete(DocumentModel).where(
            DocumentModel.tenant_id == tenant_id,
            DocumentModel.subject_id == subject_id,
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def start_new_run(self, session: AsyncSession, id: UUID) -> DocumentModel | None:
        """
        Reset a document to PROCESSING under a fresh ingestion run.

        Returns:
            Updated DocumentModel with the incremented ingestion_run, None if missing
        """
        stmt = (
            update(DocumentModel)
            .where(DocumentModel.id == id)
            .values(
                status=DocumentStatus.PROCESSING,
                content=None,
                ingestion_run=DocumentModel.ingestion_run + 1,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        await session.execute(stmt)
        # Reload so an instance already in the session sees the incremented run
        result = await session.execute(
            select(DocumentModel)
            .where(DocumentModel.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def mark_completed(
        self,
        session: AsyncSession,
        id: UUID,
        ingestion_run: int,
        content: str,
    ) -> bool:
        """
        Mark document COMPLETED and store its extracted text.

        Only applies while the row is still on `ingestion_run`.

        Returns:
            True if the row was updated
        """
        return await self._update_for_run(
            session,
            id,
            ingestion_run,
            status=DocumentStatus.COMPLETED,
            content=content,
        )

    async def mark_failed(
        self,
        session: AsyncSession,
        id: UUID,
        ingestion_run: int,
        error_message: str,
    ) -> bool:
        """
        Mark document ERROR with the failure reason as content.

        Only applies while the row is still on `ingestion_run`.

        Returns:
            True if the row was updated
        """
        return await self._update_for_run(
            session,
            id,
            ingestion_run,
            status=DocumentStatus.ERROR,
            content=error_message[:MAX_CONTENT_ERROR_LENGTH],
        )

    async def fail_stale_processing(self, session: AsyncSession, reason: str) -> int:
        """
        Mark every PROCESSING row ERROR.

        Used at startup: no worker of the current process owns those rows.

        Returns:
            Number of rows updated
        """
        stmt = (
            update(DocumentModel)
            .where(DocumentModel.status == DocumentStatus.PROCESSING)
            .values(
                status=DocumentStatus.ERROR,
                content=reason[:MAX_CONTENT_ERROR_LENGTH],
                updated_at=datetime.now(timezone.utc),
            )
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def _update_for_run(
        self,
        session: AsyncSession,
        id: UUID,
        ingestion_run: int,
        **values,
    ) -> bool:
        stmt = (
            update(DocumentModel)
            .where(
                DocumentModel.id == id,
                DocumentModel.ingestion_run == ingestion_run,
            )
            .values(updated_at=datetime.now(timezone.utc), **values)
        )
        result = await session.execute(stmt)
        return result.rowcount > 0


document_crud = DocumentCRUD()
