"""
Subject service.

Creates, lists and deletes subjects. Deleting a subject cascades to its
documents, their stored files and every chunk tagged with the subject.

Dependencies: learnability.boundary
System role: Subject management orchestration
"""

import asyncio
import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from learnability.boundary.db.CRUD.document_crud import document_crud
from learnability.boundary.db.CRUD.subject_crud import subject_crud
from learnability.boundary.db.models.subject_model import SubjectModel
from learnability.boundary.storage.file_store import FileStore
from learnability.boundary.vdb.milvus_index import VectorIndex
from learnability.core.exceptions import SubjectNotFoundError

logger = logging.getLogger(__name__)


class SubjectService:
    """Subject lifecycle with index cleanup on delete."""

    def __init__(self, db: AsyncSession, vector_index: VectorIndex, file_store: FileStore) -> None:
        self.db = db
        self._vector_index = vector_index
        self._file_store = file_store

    async def create_subject(
        self,
        tenant_id: str,
        name: str,
        description: str | None = None,
        color: str | None = None,
    ) -> SubjectModel:
        subject = await subject_crud.create(
            self.db,
            tenant_id=tenant_id,
            name=name,
            description=description,
            color=color,
        )
        await self.db.commit()
        return subject

    async def list_subjects(self, tenant_id: str) -> Sequence[SubjectModel]:
        return await subject_crud.list_for_tenant(self.db, tenant_id)

    async def get_subject(self, tenant_id: str, subject_id: UUID) -> SubjectModel:
        subject = await subject_crud.get_for_tenant(self.db, subject_id, tenant_id)
        if subject is None:
            raise SubjectNotFoundError(str(subject_id))
        return subject

    async def delete_subject(self, tenant_id: str, subject_id: UUID) -> None:
        """
        Delete a subject with its documents and indexed chunks.

        Raises:
            SubjectNotFoundError: Missing or owned by another tenant
            IndexUnavailableError: Chunks could not be deleted
        """
        await self.get_subject(tenant_id, subject_id)
        documents = await document_crud.list_for_tenant(self.db, tenant_id, subject_id=subject_id)

        deleted_chunks = await asyncio.to_thread(self._vector_index.delete_by_subject, str(subject_id))
        for document in documents:
            await asyncio.to_thread(self._file_store.delete, document.file_path)

        deleted_documents = await document_crud.delete_by_subject(self.db, tenant_id, subject_id)
        await subject_crud.delete_by_id(self.db, subject_id)
        await self.db.commit()

        logger.info(
            f"{__name__}:delete_subject - Subject deleted",
            extra={
                "subject_id": str(subject_id),
                "tenant_id": tenant_id,
                "deleted_documents": deleted_documents,
                "deleted_chunks": deleted_chunks,
            },
        )
