"""
Test suite for DocumentCRUD database operations.

Runs against in-memory SQLite to exercise the ingestion-run guard, tenant
scoping and startup recovery queries.

System role: Verification of document persistence layer
"""

import uuid

import pytest

from learnability.boundary.db.CRUD.document_crud import MAX_CONTENT_ERROR_LENGTH, DocumentCRUD, document_crud
from learnability.boundary.db.models.document_model import DocumentModel, DocumentStatus


async def create_document(session, tenant_id: str, subject_id=None, status=DocumentStatus.PROCESSING):
    return await document_crud.create(
        session,
        tenant_id=tenant_id,
        subject_id=subject_id,
        name="notes.pdf",
        file_type="pdf",
        file_path="/uploads/notes.pdf",
        size=1024,
        status=status,
    )


class TestDocumentCRUDInit:
    def test_init_should_set_model_to_document_model(self) -> None:
        """Test DocumentCRUD initializes with DocumentModel."""
        assert DocumentCRUD().model == DocumentModel


class TestTenantScoping:
    """Queries never cross tenants."""

    @pytest.mark.asyncio
    async def test_get_for_tenant(self, db_session, tenant_id, other_tenant_id) -> None:
        document = await create_document(db_session, tenant_id)

        assert (await document_crud.get_for_tenant(db_session, document.id, tenant_id)).id == document.id
        assert await document_crud.get_for_tenant(db_session, document.id, other_tenant_id) is None

    @pytest.mark.asyncio
    async def test_get_ids_by_subject(self, db_session, tenant_id, other_tenant_id, subject_id) -> None:
        """Should return string IDs for the tenant's documents under the subject."""
        first = await create_document(db_session, tenant_id, subject_id)
        second = await create_document(db_session, tenant_id, subject_id)
        await create_document(db_session, tenant_id)
        await create_document(db_session, other_tenant_id, subject_id)

        ids = await document_crud.get_ids_by_subject(db_session, tenant_id, subject_id)

        assert sorted(ids) == sorted([str(first.id), str(second.id)])

    @pytest.mark.asyncio
    async def test_delete_by_subject(self, db_session, tenant_id, subject_id) -> None:
        await create_document(db_session, tenant_id, subject_id)
        await create_document(db_session, tenant_id, subject_id)
        unfiled = await create_document(db_session, tenant_id)

        deleted = await document_crud.delete_by_subject(db_session, tenant_id, subject_id)

        assert deleted == 2
        remaining = await document_crud.list_for_tenant(db_session, tenant_id)
        assert [doc.id for doc in remaining] == [unfiled.id]


class TestIngestionRunGuard:
    """Status writes only apply to the current ingestion run."""

    @pytest.mark.asyncio
    async def test_mark_completed_current_run(self, db_session, tenant_id) -> None:
        document = await create_document(db_session, tenant_id)

        updated = await document_crud.mark_completed(db_session, document.id, 1, "extracted text")

        assert updated is True
        stored = await document_crud.get_by_id(db_session, document.id)
        assert stored.status == DocumentStatus.COMPLETED
        assert stored.content == "extracted text"

    @pytest.mark.asyncio
    async def test_stale_run_is_ignored(self, db_session, tenant_id) -> None:
        """Should not let run 1 overwrite a document already on run 2."""
        document = await create_document(db_session, tenant_id)
        restarted = await document_crud.start_new_run(db_session, document.id)

        updated = await document_crud.mark_failed(db_session, document.id, 1, "Error processing: old run")

        assert restarted.ingestion_run == 2
        assert updated is False
        stored = await document_crud.get_by_id(db_session, document.id)
        assert stored.status == DocumentStatus.PROCESSING
        assert stored.content is None

    @pytest.mark.asyncio
    async def test_long_error_is_truncated(self, db_session, tenant_id) -> None:
        document = await create_document(db_session, tenant_id)

        await document_crud.mark_failed(db_session, document.id, 1, "x" * (MAX_CONTENT_ERROR_LENGTH + 500))

        stored = await document_crud.get_by_id(db_session, document.id)
        assert len(stored.content) == MAX_CONTENT_ERROR_LENGTH

    @pytest.mark.asyncio
    async def test_missing_document(self, db_session) -> None:
        assert await document_crud.mark_completed(db_session, uuid.uuid4(), 1, "text") is False


class TestStartupRecovery:
    @pytest.mark.asyncio
    async def test_fail_stale_processing(self, db_session, tenant_id) -> None:
        """Should mark only PROCESSING documents as ERROR."""
        stuck = await create_document(db_session, tenant_id)
        done = await create_document(db_session, tenant_id, status=DocumentStatus.COMPLETED)

        count = await document_crud.fail_stale_processing(
            db_session, "Error processing: Ingestion interrupted by server restart"
        )

        assert count == 1
        assert (await document_crud.get_by_id(db_session, stuck.id)).status == DocumentStatus.ERROR
        assert (await document_crud.get_by_id(db_session, done.id)).status == DocumentStatus.COMPLETED
