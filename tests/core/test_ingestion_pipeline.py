"""
Tests for IngestionPipeline.

Runs the real extraction, chunking and status-update stages against an
in-memory SQLite database, with FakeEmbeddings and FakeVectorIndex standing
in for the Google and Milvus services.

System role: Verification of document ingestion end to end
"""

import pytest

from learnability.boundary.db.CRUD.document_crud import document_crud
from learnability.boundary.db.models.document_model import DocumentStatus
from learnability.core.document_processing.database.document_status_updater import (
    DocumentStatusUpdater,
)
from learnability.core.document_processing.entrypoint import IngestionPipeline, failure_reason
from learnability.core.document_processing.tasks import ChunkingTask, ExtractionTask
from learnability.core.exceptions import (
    DocumentProcessingError,
    EmbeddingError,
    ExtractionError,
    IndexUnavailableError,
)
from learnability.core.retrieval.filters import Eq

LECTURE_TEXT = "\n\n".join(
    f"Lecture section {i}. Cells divide through mitosis and meiosis, producing new cells." * 2
    for i in range(8)
)


@pytest.fixture
def pipeline(session_factory, embedding_client, fake_index) -> IngestionPipeline:
    return IngestionPipeline(
        extraction_task=ExtractionTask(),
        chunking_task=ChunkingTask(chunk_size=300, chunk_overlap=30),
        embedding_client=embedding_client,
        vector_index=fake_index,
        status_updater=DocumentStatusUpdater(session_factory),
    )


@pytest.fixture
def lecture_file(tmp_path):
    path = tmp_path / "biology.txt"
    path.write_text(LECTURE_TEXT, encoding="utf-8")
    return path


async def create_document(session_factory, tenant_id: str, file_path, subject_id=None):
    async with session_factory() as session:
        document = await document_crud.create(
            session,
            tenant_id=tenant_id,
            subject_id=subject_id,
            name="biology.txt",
            file_type="txt",
            file_path=str(file_path),
            size=100,
            status=DocumentStatus.PROCESSING,
            ingestion_run=1,
        )
        await session.commit()
        return document


async def load_document(session_factory, document_id):
    async with session_factory() as session:
        return await document_crud.get_by_id(session, document_id)


class TestIngestSuccess:
    """Successful ingestion."""

    @pytest.mark.asyncio
    async def test_short_document_single_chunk(
        self, pipeline, session_factory, fake_index, fake_embeddings, tmp_path, tenant_id
    ) -> None:
        """Should produce one chunk, one embedding call and one insert for a short text."""
        notes = tmp_path / "notes.txt"
        notes.write_text("Paragraph one.\n\nParagraph two about photosynthesis.", encoding="utf-8")
        document = await create_document(session_factory, tenant_id, notes)

        result = await pipeline.ingest(str(document.id), tenant_id, None, str(notes))

        assert result.chunk_count == 1
        assert len(fake_embeddings.document_calls) == 1
        assert fake_index.insert_calls == 1
        stored = await load_document(session_factory, document.id)
        assert stored.status == DocumentStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_document_completed_and_chunks_searchable(
        self, pipeline, session_factory, fake_index, lecture_file, tenant_id, subject_id
    ) -> None:
        """Should index every chunk with its tags and mark the document COMPLETED."""
        document = await create_document(session_factory, tenant_id, lecture_file, subject_id)

        result = await pipeline.ingest(str(document.id), tenant_id, str(subject_id), str(lecture_file))

        stored = await load_document(session_factory, document.id)
        assert stored.status == DocumentStatus.COMPLETED
        assert stored.content == LECTURE_TEXT
        assert result.chunk_count > 1
        assert fake_index.count(Eq("document_id", str(document.id))) == result.chunk_count
        assert all(row["tenant_id"] == tenant_id for row in fake_index.rows)
        assert all(row["subject_id"] == str(subject_id) for row in fake_index.rows)

    @pytest.mark.asyncio
    async def test_chunk_order_preserved(
        self, pipeline, session_factory, fake_index, lecture_file, tenant_id
    ) -> None:
        """Should insert chunks with consecutive indexes in document order."""
        document = await create_document(session_factory, tenant_id, lecture_file)

        await pipeline.ingest(str(document.id), tenant_id, None, str(lecture_file))

        indexes = [row["chunk_index"] for row in fake_index.rows]
        assert indexes == list(range(len(indexes)))
        assert fake_index.rows[0]["text"].startswith("Lecture section 0")
        assert fake_index.rows[0]["subject_id"] == ""

    @pytest.mark.asyncio
    async def test_reingest_replaces_previous_chunks(
        self, pipeline, session_factory, fake_index, lecture_file, tenant_id
    ) -> None:
        """Should leave only the latest run's chunks after re-ingestion."""
        document = await create_document(session_factory, tenant_id, lecture_file)
        first = await pipeline.ingest(str(document.id), tenant_id, None, str(lecture_file))

        lecture_file.write_text("A much shorter second version of the notes.", encoding="utf-8")
        async with session_factory() as session:
            await document_crud.start_new_run(session, document.id)
            await session.commit()

        second = await pipeline.ingest(str(document.id), tenant_id, None, str(lecture_file), ingestion_run=2)

        assert second.replaced_chunks == first.chunk_count
        assert fake_index.count(Eq("document_id", str(document.id))) == 1
        assert {row["ingestion_run"] for row in fake_index.rows} == {2}
        stored = await load_document(session_factory, document.id)
        assert stored.status == DocumentStatus.COMPLETED
        assert stored.ingestion_run == 2


class TestIngestFailure:
    """Failed ingestion leaves ERROR status and no chunks."""

    @pytest.mark.asyncio
    async def test_embedding_failure_marks_error(
        self, pipeline, session_factory, fake_index, fake_embeddings, lecture_file, tenant_id
    ) -> None:
        """Should store 'Error processing: ...' and index nothing."""
        fake_embeddings.fail_with = RuntimeError("quota exceeded")
        document = await create_document(session_factory, tenant_id, lecture_file)

        with pytest.raises(EmbeddingError):
            await pipeline.ingest(str(document.id), tenant_id, None, str(lecture_file))

        stored = await load_document(session_factory, document.id)
        assert stored.status == DocumentStatus.ERROR
        assert stored.content.startswith("Error processing: ")
        assert "quota exceeded" in stored.content
        assert fake_index.rows == []
        assert fake_index.insert_calls == 0

    @pytest.mark.asyncio
    async def test_missing_file_marks_error(self, pipeline, session_factory, tmp_path, tenant_id) -> None:
        missing = tmp_path / "gone.txt"
        document = await create_document(session_factory, tenant_id, missing)

        with pytest.raises(ExtractionError):
            await pipeline.ingest(str(document.id), tenant_id, None, str(missing))

        stored = await load_document(session_factory, document.id)
        assert stored.status == DocumentStatus.ERROR
        assert "File not found" in stored.content

    @pytest.mark.asyncio
    async def test_empty_document_marks_error(self, pipeline, session_factory, tmp_path, tenant_id) -> None:
        """Should fail a document with no extractable text."""
        blank = tmp_path / "blank.txt"
        blank.write_text("   \n\n  ", encoding="utf-8")
        document = await create_document(session_factory, tenant_id, blank)

        with pytest.raises(DocumentProcessingError, match="No text"):
            await pipeline.ingest(str(document.id), tenant_id, None, str(blank))

        stored = await load_document(session_factory, document.id)
        assert stored.status == DocumentStatus.ERROR

    @pytest.mark.asyncio
    async def test_insert_failure_removes_partial_chunks(
        self, pipeline, session_factory, fake_index, lecture_file, tenant_id
    ) -> None:
        """Should mark ERROR when the index rejects the insert."""
        fake_index.fail_insert = True
        document = await create_document(session_factory, tenant_id, lecture_file)

        with pytest.raises(IndexUnavailableError):
            await pipeline.ingest(str(document.id), tenant_id, None, str(lecture_file))

        stored = await load_document(session_factory, document.id)
        assert stored.status == DocumentStatus.ERROR
        assert fake_index.count(Eq("document_id", str(document.id))) == 0


class TestIngestRaces:
    """Ingestion interleaved with deletes and reprocessing."""

    @pytest.mark.asyncio
    async def test_document_deleted_during_ingest(
        self, pipeline, session_factory, fake_index, lecture_file, tenant_id
    ) -> None:
        """Should drop the chunks when the row disappeared mid-ingestion."""
        document = await create_document(session_factory, tenant_id, lecture_file)
        async with session_factory() as session:
            await document_crud.delete_by_id(session, document.id)
            await session.commit()

        await pipeline.ingest(str(document.id), tenant_id, None, str(lecture_file))

        assert fake_index.count(Eq("document_id", str(document.id))) == 0

    @pytest.mark.asyncio
    async def test_superseded_run_cannot_write_status(
        self, pipeline, session_factory, lecture_file, tenant_id
    ) -> None:
        """Should leave a newer run's PROCESSING status untouched."""
        document = await create_document(session_factory, tenant_id, lecture_file)
        async with session_factory() as session:
            await document_crud.start_new_run(session, document.id)
            await session.commit()

        await pipeline.ingest(str(document.id), tenant_id, None, str(lecture_file), ingestion_run=1)

        stored = await load_document(session_factory, document.id)
        assert stored.status == DocumentStatus.PROCESSING
        assert stored.ingestion_run == 2

    @pytest.mark.asyncio
    async def test_fail_records_error(self, pipeline, session_factory, fake_index, lecture_file, tenant_id) -> None:
        """Should mark ERROR and drop chunks for failures raised outside ingest()."""
        document = await create_document(session_factory, tenant_id, lecture_file)
        await pipeline.ingest(str(document.id), tenant_id, None, str(lecture_file))

        await pipeline.fail(str(document.id), 1, DocumentProcessingError("Ingestion exceeded 900 seconds"))

        stored = await load_document(session_factory, document.id)
        assert stored.status == DocumentStatus.ERROR
        assert stored.content == "Error processing: Ingestion exceeded 900 seconds"
        assert fake_index.rows == []


class TestFailureReason:
    def test_prefix(self) -> None:
        assert failure_reason(ValueError("bad page")) == "Error processing: bad page"

