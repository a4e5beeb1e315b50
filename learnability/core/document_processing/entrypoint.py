"""
Document ingestion pipeline orchestrator.

Coordinates extraction, chunking, embedding and vector index insert for one
document, then writes the outcome to the document row. Blocking steps run in
worker threads so the event loop stays free for requests.

Re-ingestion replaces instead of appending: the document's previous chunks
are deleted right before the new ones are inserted, and the new chunks carry
the run identifier.

Dependencies: All task modules, learnability.boundary.vdb
System role: Pipeline orchestration (coordinates only)
"""

import asyncio
import logging
import time

from learnability.boundary.vdb.milvus_index import VectorIndex
from learnability.boundary.vdb.vector_schemas import ChunkRecord
from learnability.core.document_processing.database.document_status_updater import (
    DocumentStatusUpdater,
)
from learnability.core.document_processing.models import PipelineResult
from learnability.core.document_processing.tasks import (
    ChunkingTask,
    EmbeddingClient,
    ExtractionTask,
)
from learnability.core.exceptions import DocumentProcessingError
from learnability.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


def failure_reason(error: BaseException) -> str:
    """Content stored on a document whose ingestion failed."""
    message = getattr(error, "message", None) or str(error) or type(error).__name__
    return f"Error processing: {message}"


class IngestionPipeline:
    """Orchestrate document ingestion: extract -> chunk -> embed -> replace chunks -> status."""

    def __init__(
        self,
        extraction_task: ExtractionTask,
        chunking_task: ChunkingTask,
        embedding_client: EmbeddingClient,
        vector_index: VectorIndex,
        status_updater: DocumentStatusUpdater,
    ) -> None:
        self._extraction_task = extraction_task
        self._chunking_task = chunking_task
        self._embedding_client = embedding_client
        self._vector_index = vector_index
        self._status_updater = status_updater

    async def ingest(
        self,
        document_id: str,
        tenant_id: str,
        subject_id: str | None,
        file_path: str,
        ingestion_run: int = 1,
    ) -> PipelineResult:
        """
        Process one document through the full pipeline.

        The document ends COMPLETED only when every chunk is embedded and
        inserted. Any failure stores "Error processing: <reason>" as content,
        sets ERROR and re-raises.

        Args:
            document_id: Document UUID (string form used for index tags)
            tenant_id: Owning tenant
            subject_id: Optional subject tag
            file_path: Stored upload to read
            ingestion_run: Run identifier for this attempt

        Returns:
            PipelineResult: Chunk count and timing

        Raises:
            ExtractionError: File unreadable or unsupported
            DocumentProcessingError: Document has no text
            EmbeddingError: Embedding failed for any chunk
            IndexUnavailableError: Vector index insert failed
        """
        start_time = time.perf_counter()
        log_context = {"document_id": document_id, "tenant_id": tenant_id, "ingestion_run": ingestion_run}
        logger.info(f"{__name__}:ingest - Starting ingestion", extra=log_context)

        index_touched = False
        try:
            text = await asyncio.to_thread(self._extraction_task.extract, file_path)

            chunks = self._chunking_task.chunk(text)
            if not chunks:
                raise DocumentProcessingError(
                    "No text could be extracted from the document",
                    document_id=document_id,
                )
            logger.info(f"{__name__}:ingest - Split into {len(chunks)} chunks", extra=log_context)

            vectors = await asyncio.to_thread(
                self._embedding_client.embed_documents,
                [chunk.content for chunk in chunks],
            )

            records = [
                ChunkRecord(
                    text=chunk.content,
                    embedding=vector,
                    tenant_id=tenant_id,
                    document_id=document_id,
                    subject_id=subject_id,
                    chunk_index=chunk.index,
                    ingestion_run=ingestion_run,
                    metadata={"start_index": chunk.start_index},
                )
                for chunk, vector in zip(chunks, vectors)
            ]

            index_touched = True
            replaced = await self._write_chunks(document_id, records)
        except Exception as e:
            await self._record_failure(document_id, ingestion_run, e, cleanup=index_touched)
            raise

        updated = await self._status_updater.mark_completed(document_id, ingestion_run, text)
        if not updated and not await self._status_updater.document_exists(document_id):
            logger.warning(
                f"{__name__}:ingest - Document deleted during ingestion, removing its chunks",
                extra=log_context,
            )
            await asyncio.to_thread(self._vector_index.delete_by_document, document_id)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{__name__}:ingest - Completed in {elapsed_ms:.0f}ms",
            extra={**log_context, "chunk_count": len(records), "replaced_chunks": replaced},
        )
        return PipelineResult(
            document_id=document_id,
            ingestion_run=ingestion_run,
            chunk_count=len(records),
            replaced_chunks=replaced,
            processing_time_ms=elapsed_ms,
        )

    async def _replace_chunks(self, document_id: str, records: list[ChunkRecord]) -> int:
        replaced = await asyncio.to_thread(self._vector_index.delete_by_document, document_id)
        await asyncio.to_thread(self._vector_index.insert, records)
        return replaced

    async def _write_chunks(self, document_id: str, records: list[ChunkRecord]) -> int:
        """
        Replace the document's chunks, running to completion even if ingest() is cancelled.

        A cancelled caller waits for the in-flight insert before re-raising, so
        cleanup done after a watchdog timeout or shutdown sees every inserted row.

        Returns:
            int: Number of chunks from earlier runs that were removed
        """
        write = asyncio.ensure_future(self._replace_chunks(document_id, records))
        try:
            return await asyncio.shield(write)
        except asyncio.CancelledError:
            await asyncio.wait([write])
            if not write.cancelled() and write.exception() is not None:
                logger.warning(
                    f"{__name__}:_write_chunks - Index write failed after cancellation: {write.exception()}",
                    extra={"document_id": document_id},
                )
            raise

    async def fail(self, document_id: str, ingestion_run: int, error: BaseException) -> None:
        """Record a failure raised outside ingest() (watchdog, shutdown) and drop partial chunks."""
        await self._record_failure(document_id, ingestion_run, error, cleanup=True)

    async def _record_failure(
        self,
        document_id: str,
        ingestion_run: int,
        error: BaseException,
        cleanup: bool,
    ) -> None:
        logger.warning(
            f"{__name__}:_record_failure - Ingestion failed: {type(error).__name__}: {error}",
            extra={"document_id": document_id, "ingestion_run": ingestion_run},
        )
        if cleanup:
            try:
                await asyncio.to_thread(self._vector_index.delete_by_document, document_id)
            except Exception as cleanup_error:
                log_exception_with_context(
                    logger,
                    f"{__name__}:_record_failure - Could not remove partial chunks",
                    cleanup_error,
                    document_id=document_id,
                )
        try:
            await self._status_updater.mark_failed(document_id, ingestion_run, failure_reason(error))
        except Exception as status_error:
            log_exception_with_context(
                logger,
                f"{__name__}:_record_failure - Could not persist ERROR status",
                status_error,
                document_id=document_id,
            )
