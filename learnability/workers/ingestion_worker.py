"""
Background ingestion worker.

A bounded asyncio queue feeds a fixed pool of worker tasks. Each job runs
the ingestion pipeline under a watchdog; a job that overruns it, or is still
queued or running at shutdown, is forced to ERROR. Failures the pipeline did
not anticipate are logged with full context so none are lost.

Dependencies: asyncio, learnability.core.document_processing
System role: Decouples upload latency from ingestion latency
"""

import asyncio
import logging
from dataclasses import dataclass

from learnability.core.document_processing.entrypoint import IngestionPipeline
from learnability.core.exceptions import (
    DocumentProcessingError,
    IngestionInProgressError,
    IngestionQueueFullError,
    LearnabilityError,
)
from learnability.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestionJob:
    """One document to ingest."""

    document_id: str
    tenant_id: str
    subject_id: str | None
    file_path: str
    ingestion_run: int = 1


class IngestionWorker:
    """Bounded queue plus worker pool for document ingestion."""

    def __init__(
        self,
        pipeline: IngestionPipeline,
        worker_count: int = 4,
        queue_size: int = 100,
        max_duration_seconds: float = 900.0,
    ) -> None:
        """
        Initialize the worker. Call start() from a running event loop.

        Args:
            pipeline: Pipeline each job runs through
            worker_count: Jobs processed concurrently
            queue_size: Jobs waiting before submit() rejects new work
            max_duration_seconds: Watchdog cap per document
        """
        self._pipeline = pipeline
        self._worker_count = worker_count
        self._queue_size = queue_size
        self._max_duration_seconds = max_duration_seconds
        self._queue: asyncio.Queue[IngestionJob] | None = None
        self._tasks: list[asyncio.Task] = []
        self._active: set[str] = set()

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    @property
    def pending(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0

    def is_active(self, document_id: str) -> bool:
        """Whether a document is queued or being ingested right now."""
        return document_id in self._active

    async def start(self) -> None:
        if self.running:
            return
        self._queue = asyncio.Queue(maxsize=self._queue_size)
        self._tasks = [
            asyncio.create_task(self._work(), name=f"ingestion-worker-{i}")
            for i in range(self._worker_count)
        ]
        logger.info(
            f"{__name__}:start - Started {self._worker_count} ingestion workers",
            extra={"queue_size": self._queue_size, "max_duration_seconds": self._max_duration_seconds},
        )

    def submit(self, job: IngestionJob) -> None:
        """
        Queue a document for ingestion and return immediately.

        Raises:
            IngestionInProgressError: Document already queued or running
            IngestionQueueFullError: Queue is full or worker not running
        """
        if self._queue is None or not self.running:
            raise IngestionQueueFullError("Ingestion worker is not running")
        if job.document_id in self._active:
            raise IngestionInProgressError(job.document_id)
        try:
            self._queue.put_nowait(job)
        except asyncio.QueueFull as e:
            raise IngestionQueueFullError(
                "Ingestion queue is full, try again later",
                {"queue_size": self._queue_size},
            ) from e
        self._active.add(job.document_id)
        logger.info(
            f"{__name__}:submit - Queued document for ingestion",
            extra={"document_id": job.document_id, "ingestion_run": job.ingestion_run, "pending": self.pending},
        )

    async def join(self) -> None:
        """Wait until every queued job has finished."""
        if self._queue is not None:
            await self._queue.join()

    async def stop(self) -> None:
        """Cancel workers and mark interrupted or never-started jobs as ERROR."""
        if not self.running:
            return
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        interrupted = DocumentProcessingError("Ingestion interrupted by server shutdown")
        while self._queue is not None and not self._queue.empty():
            job = self._queue.get_nowait()
            await self._pipeline.fail(job.document_id, job.ingestion_run, interrupted)
            self._queue.task_done()
        self._active.clear()
        logger.info(f"{__name__}:stop - Ingestion workers stopped")

    async def _work(self) -> None:
        assert self._queue is not None
        while True:
            job = await self._queue.get()
            try:
                await self._run(job)
            finally:
                self._active.discard(job.document_id)
                self._queue.task_done()

    async def _run(self, job: IngestionJob) -> None:
        try:
            await asyncio.wait_for(
                self._pipeline.ingest(
                    document_id=job.document_id,
                    tenant_id=job.tenant_id,
                    subject_id=job.subject_id,
                    file_path=job.file_path,
                    ingestion_run=job.ingestion_run,
                ),
                timeout=self._max_duration_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(
                f"{__name__}:_run - Ingestion exceeded {self._max_duration_seconds}s, forcing ERROR",
                extra={"document_id": job.document_id, "ingestion_run": job.ingestion_run},
            )
            await self._pipeline.fail(
                job.document_id,
                job.ingestion_run,
                DocumentProcessingError(
                    f"Ingestion exceeded {self._max_duration_seconds:g} seconds",
                    document_id=job.document_id,
                ),
            )
        except asyncio.CancelledError:
            await self._pipeline.fail(
                job.document_id,
                job.ingestion_run,
                DocumentProcessingError("Ingestion interrupted by server shutdown"),
            )
            raise
        except LearnabilityError as e:
            logger.warning(
                f"{__name__}:_run - Ingestion failed: {e.message}",
                extra={"document_id": job.document_id, "error_type": type(e).__name__},
            )
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:_run - Unhandled ingestion failure",
                e,
                document_id=job.document_id,
                tenant_id=job.tenant_id,
                ingestion_run=job.ingestion_run,
            )
