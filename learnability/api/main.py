"""
FastAPI application with assembled routers.

Builds the shared resources (database engine, Milvus index, embedding
client, ingestion worker, retriever) in the lifespan and keeps them on
app.state for the request dependencies.

Dependencies: fastapi, uvicorn, learnability.api.routers
System role: API entry point with resource wiring and server launch
"""

import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from learnability.api import api_router
from learnability.boundary.db.connection import (
    create_tables,
    get_async_engine,
    get_async_session_factory,
)
from learnability.boundary.storage.file_store import FileStore
from learnability.boundary.vdb.milvus_index import VectorIndex
from learnability.configs import get_settings
from learnability.core.answering.answer_generator import AnswerGenerator
from learnability.core.document_processing.database.document_status_updater import (
    DocumentStatusUpdater,
)
from learnability.core.document_processing.embeddings_wrapper import build_embeddings
from learnability.core.document_processing.entrypoint import IngestionPipeline
from learnability.core.document_processing.tasks import (
    ChunkingTask,
    EmbeddingClient,
    ExtractionTask,
)
from learnability.core.exceptions import IndexUnavailableError
from learnability.core.retrieval.retriever import Retriever
from learnability.observability import configure_logging
from learnability.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware
from learnability.workers.ingestion_worker import IngestionWorker

RESTART_FAILURE_REASON = "Error processing: Ingestion interrupted by server restart"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = logging.getLogger("uvicorn")

    # Startup
    engine = get_async_engine(settings.database)
    session_factory = get_async_session_factory(engine)
    await create_tables(engine)

    file_store = FileStore(settings.ingestion.upload_directory)

    vector_index = VectorIndex(settings.vector_store)
    try:
        await asyncio.to_thread(vector_index.ensure_collection)
        await asyncio.to_thread(vector_index.ensure_embedding_index)
    except IndexUnavailableError as e:
        # Queries degrade and ingestion fails per document until Milvus is back
        logger.error(f"Vector index unavailable at startup: {e.message}")

    embedding_client = EmbeddingClient(
        build_embeddings(settings.embedding),
        dimension=settings.embedding.dimension,
        batch_size=settings.embedding.batch_size,
        max_input_chars=settings.embedding.max_input_chars,
        max_attempts=settings.embedding.max_attempts,
    )
    chunking_task = ChunkingTask(
        chunk_size=settings.ingestion.chunk_size,
        chunk_overlap=settings.ingestion.chunk_overlap,
        max_chunk_chars=settings.embedding.max_input_chars,
    )

    status_updater = DocumentStatusUpdater(session_factory)
    stale = await status_updater.fail_stale_processing(RESTART_FAILURE_REASON)
    if stale:
        logger.warning(f"Marked {stale} interrupted document(s) as ERROR")

    pipeline = IngestionPipeline(
        extraction_task=ExtractionTask(),
        chunking_task=chunking_task,
        embedding_client=embedding_client,
        vector_index=vector_index,
        status_updater=status_updater,
    )
    worker = IngestionWorker(
        pipeline,
        worker_count=settings.ingestion.worker_count,
        queue_size=settings.ingestion.queue_size,
        max_duration_seconds=settings.ingestion.max_duration_seconds,
    )
    await worker.start()

    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.file_store = file_store
    app.state.vector_index = vector_index
    app.state.ingestion_worker = worker
    app.state.retriever = Retriever(
        embedding_client,
        vector_index,
        top_k=settings.retrieval.top_k,
        timeout_seconds=settings.retrieval.query_timeout_seconds,
    )
    app.state.answer_generator = AnswerGenerator.from_settings(settings.answer)
    logger.info("Learnability services initialized")

    yield

    # Shutdown
    await worker.stop()
    vector_index.close()
    await engine.dispose()
    logger.info("Learnability services stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Learnability RAG API",
        description="Per-tenant document ingestion and grounded question answering",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "learnability.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
