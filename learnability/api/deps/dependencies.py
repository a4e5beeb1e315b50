"""
Dependency injection container.

Factory functions for FastAPI dependencies. Shared resources (session
factory, vector index, worker, retriever, answer generator) are created once
in the application lifespan and read from app.state.

Dependencies: learnability.configs, learnability.application, learnability.boundary
System role: DI container for service injection
"""

from typing import AsyncGenerator

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from learnability.application.services import (
    DocumentService,
    IndexService,
    QueryService,
    SubjectService,
)
from learnability.boundary.storage.file_store import FileStore
from learnability.boundary.vdb.milvus_index import VectorIndex
from learnability.configs import Settings, get_settings
from learnability.core.answering.answer_generator import AnswerGenerator
from learnability.core.retrieval.retriever import Retriever
from learnability.workers.ingestion_worker import IngestionWorker

MAX_TENANT_ID_LENGTH = 64


def get_settings_dependency() -> Settings:
    return get_settings()


def get_tenant_id(x_user_id: str | None = Header(default=None, alias="X-User-ID")) -> str:
    """
    Resolve the calling tenant from the X-User-ID header.

    Raises:
        HTTPException(401): Header missing or blank
        HTTPException(400): Header too long
    """
    tenant_id = (x_user_id or "").strip()
    if not tenant_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-ID header")
    if len(tenant_id) > MAX_TENANT_ID_LENGTH:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="X-User-ID header too long")
    return tenant_id


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped async session from the shared session factory."""
    async with request.app.state.session_factory() as session:
        yield session


def get_vector_index(request: Request) -> VectorIndex:
    return request.app.state.vector_index


def get_ingestion_worker(request: Request) -> IngestionWorker:
    return request.app.state.ingestion_worker


def get_file_store(request: Request) -> FileStore:
    return request.app.state.file_store


def get_retriever(request: Request) -> Retriever:
    return request.app.state.retriever


def get_answer_generator(request: Request) -> AnswerGenerator:
    return request.app.state.answer_generator


def get_document_service(
    db: AsyncSession = Depends(get_db),
    vector_index: VectorIndex = Depends(get_vector_index),
    worker: IngestionWorker = Depends(get_ingestion_worker),
    file_store: FileStore = Depends(get_file_store),
    settings: Settings = Depends(get_settings_dependency),
) -> DocumentService:
    return DocumentService(db, vector_index, worker, file_store, settings.ingestion)


def get_subject_service(
    db: AsyncSession = Depends(get_db),
    vector_index: VectorIndex = Depends(get_vector_index),
    file_store: FileStore = Depends(get_file_store),
) -> SubjectService:
    return SubjectService(db, vector_index, file_store)


def get_query_service(
    db: AsyncSession = Depends(get_db),
    retriever: Retriever = Depends(get_retriever),
    answer_generator: AnswerGenerator = Depends(get_answer_generator),
) -> QueryService:
    return QueryService(db, retriever, answer_generator)


def get_index_service(vector_index: VectorIndex = Depends(get_vector_index)) -> IndexService:
    return IndexService(vector_index)
