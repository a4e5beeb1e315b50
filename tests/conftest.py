"""
Shared test fixtures and configuration for entire test suite.

Provides: SQLite async database, in-memory vector index, deterministic
embeddings, temp upload directory
Dependencies: pytest, sqlalchemy, aiosqlite, langchain_core
System role: Test infrastructure and fixture management
"""

import hashlib
import math
import uuid
from typing import Any, Sequence

import pytest
from langchain_core.embeddings import Embeddings

from learnability.boundary.vdb.vector_schemas import ChunkRecord, VectorSearchResult
from learnability.core.exceptions import IndexUnavailableError
from learnability.core.retrieval.filters import Eq, Filter

TEST_DIMENSION = 8


def deterministic_vector(text: str, dimension: int = TEST_DIMENSION) -> list[float]:
    """Stable non-zero vector derived from the text's hash."""
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    return [digest[i % len(digest)] / 255.0 + 0.01 for i in range(dimension)]


def cosine(a: Sequence[float], b: Sequence[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


class FakeEmbeddings(Embeddings):
    """LangChain Embeddings returning hash-derived vectors."""

    def __init__(self, dimension: int = TEST_DIMENSION) -> None:
        self.dimension = dimension
        self.document_calls: list[list[str]] = []
        self.query_calls: list[str] = []
        self.fail_with: Exception | None = None

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        if self.fail_with is not None:
            raise self.fail_with
        self.document_calls.append(list(texts))
        return [deterministic_vector(text, self.dimension) for text in texts]

    def embed_query(self, text: str) -> list[float]:
        if self.fail_with is not None:
            raise self.fail_with
        self.query_calls.append(text)
        return deterministic_vector(text, self.dimension)


class FakeVectorIndex:
    """In-memory stand-in for VectorIndex with the same method surface."""

    def __init__(self, dimension: int = TEST_DIMENSION) -> None:
        self.dimension = dimension
        self.rows: list[dict[str, Any]] = []
        self.search_filters: list[Filter | None] = []
        self.unavailable = False
        self.fail_insert = False
        self.insert_calls = 0

    def _check_available(self, operation: str) -> None:
        if self.unavailable:
            raise IndexUnavailableError("Milvus is down", operation=operation)

    def ensure_collection(self) -> None:
        self._check_available("ensure_collection")

    def ensure_embedding_index(self) -> None:
        self._check_available("ensure_embedding_index")

    def insert(self, records: Sequence[ChunkRecord]) -> int:
        self._check_available("insert")
        if self.fail_insert:
            raise IndexUnavailableError("Insert failed", operation="insert")
        self.insert_calls += 1
        for record in records:
            row = record.model_dump()
            row["subject_id"] = record.subject_id or ""
            self.rows.append(row)
        return len(records)

    def search(self, vector: list[float], filter: Filter | None, top_k: int) -> list[VectorSearchResult]:
        self._check_available("search")
        self.search_filters.append(filter)
        matching = [row for row in self.rows if filter is None or filter.matches(row)]
        scored = sorted(
            (
                VectorSearchResult(
                    text=row["text"],
                    score=cosine(vector, row["embedding"]),
                    document_id=row["document_id"],
                    chunk_index=row["chunk_index"],
                    subject_id=row["subject_id"] or None,
                    metadata=row["metadata"],
                )
                for row in matching
            ),
            key=lambda result: result.score,
            reverse=True,
        )
        return scored[:top_k]

    def _delete(self, filter: Filter) -> int:
        self._check_available("delete")
        before = len(self.rows)
        self.rows = [row for row in self.rows if not filter.matches(row)]
        return before - len(self.rows)

    def delete_by_document(self, document_id: str) -> int:
        return self._delete(Eq("document_id", document_id))

    def delete_by_subject(self, subject_id: str) -> int:
        return self._delete(Eq("subject_id", subject_id))

    def count(self, filter: Filter) -> int:
        self._check_available("count")
        return sum(1 for row in self.rows if filter.matches(row))

    def reset_index(self) -> dict[str, Any]:
        if self.unavailable:
            return {"success": False, "message": "Failed to reset index: Milvus is down"}
        return {"success": True, "message": "Index rebuilt"}

    def ping(self) -> bool:
        self._check_available("ping")
        return True

    def close(self) -> None:
        pass


@pytest.fixture
async def session_factory():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        async_sessionmaker: Factory bound to a fresh schema (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from learnability.boundary.db.base import Base
    from learnability.boundary.db import models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(session_factory):
    """Single test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def fake_embeddings() -> FakeEmbeddings:
    return FakeEmbeddings()


@pytest.fixture
def fake_index() -> FakeVectorIndex:
    return FakeVectorIndex()


@pytest.fixture
def embedding_client(fake_embeddings: FakeEmbeddings):
    """EmbeddingClient over FakeEmbeddings with retries disabled."""
    from learnability.core.document_processing.tasks.embedding_task import EmbeddingClient

    return EmbeddingClient(fake_embeddings, dimension=TEST_DIMENSION, max_attempts=1)


@pytest.fixture
def upload_dir(tmp_path):
    """Temporary directory for stored uploads."""
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def tenant_id() -> str:
    return "user-123"


@pytest.fixture
def other_tenant_id() -> str:
    return "user-456"


@pytest.fixture
def subject_id() -> uuid.UUID:
    return uuid.uuid4()
