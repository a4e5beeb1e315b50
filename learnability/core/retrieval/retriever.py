"""
Scoped retriever with a single subject fallback.

Embeds the question, searches the vector index under the query scope's
primary filter and, when a document-ID scoped search comes back empty,
retries exactly once with the subject filter. Index outages degrade to an
empty result; embedding failures and deadline overruns propagate.

Dependencies: pydantic, learnability.core.document_processing, learnability.boundary.vdb
System role: Retrieval stage of question answering
"""

import asyncio
import logging

from pydantic import BaseModel, Field

from learnability.boundary.vdb.milvus_index import VectorIndex
from learnability.boundary.vdb.vector_schemas import VectorSearchResult
from learnability.core.document_processing.tasks.embedding_task import EmbeddingClient
from learnability.core.exceptions import IndexUnavailableError, QueryTimeoutError
from learnability.core.retrieval.filters import Filter, QueryScope

logger = logging.getLogger(__name__)

Passage = VectorSearchResult


class QueryResult(BaseModel):
    """Ranked passages for a question, plus how they were obtained."""

    passages: list[Passage] = Field(default_factory=list)
    found: bool = Field(description="False means there is no relevant context to cite")
    used_fallback: bool = Field(default=False, description="Subject fallback search was run")
    degraded: bool = Field(default=False, description="Vector index was unavailable")

    @property
    def top_score(self) -> float | None:
        return self.passages[0].score if self.passages else None


class Retriever:
    """Retrieve ranked passages for a question within a tenant's scope."""

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        vector_index: VectorIndex,
        top_k: int = 3,
        timeout_seconds: float = 15.0,
    ) -> None:
        self._embedding_client = embedding_client
        self._vector_index = vector_index
        self._top_k = top_k
        self._timeout_seconds = timeout_seconds

    async def retrieve(self, scope: QueryScope, question: str) -> QueryResult:
        """
        Find passages relevant to a question.

        Args:
            scope: Tenant plus optional subject/document-ID narrowing
            question: User question text

        Returns:
            QueryResult: found=False with no passages when nothing matched or
            the index was unavailable (degraded=True)

        Raises:
            EmbeddingError: Question could not be embedded
            QueryTimeoutError: Embedding plus search exceeded the deadline
        """
        try:
            return await asyncio.wait_for(self._retrieve(scope, question), self._timeout_seconds)
        except asyncio.TimeoutError as e:
            logger.warning(
                f"{__name__}:retrieve - Query exceeded {self._timeout_seconds}s deadline",
                extra={"tenant_id": scope.tenant_id, "subject_id": scope.subject_id},
            )
            raise QueryTimeoutError(
                f"Query did not finish within {self._timeout_seconds} seconds",
                {"tenant_id": scope.tenant_id},
            ) from e

    async def _search(self, vector: list[float], filter: Filter) -> list[Passage]:
        return await asyncio.to_thread(self._vector_index.search, vector, filter, self._top_k)

    async def _retrieve(self, scope: QueryScope, question: str) -> QueryResult:
        vector = await asyncio.to_thread(self._embedding_client.embed_query, question)

        used_fallback = False
        try:
            passages = await self._search(vector, scope.primary_filter())
            fallback = scope.fallback_filter()
            if not passages and fallback is not None:
                logger.info(
                    f"{__name__}:_retrieve - No document-scoped hits, falling back to subject filter",
                    extra={"tenant_id": scope.tenant_id, "subject_id": scope.subject_id},
                )
                used_fallback = True
                passages = await self._search(vector, fallback)
        except IndexUnavailableError as e:
            logger.warning(
                f"{__name__}:_retrieve - Vector index unavailable, returning degraded result: {e.message}",
                extra={"tenant_id": scope.tenant_id, "operation": e.operation},
            )
            return QueryResult(found=False, used_fallback=used_fallback, degraded=True)

        logger.info(
            f"{__name__}:_retrieve - Retrieved {len(passages)} passages",
            extra={"tenant_id": scope.tenant_id, "used_fallback": used_fallback},
        )
        return QueryResult(passages=passages, found=bool(passages), used_fallback=used_fallback)
