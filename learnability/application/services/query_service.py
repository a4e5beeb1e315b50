"""
Query service.

Resolves a question's scope from the relational store, retrieves passages
and phrases the answer. When nothing relevant is found, or the index is
unavailable, a fixed explanatory answer is returned instead of calling the
chat model.

Dependencies: learnability.core.retrieval, learnability.core.answering, learnability.boundary.db
System role: Question answering orchestration
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from learnability.boundary.db.CRUD.document_crud import document_crud
from learnability.boundary.db.CRUD.subject_crud import subject_crud
from learnability.core.answering.answer_generator import AnswerGenerator
from learnability.core.exceptions import SubjectNotFoundError
from learnability.core.retrieval.filters import QueryScope
from learnability.core.retrieval.retriever import QueryResult, Retriever
from learnability.models.query import PassageResponse, QueryResponse

logger = logging.getLogger(__name__)

NO_CONTEXT_ANSWER = (
    "I couldn't find any relevant information related to your question in the materials "
    "for this subject. Would you like to add more materials on this topic?"
)
INDEX_UNAVAILABLE_ANSWER = (
    "I'm having trouble searching through your materials right now. This could be because "
    "the vector database is still initializing or needs maintenance. Please try again in a "
    "few moments."
)


class QueryService:
    """Answer questions from a tenant's indexed materials."""

    def __init__(
        self,
        db: AsyncSession,
        retriever: Retriever,
        answer_generator: AnswerGenerator,
    ) -> None:
        self.db = db
        self._retriever = retriever
        self._answer_generator = answer_generator

    async def resolve_scope(self, tenant_id: str, subject_id: UUID | None) -> QueryScope:
        """
        Build the search scope for a tenant and optional subject.

        Raises:
            SubjectNotFoundError: Subject missing or owned by another tenant
        """
        if subject_id is None:
            return QueryScope(tenant_id=tenant_id)
        if await subject_crud.get_for_tenant(self.db, subject_id, tenant_id) is None:
            raise SubjectNotFoundError(str(subject_id))
        document_ids = await document_crud.get_ids_by_subject(self.db, tenant_id, subject_id)
        return QueryScope(
            tenant_id=tenant_id,
            subject_id=str(subject_id),
            document_ids=tuple(document_ids),
        )

    async def query(self, tenant_id: str, question: str, subject_id: UUID | None = None) -> QueryResult:
        """
        Retrieve ranked passages for a question without generating an answer.

        Raises:
            SubjectNotFoundError: Subject missing or owned by another tenant
            EmbeddingError: Question could not be embedded
            QueryTimeoutError: Deadline exceeded
        """
        scope = await self.resolve_scope(tenant_id, subject_id)
        logger.info(
            f"{__name__}:query - Resolved scope",
            extra={
                "tenant_id": tenant_id,
                "subject_id": scope.subject_id,
                "document_count": len(scope.document_ids),
            },
        )
        return await self._retriever.retrieve(scope, question)

    async def answer_query(
        self,
        tenant_id: str,
        question: str,
        subject_id: UUID | None = None,
    ) -> QueryResponse:
        """Retrieve passages and phrase an answer from them."""
        result = await self.query(tenant_id, question, subject_id)

        if result.degraded:
            answer = INDEX_UNAVAILABLE_ANSWER
        elif not result.found:
            answer = NO_CONTEXT_ANSWER
        else:
            answer = await self._answer_generator.generate(question, result.passages)

        return QueryResponse(
            answer=answer,
            found=result.found,
            passages=[
                PassageResponse(
                    text=passage.text,
                    score=passage.score,
                    document_id=passage.document_id,
                    chunk_index=passage.chunk_index,
                )
                for passage in result.passages
            ],
            relevance_score=result.top_score,
            subject_id=subject_id,
            used_fallback=result.used_fallback,
            degraded=result.degraded,
        )
