"""
Question answering endpoint.

Routes: POST /query

Dependencies: learnability.application.services, learnability.models
System role: RAG query HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from learnability.api.deps import get_query_service, get_tenant_id
from learnability.application.services.query_service import QueryService
from learnability.models.query import QueryRequest, QueryResponse

from .error_handling import handle_service_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/query", tags=["query"])


@router.post("", response_model=QueryResponse)
@handle_service_errors
async def answer_query(
    request: QueryRequest,
    tenant_id: str = Depends(get_tenant_id),
    query_service: QueryService = Depends(get_query_service),
) -> QueryResponse:
    """
    Answer a question from the caller's materials.

    found=false means nothing relevant was found; the answer then explains
    that instead of guessing.

    Raises:
        HTTPException(404): Subject not found
        HTTPException(502): Question could not be embedded
        HTTPException(504): Query deadline exceeded (retryable)
    """
    logger.info(
        f"{__name__}:answer_query - Query received",
        extra={"tenant_id": tenant_id, "subject_id": str(request.subject_id) if request.subject_id else None},
    )
    return await query_service.answer_query(tenant_id, request.question, request.subject_id)
