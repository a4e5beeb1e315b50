"""
Administrative endpoints.

Routes: POST /admin/reset-index

Dependencies: learnability.application.services
System role: Vector index maintenance HTTP API
"""

from fastapi import APIRouter, Depends

from learnability.api.deps import get_index_service
from learnability.application.services.index_service import IndexService
from learnability.models.query import ResetIndexResponse

from .error_handling import handle_service_errors

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/reset-index", response_model=ResetIndexResponse)
@handle_service_errors
async def reset_index(
    index_service: IndexService = Depends(get_index_service),
) -> ResetIndexResponse:
    """Drop and rebuild the similarity index. Stored chunks are kept."""
    return await index_service.reset_index()
