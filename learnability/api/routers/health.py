"""
Health check API endpoints.

Routes: GET /health, GET /health/db, GET /health/vector-store

Dependencies: learnability.api.deps, learnability.application.services
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from learnability.api.deps import get_db, get_index_service
from learnability.application.services.index_service import IndexService
from learnability.core.exceptions import IndexUnavailableError

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


def _unhealthy(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content=HealthResponse(status="unhealthy", message=message).model_dump(),
    )


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(db: AsyncSession = Depends(get_db)):
    """Database health check."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"{__name__}:health_check_db - {type(e).__name__}: {e}")
        return _unhealthy("Database connection failed")
    return HealthResponse(status="healthy", message="Database connection OK")


@router.get("/vector-store", response_model=HealthResponse)
async def health_check_vector_store(index_service: IndexService = Depends(get_index_service)):
    """Vector store health check."""
    try:
        await index_service.check_health()
    except IndexUnavailableError as e:
        logger.error(f"{__name__}:health_check_vector_store - {e.message}")
        return _unhealthy("Vector store unreachable")
    return HealthResponse(status="healthy", message="Vector store accessible")
