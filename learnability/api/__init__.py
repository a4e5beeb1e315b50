"""
API routes module.

FastAPI routers for all HTTP endpoints.
"""

from fastapi import APIRouter

from .routers import (
    admin_router,
    documents_router,
    health_router,
    query_router,
    subjects_router,
)

api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(subjects_router)
api_router.include_router(documents_router)
api_router.include_router(query_router)
api_router.include_router(admin_router)

__all__ = ["api_router"]
