"""
API routers.
"""

from .admin import router as admin_router
from .documents import router as documents_router
from .health import router as health_router
from .query import router as query_router
from .subjects import router as subjects_router

__all__ = [
    "admin_router",
    "documents_router",
    "health_router",
    "query_router",
    "subjects_router",
]
