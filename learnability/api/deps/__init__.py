"""API-specific dependencies."""

from .dependencies import (
    get_db,
    get_document_service,
    get_index_service,
    get_query_service,
    get_settings_dependency,
    get_subject_service,
    get_tenant_id,
)

__all__ = [
    "get_db",
    "get_document_service",
    "get_index_service",
    "get_query_service",
    "get_settings_dependency",
    "get_subject_service",
    "get_tenant_id",
]
