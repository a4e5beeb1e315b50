"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from learnability.boundary.db.CRUD import document_crud

    document = await document_crud.get_for_tenant(db, document_id, tenant_id)
"""

from learnability.boundary.db.CRUD.base_crud import BaseCRUD
from learnability.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from learnability.boundary.db.CRUD.subject_crud import SubjectCRUD, subject_crud

__all__ = [
    "BaseCRUD",
    "DocumentCRUD",
    "document_crud",
    "SubjectCRUD",
    "subject_crud",
]
