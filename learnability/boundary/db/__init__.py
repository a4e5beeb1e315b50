"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), create_tables(): Connection management
  - DocumentModel, DocumentStatus, SubjectModel: Domain entities
  - document_crud, subject_crud: CRUD operation singletons

Dependencies: sqlalchemy, learnability.configs
System role: Relational adapter for document status and subject lookups
"""

from learnability.boundary.db.base import Base, TimestampMixin, UUIDMixin
from learnability.boundary.db.connection import (
    create_tables,
    get_async_engine,
    get_async_session_factory,
)
from learnability.boundary.db.models import DocumentModel, DocumentStatus, SubjectModel
from learnability.boundary.db.CRUD import (
    BaseCRUD,
    DocumentCRUD,
    SubjectCRUD,
    document_crud,
    subject_crud,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "create_tables",
    "get_async_engine",
    "get_async_session_factory",
    "DocumentModel",
    "DocumentStatus",
    "SubjectModel",
    "BaseCRUD",
    "DocumentCRUD",
    "SubjectCRUD",
    "document_crud",
    "subject_crud",
]
