"""
Application services.

Exports: DocumentService, SubjectService, QueryService, IndexService
"""

from learnability.application.services.document_service import DocumentService
from learnability.application.services.index_service import IndexService
from learnability.application.services.query_service import QueryService
from learnability.application.services.subject_service import SubjectService

__all__ = ["DocumentService", "IndexService", "QueryService", "SubjectService"]
