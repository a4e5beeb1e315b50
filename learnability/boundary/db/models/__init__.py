"""
ORM models registered with the declarative Base.
"""

from learnability.boundary.db.models.document_model import DocumentModel, DocumentStatus
from learnability.boundary.db.models.subject_model import SubjectModel

__all__ = ["DocumentModel", "DocumentStatus", "SubjectModel"]
