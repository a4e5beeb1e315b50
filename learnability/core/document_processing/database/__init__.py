"""
Database access for the ingestion pipeline.

Exports: DocumentStatusUpdater
"""

from .document_status_updater import DocumentStatusUpdater

__all__ = ["DocumentStatusUpdater"]
