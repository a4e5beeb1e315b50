"""
Background workers.

Exports: IngestionWorker, IngestionJob
"""

from learnability.workers.ingestion_worker import IngestionJob, IngestionWorker

__all__ = ["IngestionJob", "IngestionWorker"]
