"""
Document ingestion pipeline.

Exports: IngestionPipeline, PipelineResult, failure_reason
"""

from learnability.core.document_processing.entrypoint import IngestionPipeline, failure_reason
from learnability.core.document_processing.models import PipelineResult

__all__ = ["IngestionPipeline", "PipelineResult", "failure_reason"]
