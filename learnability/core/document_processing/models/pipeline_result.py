"""
Pipeline result model for document processing.

Dependencies: pydantic
System role: Return type for IngestionPipeline.ingest()
"""

from pydantic import BaseModel, Field


class PipelineResult(BaseModel):
    """Result of a successful ingestion run."""

    document_id: str = Field(description="Ingested document")
    ingestion_run: int = Field(description="Run identifier the chunks were tagged with")
    chunk_count: int = Field(description="Number of chunks indexed")
    replaced_chunks: int = Field(default=0, description="Chunks from earlier runs deleted first")
    processing_time_ms: float = Field(description="Total processing time in milliseconds")
