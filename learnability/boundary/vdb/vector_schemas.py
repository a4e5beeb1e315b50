"""
Vector index record and result schemas.

Dependencies: pydantic
System role: Data contracts between the ingestion/retrieval core and the vector index
"""

from typing import Any

from pydantic import BaseModel, Field


class ChunkRecord(BaseModel):
    """One chunk as stored in the vector index."""

    text: str = Field(..., description="Chunk text")
    embedding: list[float] = Field(..., description="Fixed-dimension embedding vector")
    tenant_id: str = Field(..., description="Owning tenant")
    document_id: str = Field(..., description="Source document")
    subject_id: str | None = Field(default=None, description="Subject tag; None for unfiled documents")
    chunk_index: int = Field(..., ge=0, description="Position in the document's chunk sequence")
    ingestion_run: int = Field(default=1, ge=1, description="Run that produced this chunk")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Extra non-filterable metadata")


class VectorSearchResult(BaseModel):
    """Single similarity search hit."""

    text: str = Field(..., description="Chunk text")
    score: float = Field(..., description="Cosine similarity (higher is closer)")
    document_id: str = Field(..., description="Source document")
    chunk_index: int = Field(..., description="Position in the source document")
    subject_id: str | None = Field(default=None)
    metadata: dict[str, Any] = Field(default_factory=dict)
