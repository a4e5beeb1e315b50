"""
Chunk domain model for document processing pipeline.

Dependencies: pydantic
System role: Data structure for document chunks in ingestion pipeline
"""

from pydantic import BaseModel, Field


class Chunk(BaseModel):
    """Ordered text segment produced by the chunker."""

    index: int = Field(ge=0, description="Position in the document's chunk sequence")
    content: str = Field(description="Chunk text content")
    start_index: int = Field(default=-1, description="Character offset in the source text")
