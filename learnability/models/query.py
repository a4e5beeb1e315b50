"""
Question answering request/response schemas.

Dependencies: pydantic
System role: Query API contracts
"""

import uuid

from pydantic import BaseModel, Field


class QueryRequest(BaseModel):
    """Question about the tenant's materials, optionally scoped to a subject."""

    question: str = Field(min_length=1, max_length=4000)
    subject_id: uuid.UUID | None = None


class PassageResponse(BaseModel):
    text: str
    score: float
    document_id: str
    chunk_index: int


class QueryResponse(BaseModel):
    """Answer plus the passages it was grounded on."""

    answer: str
    found: bool = Field(description="False when no relevant material was found")
    passages: list[PassageResponse] = Field(default_factory=list)
    relevance_score: float | None = Field(default=None, description="Score of the best passage")
    subject_id: uuid.UUID | None = None
    used_fallback: bool = False
    degraded: bool = Field(default=False, description="Vector index was unavailable")


class ResetIndexResponse(BaseModel):
    success: bool
    message: str
