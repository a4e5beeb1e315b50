"""
Subject request/response schemas.

Dependencies: pydantic
System role: Subject API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SubjectCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    color: str | None = Field(default=None, max_length=16)


class SubjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: str | None = None
    color: str | None = None
    created_at: datetime


class SubjectListResponse(BaseModel):
    subjects: list[SubjectResponse]
    total: int
