"""
Subject ORM model.

A subject groups a tenant's learning materials. Queries may be scoped to one.

Dependencies: sqlalchemy, learnability.boundary.db.base
System role: Subject persistence
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from learnability.boundary.db.base import Base, TimestampMixin, UUIDMixin


class SubjectModel(Base, UUIDMixin, TimestampMixin):
    """Subject owned by a single tenant."""

    __tablename__ = "subjects"

    tenant_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color: Mapped[str | None] = mapped_column(String(16), nullable=True)
