"""
Subject CRUD operations.

Dependencies: sqlalchemy, learnability.boundary.db.models
System role: Subject persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from learnability.boundary.db.CRUD.base_crud import BaseCRUD
from learnability.boundary.db.models.subject_model import SubjectModel


class SubjectCRUD(BaseCRUD[SubjectModel]):
    """CRUD operations for SubjectModel."""

    def __init__(self) -> None:
        super().__init__(SubjectModel)

    async def get_for_tenant(
        self,
        session: AsyncSession,
        id: UUID,
        tenant_id: str,
    ) -> SubjectModel | None:
        """Retrieve a subject only if it belongs to the tenant."""
        stmt = select(SubjectModel).where(
            SubjectModel.id == id,
            SubjectModel.tenant_id == tenant_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_tenant(self, session: AsyncSession, tenant_id: str) -> Sequence[SubjectModel]:
        """List a tenant's subjects ordered by name."""
        stmt = (
            select(SubjectModel)
            .where(SubjectModel.tenant_id == tenant_id)
            .order_by(SubjectModel.name)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


subject_crud = SubjectCRUD()
