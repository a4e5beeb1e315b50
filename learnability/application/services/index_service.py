"""
Vector index maintenance service.

Dependencies: learnability.boundary.vdb
System role: Administrative index operations
"""

import asyncio
import logging

from learnability.boundary.vdb.milvus_index import VectorIndex
from learnability.models.query import ResetIndexResponse

logger = logging.getLogger(__name__)


class IndexService:
    """Administrative operations on the shared vector index."""

    def __init__(self, vector_index: VectorIndex) -> None:
        self._vector_index = vector_index

    async def reset_index(self) -> ResetIndexResponse:
        """Drop and rebuild the similarity index without touching stored chunks."""
        logger.info(f"{__name__}:reset_index - Index reset requested")
        result = await asyncio.to_thread(self._vector_index.reset_index)
        return ResetIndexResponse(**result)

    async def check_health(self) -> bool:
        """Raises IndexUnavailableError when Milvus cannot be reached."""
        return await asyncio.to_thread(self._vector_index.ping)
