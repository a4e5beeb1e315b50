"""
Document status updater.

Writes the ingestion outcome back to the documents table:
PROCESSING -> COMPLETED (content = extracted text) or ERROR (content = reason).
Every write is guarded by the ingestion run so a superseded run cannot
overwrite the status of a newer one.

Dependencies: sqlalchemy, learnability.boundary.db
System role: Database persistence for background ingestion
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import async_sessionmaker

from learnability.boundary.db.CRUD.document_crud import document_crud

logger = logging.getLogger(__name__)


class DocumentStatusUpdater:
    """Update document status from background work, one short transaction per write."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """
        Initialize with a session factory.

        Args:
            session_factory: Factory for AsyncSession (a worker must not share request sessions)
        """
        self._session_factory = session_factory

    async def mark_completed(self, document_id: str, ingestion_run: int, content: str) -> bool:
        """
        Mark document COMPLETED and store its extracted text.

        Returns:
            bool: False if the row is gone or has moved on to a newer run
        """
        async with self._session_factory() as session:
            try:
                updated = await document_crud.mark_completed(
                    session, uuid.UUID(document_id), ingestion_run, content
                )
                await session.commit()
            except Exception as e:
                logger.error(f"{__name__}:mark_completed - {type(e).__name__}: {e}")
                await session.rollback()
                raise

        if updated:
            logger.info(
                f"{__name__}:mark_completed - Document marked as COMPLETED",
                extra={"document_id": document_id, "ingestion_run": ingestion_run},
            )
        else:
            logger.warning(
                f"{__name__}:mark_completed - Document missing or superseded, status not written",
                extra={"document_id": document_id, "ingestion_run": ingestion_run},
            )
        return updated

    async def mark_failed(self, document_id: str, ingestion_run: int, error_message: str) -> bool:
        """
        Mark document ERROR with the failure reason as content.

        Returns:
            bool: False if the row is gone or has moved on to a newer run
        """
        async with self._session_factory() as session:
            try:
                updated = await document_crud.mark_failed(
                    session, uuid.UUID(document_id), ingestion_run, error_message
                )
                await session.commit()
            except Exception as e:
                logger.error(f"{__name__}:mark_failed - {type(e).__name__}: {e}")
                await session.rollback()
                raise

        logger.info(
            f"{__name__}:mark_failed - Document marked as ERROR",
            extra={"document_id": document_id, "updated": updated, "reason": error_message[:200]},
        )
        return updated

    async def fail_stale_processing(self, reason: str) -> int:
        """
        Mark documents left PROCESSING by a previous process as ERROR.

        Returns:
            int: Number of documents updated
        """
        async with self._session_factory() as session:
            try:
                count = await document_crud.fail_stale_processing(session, reason)
                await session.commit()
            except Exception as e:
                logger.error(f"{__name__}:fail_stale_processing - {type(e).__name__}: {e}")
                await session.rollback()
                raise

        if count:
            logger.warning(
                f"{__name__}:fail_stale_processing - Marked {count} interrupted documents as ERROR"
            )
        return count

    async def document_exists(self, document_id: str) -> bool:
        """Check whether the document row still exists."""
        async with self._session_factory() as session:
            return await document_crud.exists(session, uuid.UUID(document_id))
