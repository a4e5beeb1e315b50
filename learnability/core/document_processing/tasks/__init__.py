"""
Document processing tasks.

Exports: ExtractionTask, ChunkingTask, EmbeddingClient
"""

from .chunking_task import ChunkingTask
from .embedding_task import EmbeddingClient
from .extraction_task import ExtractionTask

__all__ = ["ChunkingTask", "EmbeddingClient", "ExtractionTask"]
