"""
Vector index boundary: Milvus adapter and record schemas.
"""

from learnability.boundary.vdb.milvus_index import VectorIndex
from learnability.boundary.vdb.vector_schemas import ChunkRecord, VectorSearchResult

__all__ = ["VectorIndex", "ChunkRecord", "VectorSearchResult"]
