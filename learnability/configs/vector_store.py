"""
Vector store configuration settings.

Manages Milvus connection, collection schema and similarity index parameters.

Dependencies: pydantic, pydantic_settings
System role: Vector index configuration for RAG retrieval
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from learnability.configs.base import BaseSettings


class VectorStoreSettings(BaseSettings):
    """Milvus vector index configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MILVUS_",
        case_sensitive=False,
        extra="ignore",
    )

    uri: str = Field(default="http://localhost:19530", description="Milvus server URI")
    token: str | None = Field(default=None, description="Milvus auth token (user:password)")
    alias: str = Field(default="learnability", description="pymilvus connection alias")
    collection_name: str = Field(
        default="learnability_sources",
        description="Collection holding every tenant's chunks",
    )
    embedding_dimension: int = Field(
        default=768,
        description="Vector dimension; must match the embedding model output",
    )

    index_type: str = Field(default="HNSW", description="Similarity index type")
    metric_type: str = Field(default="COSINE", description="Similarity metric")
    hnsw_m: int = Field(default=16, description="HNSW graph degree (M)")
    hnsw_ef_construction: int = Field(default=200, description="HNSW efConstruction")
    search_ef: int = Field(default=64, description="HNSW ef used at search time")

    text_max_length: int = Field(
        default=8192,
        description="VARCHAR byte limit for chunk text (multibyte safe for 2000-char chunks)",
    )
    tag_max_length: int = Field(
        default=64,
        description="VARCHAR limit for tenant/subject/document tags",
    )
