"""
Embedding model configuration.

Dependencies: pydantic, pydantic_settings
System role: Google Generative AI embedding client configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from learnability.configs.base import BaseSettings


class EmbeddingSettings(BaseSettings):
    """Embedding client configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
    )

    model: str = Field(
        default="models/gemini-embedding-001",
        description="Google embedding model ID",
    )
    dimension: int = Field(default=768, description="Fixed output dimensionality")
    google_api_key: str | None = Field(
        default=None,
        description="Google API key (falls back to GOOGLE_API_KEY in the environment)",
    )
    document_task_type: str = Field(default="RETRIEVAL_DOCUMENT")
    query_task_type: str = Field(default="RETRIEVAL_QUERY")
    batch_size: int = Field(default=50, description="Texts per upstream embed call")
    max_input_chars: int = Field(
        default=8000,
        description="Longest text the model accepts; chunk size may not exceed it",
    )
    max_attempts: int = Field(default=4, description="Attempts per batch before failing")
