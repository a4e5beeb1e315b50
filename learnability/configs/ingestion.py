"""
Ingestion pipeline and worker configuration.

Dependencies: pydantic, pydantic_settings
System role: Chunking, upload storage and background worker settings
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from learnability.configs.base import BaseSettings


class IngestionSettings(BaseSettings):
    """Settings for the document ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INGESTION_",
        case_sensitive=False,
        extra="ignore",
    )

    chunk_size: int = Field(default=2000, description="Maximum chunk size in characters")
    chunk_overlap: int = Field(default=200, description="Overlap between consecutive chunks")

    worker_count: int = Field(default=4, description="Concurrent ingestion workers")
    queue_size: int = Field(default=100, description="Pending jobs before uploads are rejected")
    max_duration_seconds: float = Field(
        default=900.0,
        description="Per-document watchdog; longer runs are marked ERROR",
    )

    upload_directory: str = Field(default="uploads", description="Where uploaded files are kept")
    allowed_extensions: list[str] = Field(
        default=[".pdf", ".txt", ".md", ".markdown", ".csv", ".html"],
        description="File types accepted for upload",
    )
    max_upload_bytes: int = Field(default=25 * 1024 * 1024, description="Upload size limit")
