"""
Retrieval and answer generation configuration.

Dependencies: pydantic, pydantic_settings
System role: Query scope, deadline and chat model settings
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from learnability.configs.base import BaseSettings


class RetrievalSettings(BaseSettings):
    """Query-time retrieval settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RETRIEVAL_",
        case_sensitive=False,
        extra="ignore",
    )

    top_k: int = Field(default=3, description="Passages returned per query")
    query_timeout_seconds: float = Field(
        default=15.0,
        description="Deadline for embedding plus search",
    )


class AnswerSettings(BaseSettings):
    """Chat model used to phrase answers from retrieved passages."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ANSWER_",
        case_sensitive=False,
        extra="ignore",
    )

    model: str = Field(default="gemini-2.5-flash", description="Google chat model ID")
    temperature: float = Field(default=0.3)
    google_api_key: str | None = Field(default=None)
