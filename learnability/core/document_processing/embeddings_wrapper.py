"""
Google Generative AI Embeddings wrapper with fixed output dimensionality.

The base GoogleGenerativeAIEmbeddings class ignores output_dimensionality
in the constructor, so every call is routed through overrides that pass it
explicitly. Document and query calls also get their own default task types.

Dependencies: langchain_google_genai, learnability.configs
System role: Embedding dimension consistency for the Milvus collection
"""

import logging
from typing import List

from dotenv import load_dotenv
from langchain_google_genai import GoogleGenerativeAIEmbeddings

from learnability.configs.embedding import EmbeddingSettings
from learnability.core.exceptions import ConfigurationError

load_dotenv()

logger = logging.getLogger(__name__)


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """GoogleGenerativeAIEmbeddings with a fixed output dimensionality."""

    _output_dimensionality: int = 768
    _document_task_type: str | None = None
    _query_task_type: str | None = None

    def __init__(
        self,
        model: str = "models/gemini-embedding-001",
        output_dimensionality: int = 768,
        document_task_type: str | None = "RETRIEVAL_DOCUMENT",
        query_task_type: str | None = "RETRIEVAL_QUERY",
        **kwargs,
    ) -> None:
        """
        Initialize embeddings with fixed output dimensionality.

        Args:
            model: Google embedding model ID
            output_dimensionality: Fixed dimension for all embeddings
            document_task_type: Task type used by embed_documents unless overridden
            query_task_type: Task type used by embed_query unless overridden
            **kwargs: Additional arguments for GoogleGenerativeAIEmbeddings
        """
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality
        self._document_task_type = document_task_type
        self._query_task_type = query_task_type
        logger.info(
            f"{__name__}:__init__ - Initialized with model={model}, "
            f"output_dimensionality={output_dimensionality}"
        )

    def embed_documents(
        self,
        texts: List[str],
        *,
        batch_size: int = 100,
        task_type: str | None = None,
        titles: List[str] | None = None,
        output_dimensionality: int | None = None,
    ) -> List[List[float]]:
        return super().embed_documents(
            texts,
            batch_size=batch_size,
            task_type=task_type or self._document_task_type,
            titles=titles,
            output_dimensionality=output_dimensionality or self._output_dimensionality,
        )

    def embed_query(
        self,
        text: str,
        task_type: str | None = None,
        title: str | None = None,
        output_dimensionality: int | None = None,
    ) -> List[float]:
        return super().embed_query(
            text,
            task_type=task_type or self._query_task_type,
            title=title,
            output_dimensionality=output_dimensionality or self._output_dimensionality,
        )


def build_embeddings(settings: EmbeddingSettings) -> FixedDimensionEmbeddings:
    """
    Construct the Google embeddings model from settings.

    Raises:
        ConfigurationError: Model cannot be configured (e.g. missing API key)
    """
    kwargs = {}
    if settings.google_api_key:
        kwargs["google_api_key"] = settings.google_api_key
    try:
        return FixedDimensionEmbeddings(
            model=settings.model,
            output_dimensionality=settings.dimension,
            document_task_type=settings.document_task_type,
            query_task_type=settings.query_task_type,
            **kwargs,
        )
    except Exception as e:
        raise ConfigurationError(f"Cannot configure embedding model {settings.model}: {e}") from e
