"""
Embedding client.

Turns chunk and question text into fixed-dimension vectors through any
LangChain Embeddings implementation. Batches documents while preserving
order, retries transient upstream failures with tenacity, and reports
every failure as EmbeddingError.

Dependencies: langchain_core, tenacity
System role: Embedding stage of ingestion and query
"""

import logging
from typing import Callable, Sequence, TypeVar

from langchain_core.embeddings import Embeddings
from tenacity import (
    Retrying,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)
from tenacity.wait import wait_base

from learnability.core.exceptions import ConfigurationError, EmbeddingError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EmbeddingClient:
    """Fixed-dimension embedding client with batching and retries."""

    def __init__(
        self,
        embeddings: Embeddings,
        dimension: int,
        batch_size: int = 50,
        max_input_chars: int = 8000,
        max_attempts: int = 4,
        retry_wait: wait_base | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            embeddings: LangChain embeddings model
            dimension: Expected vector length
            batch_size: Texts per upstream call
            max_input_chars: Longest text accepted
            max_attempts: Attempts per upstream call before failing
            retry_wait: tenacity wait strategy between attempts
        """
        if batch_size < 1:
            raise ConfigurationError("Embedding batch_size must be at least 1")
        self._embeddings = embeddings
        self._dimension = dimension
        self._batch_size = batch_size
        self._max_input_chars = max_input_chars
        self._max_attempts = max_attempts
        self._retry_wait = retry_wait or wait_exponential_jitter(initial=1, max=20, jitter=2)

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def max_input_chars(self) -> int:
        return self._max_input_chars

    def _call(self, operation: str, fn: Callable[[], T]) -> T:
        retrying = Retrying(
            retry=retry_if_not_exception_type((EmbeddingError, ConfigurationError)),
            stop=stop_after_attempt(self._max_attempts),
            wait=self._retry_wait,
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:{operation} - Retry {retry_state.attempt_number}/{self._max_attempts} "
                f"after {type(retry_state.outcome.exception()).__name__}"
            ),
            reraise=True,
        )
        try:
            return retrying(fn)
        except (EmbeddingError, ConfigurationError):
            raise
        except Exception as e:
            raise EmbeddingError(
                f"Embedding model call failed: {e}",
                {"operation": operation, "error_type": type(e).__name__},
            ) from e

    def _check_text(self, text: str) -> None:
        if not text or not text.strip():
            raise EmbeddingError("Cannot embed empty text")
        if len(text) > self._max_input_chars:
            raise EmbeddingError(
                f"Text of {len(text)} characters exceeds the {self._max_input_chars} character limit"
            )

    def _check_vector(self, vector: Sequence[float]) -> list[float]:
        if not isinstance(vector, (list, tuple)) or not vector:
            raise EmbeddingError("Embedding model returned a malformed vector")
        if len(vector) != self._dimension:
            raise ConfigurationError(
                f"Embedding model returned dimension {len(vector)}, expected {self._dimension}"
            )
        return [float(value) for value in vector]

    def embed_documents(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Embed chunk texts in order.

        Args:
            texts: Texts to embed

        Returns:
            list[list[float]]: One vector per text, same order as input

        Raises:
            EmbeddingError: Upstream failure, rejected text or malformed response
            ConfigurationError: Vector dimension differs from the configured one
        """
        for text in texts:
            self._check_text(text)

        vectors: list[list[float]] = []
        for start in range(0, len(texts), self._batch_size):
            batch = list(texts[start:start + self._batch_size])
            result = self._call("embed_documents", lambda: self._embeddings.embed_documents(batch))
            if len(result) != len(batch):
                raise EmbeddingError(
                    f"Embedding model returned {len(result)} vectors for {len(batch)} texts",
                    {"batch_start": start},
                )
            vectors.extend(self._check_vector(vector) for vector in result)

        logger.debug(f"{__name__}:embed_documents - Embedded {len(vectors)} texts")
        return vectors

    def embed(self, text: str) -> list[float]:
        """Embed a single chunk text."""
        return self.embed_documents([text])[0]

    def embed_query(self, text: str) -> list[float]:
        """
        Embed a question for similarity search.

        Raises:
            EmbeddingError: Upstream failure, rejected text or malformed response
        """
        self._check_text(text)
        vector = self._call("embed_query", lambda: self._embeddings.embed_query(text))
        return self._check_vector(vector)
