"""
Tests for EmbeddingClient.

Uses FakeEmbeddings from conftest and MagicMock models to drive retry and
failure paths without network calls.

System role: Verification of embedding batching, validation and retries
"""

from unittest.mock import MagicMock

import pytest
from tenacity import wait_none

from learnability.core.document_processing.tasks.embedding_task import EmbeddingClient
from learnability.core.exceptions import ConfigurationError, EmbeddingError


def make_client(model, dimension: int = 4, **kwargs) -> EmbeddingClient:
    kwargs.setdefault("retry_wait", wait_none())
    return EmbeddingClient(model, dimension=dimension, **kwargs)


class TestEmbedDocuments:
    """Test EmbeddingClient.embed_documents()."""

    def test_returns_one_vector_per_text_in_order(self, embedding_client, fake_embeddings) -> None:
        """Should embed each text and keep input order."""
        texts = ["alpha", "beta", "gamma"]

        vectors = embedding_client.embed_documents(texts)

        assert len(vectors) == 3
        assert vectors == [fake_embeddings.embed_query(text) for text in texts]

    def test_batches_requests(self, fake_embeddings) -> None:
        """Should split work into batch_size calls."""
        client = EmbeddingClient(fake_embeddings, dimension=fake_embeddings.dimension, batch_size=2)

        vectors = client.embed_documents(["a", "b", "c", "d", "e"])

        assert len(vectors) == 5
        assert fake_embeddings.document_calls == [["a", "b"], ["c", "d"], ["e"]]

    def test_empty_text_rejected(self, embedding_client) -> None:
        """Should refuse empty text before calling the model."""
        with pytest.raises(EmbeddingError, match="empty"):
            embedding_client.embed_documents(["ok", "   "])

    def test_oversized_text_rejected(self, fake_embeddings) -> None:
        """Should refuse texts longer than max_input_chars."""
        client = EmbeddingClient(fake_embeddings, dimension=fake_embeddings.dimension, max_input_chars=10)

        with pytest.raises(EmbeddingError, match="exceeds"):
            client.embed_documents(["x" * 11])

    def test_wrong_dimension_is_configuration_error(self) -> None:
        """Should flag a model/collection dimension mismatch."""
        model = MagicMock()
        model.embed_documents.return_value = [[0.1, 0.2, 0.3]]

        with pytest.raises(ConfigurationError, match="dimension 3"):
            make_client(model, dimension=4).embed_documents(["text"])

    def test_count_mismatch_raises(self) -> None:
        """Should fail when the model returns fewer vectors than texts."""
        model = MagicMock()
        model.embed_documents.return_value = [[0.1] * 4]

        with pytest.raises(EmbeddingError, match="1 vectors for 2 texts"):
            make_client(model).embed_documents(["a", "b"])

    def test_malformed_vector_raises(self) -> None:
        """Should reject an empty vector."""
        model = MagicMock()
        model.embed_documents.return_value = [[]]

        with pytest.raises(EmbeddingError, match="malformed"):
            make_client(model).embed_documents(["a"])


class TestRetries:
    """Test transient failure handling."""

    def test_transient_failure_is_retried(self) -> None:
        """Should succeed when a later attempt works."""
        model = MagicMock()
        model.embed_query.side_effect = [ConnectionError("reset"), [0.5] * 4]

        vector = make_client(model, max_attempts=3).embed_query("question")

        assert vector == [0.5] * 4
        assert model.embed_query.call_count == 2

    def test_persistent_failure_becomes_embedding_error(self) -> None:
        """Should wrap the upstream error once attempts are exhausted."""
        model = MagicMock()
        model.embed_query.side_effect = ConnectionError("unreachable")

        with pytest.raises(EmbeddingError, match="unreachable"):
            make_client(model, max_attempts=3).embed_query("question")

        assert model.embed_query.call_count == 3

    def test_dimension_error_not_retried(self) -> None:
        """Should not retry a configuration problem."""
        model = MagicMock()
        model.embed_query.return_value = [0.1] * 5

        with pytest.raises(ConfigurationError):
            make_client(model, max_attempts=3).embed_query("question")

        assert model.embed_query.call_count == 1


class TestEmbedQuery:
    """Test EmbeddingClient.embed_query() and embed()."""

    def test_embed_query_uses_query_path(self, embedding_client, fake_embeddings) -> None:
        """Should call the model's query embedding."""
        vector = embedding_client.embed_query("What is osmosis?")

        assert len(vector) == fake_embeddings.dimension
        assert fake_embeddings.query_calls == ["What is osmosis?"]

    def test_embed_single_text(self, embedding_client) -> None:
        """Should embed one chunk text."""
        assert len(embedding_client.embed("chunk")) == embedding_client.dimension

    def test_empty_question_rejected(self, embedding_client) -> None:
        with pytest.raises(EmbeddingError):
            embedding_client.embed_query("")

    def test_invalid_batch_size(self, fake_embeddings) -> None:
        with pytest.raises(ConfigurationError):
            EmbeddingClient(fake_embeddings, dimension=8, batch_size=0)
