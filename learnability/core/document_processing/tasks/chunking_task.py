"""
Text chunking task using RecursiveCharacterTextSplitter.

Splits extracted text into overlapping chunks, preferring paragraph breaks,
then line breaks, then spaces, then arbitrary characters. Chunks are not
stripped, so together they cover every character of the source text.

Dependencies: langchain_text_splitters
System role: Second stage of document ingestion pipeline
"""

from langchain_text_splitters import RecursiveCharacterTextSplitter

from learnability.core.document_processing.models import Chunk
from learnability.core.exceptions import ConfigurationError

SEPARATORS = ["\n\n", "\n", " ", ""]


class ChunkingTask:
    """Split text into ordered chunks using RecursiveCharacterTextSplitter."""

    def __init__(
        self,
        chunk_size: int = 2000,
        chunk_overlap: int = 200,
        max_chunk_chars: int | None = None,
    ) -> None:
        """
        Initialize chunking task with splitter configuration.

        Args:
            chunk_size: Maximum chunk size in characters
            chunk_overlap: Overlap between consecutive chunks
            max_chunk_chars: Longest text the embedding client accepts

        Raises:
            ConfigurationError: Sizes are inconsistent
        """
        if chunk_overlap >= chunk_size:
            raise ConfigurationError(
                f"chunk_overlap ({chunk_overlap}) must be smaller than chunk_size ({chunk_size})"
            )
        if max_chunk_chars is not None and chunk_size > max_chunk_chars:
            raise ConfigurationError(
                f"chunk_size ({chunk_size}) exceeds the embedding input limit ({max_chunk_chars})"
            )
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            separators=SEPARATORS,
            add_start_index=True,
            strip_whitespace=False,
            length_function=len,
        )

    def chunk(self, text: str) -> list[Chunk]:
        """
        Split text into chunks.

        Args:
            text: Extracted document text

        Returns:
            list[Chunk]: Ordered chunks; empty when the text has no content
        """
        if not text or not text.strip():
            return []

        documents = self._splitter.create_documents([text])
        return [
            Chunk(index=i, content=doc.page_content, start_index=doc.metadata.get("start_index", -1))
            for i, doc in enumerate(documents)
        ]
