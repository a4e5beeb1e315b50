"""
Text extraction task using LangChain document loaders.

PDFs go through PyPDFLoader, text-like files through TextLoader.
Pages are joined with blank lines so the chunker can split on them.

Dependencies: langchain_community.document_loaders
System role: First stage of document ingestion pipeline
"""

from pathlib import Path

from langchain_community.document_loaders import PyPDFLoader, TextLoader

from learnability.core.exceptions import ExtractionError

TEXT_EXTENSIONS = frozenset({".txt", ".md", ".markdown", ".csv", ".html", ".htm", ".json"})


class ExtractionTask:
    """Extract plain text from an uploaded file."""

    def extract(self, file_path: str) -> str:
        """
        Extract the text of a document.

        Args:
            file_path: Path to the stored upload

        Returns:
            str: Extracted text (may be empty if the file holds no text)

        Raises:
            ExtractionError: File missing, unsupported or unreadable
        """
        path = Path(file_path)
        if not path.is_file():
            raise ExtractionError(f"File not found: {file_path}", file_path)

        suffix = path.suffix.lower()
        if suffix == ".pdf":
            loader = PyPDFLoader(str(path))
        elif suffix in TEXT_EXTENSIONS:
            loader = TextLoader(str(path), autodetect_encoding=True)
        else:
            raise ExtractionError(f"Unsupported file format: {suffix or 'none'}", file_path)

        try:
            documents = loader.load()
        except Exception as e:
            raise ExtractionError(f"Failed to read {path.name}: {e}", file_path) from e

        return "\n\n".join(doc.page_content for doc in documents if doc.page_content)
