"""
Exception hierarchy for the Learnability backend.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class LearnabilityError(Exception):
    """Base exception for all Learnability application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(LearnabilityError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class ConfigurationError(LearnabilityError):
    """Raised when components are wired with incompatible settings."""


class DocumentNotFoundError(LearnabilityError):
    """Raised when a document does not exist or belongs to another tenant."""

    def __init__(self, document_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["document_id"] = document_id
        super().__init__(f"Document not found: {document_id}", details)


class SubjectNotFoundError(LearnabilityError):
    """Raised when a subject does not exist or belongs to another tenant."""

    def __init__(self, subject_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["subject_id"] = subject_id
        super().__init__(f"Subject not found: {subject_id}", details)


class DocumentProcessingError(LearnabilityError):
    """Base exception for document ingestion errors."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            document_id: ID of the document that failed processing
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)


class ExtractionError(DocumentProcessingError):
    """Raised when text cannot be extracted from an uploaded file."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if file_path:
            details["file_path"] = file_path
        self.file_path = file_path
        super().__init__(message, details=details)


class EmbeddingError(LearnabilityError):
    """Raised when the embedding model fails or returns malformed output."""


class IndexUnavailableError(LearnabilityError):
    """Raised when the vector index cannot serve a request."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize index error.

        Args:
            message: Error message
            operation: Index operation that failed (search, insert, delete, ...)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        self.operation = operation
        super().__init__(message, details)


class QueryTimeoutError(LearnabilityError):
    """Raised when a query exceeds its deadline. Safe to retry."""


class IngestionInProgressError(LearnabilityError):
    """Raised when a document is already queued or being ingested."""

    def __init__(self, document_id: str) -> None:
        super().__init__(
            f"Document is already being processed: {document_id}",
            {"document_id": document_id},
        )


class IngestionQueueFullError(LearnabilityError):
    """Raised when the ingestion queue cannot accept more work."""
