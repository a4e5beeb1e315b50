"""
Service error handling for API routes.

Maps domain exceptions raised by the service layer to HTTP responses with
consistent logging.

Dependencies: fastapi, learnability.core.exceptions
System role: Exception to HTTP status translation
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from learnability.core.exceptions import (
    ConfigurationError,
    DocumentNotFoundError,
    EmbeddingError,
    IndexUnavailableError,
    IngestionInProgressError,
    IngestionQueueFullError,
    LearnabilityError,
    QueryTimeoutError,
    SubjectNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

STATUS_BY_ERROR: list[tuple[type[LearnabilityError], int]] = [
    (DocumentNotFoundError, status.HTTP_404_NOT_FOUND),
    (SubjectNotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (IngestionInProgressError, status.HTTP_409_CONFLICT),
    (IngestionQueueFullError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (IndexUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (EmbeddingError, status.HTTP_502_BAD_GATEWAY),
    (QueryTimeoutError, status.HTTP_504_GATEWAY_TIMEOUT),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_for(error: LearnabilityError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def handle_service_errors(func: F) -> F:
    """
    Decorator turning service exceptions into HTTPExceptions.

    Domain errors keep their message; anything else is logged with its
    traceback and reported as a generic 500.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except HTTPException:
            raise
        except LearnabilityError as e:
            status_code = status_for(e)
            log = logger.error if status_code >= 500 else logger.warning
            log(
                f"{func.__name__} failed: {e.message}",
                extra={"error_type": type(e).__name__, "status_code": status_code},
            )
            headers = {"Retry-After": "5"} if status_code in (503, 504) else None
            raise HTTPException(status_code=status_code, detail=e.message, headers=headers) from e
        except Exception as e:
            logger.exception(
                f"{func.__name__} failed unexpectedly",
                extra={"error_type": type(e).__name__},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error",
            ) from e

    return wrapper  # type: ignore[return-value]
