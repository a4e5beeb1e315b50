"""
Logging utilities for safe structured logging.

Keeps `extra={...}` payloads small: document text, upload bytes and vector
batches are summarised instead of dumped.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any

MAX_LOG_VALUE_LENGTH = 500


def safe_log_value(value: Any, max_length: int = MAX_LOG_VALUE_LENGTH) -> str:
    """
    Convert a value to a bounded string for a log record.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Printable representation, never longer than max_length plus a suffix
    """
    if value is None:
        return "None"
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    if isinstance(value, (list, tuple, set)):
        return f"{type(value).__name__}({len(value)} items)"
    if isinstance(value, dict):
        return f"dict({len(value)} keys)"

    try:
        text = value if isinstance(value, str) else str(value)
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"
    if len(text) > max_length:
        return f"{text[:max_length]}... (truncated, {len(text)} total)"
    return text


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context,
) -> None:
    """
    Log an exception with its traceback and sanitised context.

    LearnabilityError details are merged into the record so the failing
    operation (for example the Milvus call) is searchable.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        **context: Identifiers such as document_id or tenant_id
    """
    extra = {key: safe_log_value(val) for key, val in context.items()}
    details = getattr(exc, "details", None)
    if isinstance(details, dict):
        for key, val in details.items():
            extra.setdefault(f"error_{key}", safe_log_value(val))
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc))
    logger.error(message, exc_info=exc, extra=extra)
