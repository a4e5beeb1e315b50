"""
FastAPI middleware for observability.

Binds a correlation ID to every request and logs each request with the
calling tenant, status code and latency.

Dependencies: fastapi, starlette, learnability.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from learnability.observability.correlation import clear_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

TENANT_HEADER = "X-User-ID"
CORRELATION_HEADER = "X-Correlation-ID"

_QUIET_PREFIXES = ("/api/v1/health",)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request, plus the traceback of anything that escapes."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path
        level = logging.DEBUG if path.startswith(_QUIET_PREFIXES) else logging.INFO
        context = {
            "method": method,
            "path": path,
            "tenant_id": request.headers.get(TENANT_HEADER),
        }

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{__name__}:dispatch - {method} {path} raised",
                extra={**context, "duration_ms": _elapsed_ms(start_time), "error_type": type(e).__name__},
            )
            raise

        if response.status_code >= 500:
            level = logging.WARNING
        logger.log(
            level,
            f"{__name__}:dispatch - {method} {path} -> {response.status_code}",
            extra={**context, "status_code": response.status_code, "duration_ms": _elapsed_ms(start_time)},
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Correlation-ID or mint one, and echo it back."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
