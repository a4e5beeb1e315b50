"""
Observability module: logging, correlation IDs and request middleware.
"""

from learnability.observability.logger import configure_logging

__all__ = ["configure_logging"]
