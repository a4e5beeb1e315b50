"""
Tests for structured logging helpers.

System role: Verification of log payload sanitising
"""

import logging

from learnability.core.exceptions import IndexUnavailableError
from learnability.observability.log_utils import log_exception_with_context, safe_log_value


class TestSafeLogValue:
    def test_summarises_collections_and_bytes(self) -> None:
        assert safe_log_value(None) == "None"
        assert safe_log_value(b"%PDF-1.7") == "<8 bytes>"
        assert safe_log_value([0.1, 0.2, 0.3]) == "list(3 items)"
        assert safe_log_value({"a": 1}) == "dict(1 keys)"

    def test_truncates_long_text(self) -> None:
        value = safe_log_value("x" * 20, max_length=5)

        assert value == "xxxxx... (truncated, 20 total)"


class TestLogExceptionWithContext:
    def test_includes_error_details(self, caplog) -> None:
        logger = logging.getLogger("tests.log_utils")
        error = IndexUnavailableError("Search failed", operation="search")

        with caplog.at_level(logging.ERROR, logger="tests.log_utils"):
            log_exception_with_context(logger, "query failed", error, tenant_id="user-123")

        record = caplog.records[-1]
        assert record.tenant_id == "user-123"
        assert record.error_type == "IndexUnavailableError"
        assert record.error_operation == "search"
        assert record.exc_info is not None
