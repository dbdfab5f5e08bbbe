"""HTTP transport support shared by status fetchers.

This module provides:
- Typed fetch errors and their classification
- Retry policy with exponential backoff
- Header redaction for safe logging
"""

from src.fetch.classify import (
    classify_http_status,
    classify_transport_exception,
    parse_retry_after,
)
from src.fetch.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_TOO_MANY_REQUESTS,
    MAX_RETRY_AFTER_SECONDS,
)
from src.fetch.models import FetchError, FetchErrorClass, RetryPolicy
from src.fetch.redact import redact_headers


__all__ = [
    # Models
    "FetchError",
    "FetchErrorClass",
    "RetryPolicy",
    # Classification
    "classify_http_status",
    "classify_transport_exception",
    "parse_retry_after",
    # Constants
    "DEFAULT_TIMEOUT_SECONDS",
    "HTTP_STATUS_OK_MIN",
    "HTTP_STATUS_OK_MAX",
    "HTTP_STATUS_TOO_MANY_REQUESTS",
    "MAX_RETRY_AFTER_SECONDS",
    # Redaction
    "redact_headers",
]
