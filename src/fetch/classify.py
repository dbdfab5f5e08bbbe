"""Classification of HTTP responses and transport exceptions."""

from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

import httpx

from src.fetch.constants import (
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_SERVER_ERROR_MAX,
    HTTP_STATUS_SERVER_ERROR_MIN,
    HTTP_STATUS_TOO_MANY_REQUESTS,
)
from src.fetch.models import FetchError, FetchErrorClass


def classify_http_status(
    status_code: int,
    headers: httpx.Headers | dict[str, str],
) -> FetchError | None:
    """Classify an HTTP status code as an error.

    Args:
        status_code: HTTP status code.
        headers: Response headers.

    Returns:
        FetchError if status indicates error, None otherwise.
    """
    if HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX:
        return None

    if status_code == HTTP_STATUS_TOO_MANY_REQUESTS:
        return FetchError(
            error_class=FetchErrorClass.RATE_LIMITED,
            message="Rate limited (429 Too Many Requests)",
            status_code=status_code,
            retry_after=parse_retry_after(headers.get("retry-after")),
        )

    if HTTP_STATUS_BAD_REQUEST <= status_code < HTTP_STATUS_SERVER_ERROR_MIN:
        return FetchError(
            error_class=FetchErrorClass.HTTP_4XX,
            message=f"Client error ({status_code})",
            status_code=status_code,
        )

    if HTTP_STATUS_SERVER_ERROR_MIN <= status_code < HTTP_STATUS_SERVER_ERROR_MAX:
        return FetchError(
            error_class=FetchErrorClass.HTTP_5XX,
            message=f"Server error ({status_code})",
            status_code=status_code,
        )

    return FetchError(
        error_class=FetchErrorClass.UNKNOWN,
        message=f"Unexpected status ({status_code})",
        status_code=status_code,
    )


def classify_transport_exception(exc: httpx.HTTPError) -> FetchError:
    """Map an httpx exception to a typed fetch error.

    Args:
        exc: Exception raised by the HTTP client.

    Returns:
        FetchError describing the failure.
    """
    if isinstance(exc, httpx.TimeoutException):
        return FetchError(
            error_class=FetchErrorClass.NETWORK_TIMEOUT,
            message=f"Request timed out: {exc}",
        )

    if isinstance(exc, httpx.ConnectError):
        return FetchError(
            error_class=FetchErrorClass.CONNECTION_ERROR,
            message=f"Connection failed: {exc}",
        )

    return FetchError(
        error_class=FetchErrorClass.UNKNOWN,
        message=f"Unexpected error: {exc}",
    )


def parse_retry_after(value: str | None) -> int | None:
    """Parse a Retry-After header value.

    Args:
        value: Header value (seconds or HTTP date).

    Returns:
        Seconds to wait, or None if not parseable.
    """
    if not value:
        return None

    try:
        return int(value)
    except ValueError:
        pass

    try:
        dt = parsedate_to_datetime(value)
        delta = dt - datetime.now(UTC)
        return max(0, int(delta.total_seconds()))
    except (ValueError, TypeError):
        pass

    return None
