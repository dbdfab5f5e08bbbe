"""Error types for the status gate."""

from enum import Enum

from src.fetch.models import FetchError


class GateErrorClass(str, Enum):
    """Classification of terminal gate failures.

    - CONFIGURATION: Inputs rejected before any fetch
    - CHECK_FAILURE: A matching status reached the failure state
    - TRANSPORT: The status source could not be read
    """

    CONFIGURATION = "CONFIGURATION"
    CHECK_FAILURE = "CHECK_FAILURE"
    TRANSPORT = "TRANSPORT"


class GateError(Exception):
    """Base exception for gate errors.

    Provides structured error information for logging and reporting.
    """

    def __init__(
        self,
        error_class: GateErrorClass,
        message: str,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        """Initialize the gate error.

        Args:
            error_class: Classification of the error.
            message: Human-readable error message.
            details: Additional structured error details.
        """
        super().__init__(message)
        self.error_class = error_class
        self.message = message
        self.details = details or {}

    def to_dict(
        self,
    ) -> dict[str, str | int | bool | None | dict[str, str | int | bool | None]]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(GateError):
    """Raised when gate inputs or the revision context are invalid."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: str | None = None,
    ) -> None:
        """Initialize the configuration error.

        Args:
            message: Human-readable error message.
            field: Name of the offending input.
            value: Raw value that was rejected.
        """
        details: dict[str, str | int | bool | None] = {}
        if field is not None:
            details["field"] = field
        if value is not None:
            details["value"] = value
        super().__init__(GateErrorClass.CONFIGURATION, message, details)
        self.field = field
        self.value = value


class TransportError(GateError):
    """Raised by a fetcher when statuses cannot be retrieved."""

    def __init__(self, message: str, fetch_error: FetchError | None = None) -> None:
        """Initialize the transport error.

        Args:
            message: Human-readable error message.
            fetch_error: Typed error from the last fetch attempt.
        """
        details: dict[str, str | int | bool | None] = {}
        if fetch_error is not None:
            details["fetch_error_class"] = fetch_error.error_class.value
            details["status_code"] = fetch_error.status_code
        super().__init__(GateErrorClass.TRANSPORT, message, details)
        self.fetch_error = fetch_error
