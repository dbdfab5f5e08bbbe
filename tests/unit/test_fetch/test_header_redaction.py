"""Unit tests for header redaction."""

from src.fetch.redact import REDACTED_VALUE, redact_headers


class TestRedactHeaders:
    """Tests for redact_headers."""

    def test_redacts_authorization(self) -> None:
        """Bearer tokens never reach logs."""
        headers = {"Authorization": "Bearer ghp_secret", "Accept": "application/json"}

        redacted = redact_headers(headers)

        assert redacted["Authorization"] == REDACTED_VALUE
        assert redacted["Accept"] == "application/json"

    def test_case_insensitive(self) -> None:
        """Header names are matched case-insensitively."""
        redacted = redact_headers({"COOKIE": "a=b", "x-api-key": "k"})

        assert redacted == {"COOKIE": REDACTED_VALUE, "x-api-key": REDACTED_VALUE}

    def test_original_untouched(self) -> None:
        """The input dictionary is not modified."""
        headers = {"Authorization": "Bearer t"}

        redact_headers(headers)

        assert headers == {"Authorization": "Bearer t"}
