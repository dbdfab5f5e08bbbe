"""Unit tests for gate models and configuration validation."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from src.gate.constants import EXPECTED_CHECKS_ERROR, STATUS_REGEX_ERROR
from src.gate.errors import ConfigurationError, GateErrorClass
from src.gate.models import CheckState, GateConfig, GateResult, StatusReport
from src.gate.state_machine import PollState


class TestCheckState:
    """Tests for CheckState parsing."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("success", CheckState.SUCCESS),
            ("failure", CheckState.FAILURE),
            ("pending", CheckState.PENDING),
            ("error", CheckState.UNKNOWN),
            ("SUCCESS", CheckState.UNKNOWN),
            ("", CheckState.UNKNOWN),
        ],
    )
    def test_parse(self, raw: str, expected: CheckState) -> None:
        """Raw states map to known values or UNKNOWN."""
        assert CheckState.parse(raw) == expected


class TestStatusReport:
    """Tests for StatusReport."""

    def test_parses_iso_timestamp(self) -> None:
        """GitHub created_at strings are accepted."""
        report = StatusReport(
            name="check1", state="success", observed_at="2025-02-22T09:41:24Z"
        )

        assert report.observed_at.year == 2025
        assert report.observed_at.tzinfo is not None
        assert report.check_state == CheckState.SUCCESS

    def test_naive_timestamp_taken_as_utc(self) -> None:
        """Timestamps without an offset are treated as UTC."""
        report = StatusReport(
            name="check1", state="success", observed_at="2025-02-22T09:41:24"
        )

        assert report.observed_at.tzinfo is not None
        assert report.observed_at.utcoffset() == timedelta(0)

    def test_frozen(self) -> None:
        """Reports cannot be mutated in place."""
        report = StatusReport(
            name="check1", state="pending", observed_at="2025-02-22T09:41:24Z"
        )

        with pytest.raises(ValidationError):
            report.state = "success"  # type: ignore[misc]


class TestGateConfigFromInputs:
    """Tests for GateConfig.from_inputs."""

    def test_valid_inputs(self) -> None:
        """Valid inputs produce a configuration."""
        config = GateConfig.from_inputs(".*", "2")

        assert config.status_regex == ".*"
        assert config.expected_checks == 2

    def test_surrounding_whitespace_allowed(self) -> None:
        """Whitespace around the count is ignored."""
        assert GateConfig.from_inputs("", " 3 ").expected_checks == 3

    def test_explicit_plus_sign_allowed(self) -> None:
        """A leading plus sign is part of a decimal integer."""
        assert GateConfig.from_inputs("", "+2").expected_checks == 2

    @pytest.mark.parametrize(
        "raw", ["0", "-1", "abc", "", None, "1.5", "1_0", "\u0661\u0662", "2 3"]
    )
    def test_rejects_non_positive_or_non_numeric(self, raw: str | None) -> None:
        """Invalid counts raise a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            GateConfig.from_inputs(".*", raw)

        assert exc_info.value.message == EXPECTED_CHECKS_ERROR
        assert exc_info.value.error_class == GateErrorClass.CONFIGURATION
        assert exc_info.value.field == "expected-checks"

    def test_rejects_invalid_regex(self) -> None:
        """An uncompilable pattern raises a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            GateConfig.from_inputs("(unclosed", "1")

        assert exc_info.value.message.startswith(STATUS_REGEX_ERROR)
        assert exc_info.value.field == "status-regex"

    def test_direct_construction_enforces_minimum(self) -> None:
        """expected_checks below one is rejected by the model."""
        with pytest.raises(ValidationError):
            GateConfig(status_regex=".*", expected_checks=0)


class TestGateConfigMatches:
    """Tests for name matching."""

    def test_search_semantics(self) -> None:
        """The pattern may match anywhere in the name."""
        config = GateConfig.from_inputs("test", "1")

        assert config.matches("unit-test-check") is True
        assert config.matches("lint") is False

    def test_anchored_pattern(self) -> None:
        """Anchors restrict matches as usual."""
        config = GateConfig.from_inputs("^test.*", "1")

        assert config.matches("test-check") is True
        assert config.matches("other-test") is False

    def test_empty_pattern_matches_everything(self) -> None:
        """An empty pattern selects every name."""
        config = GateConfig.from_inputs("", "1")

        assert config.matches("anything") is True


class TestGateResult:
    """Tests for GateResult."""

    def test_succeeded_property(self) -> None:
        """Only SUCCEEDED counts as success."""
        assert GateResult(state=PollState.SUCCEEDED, poll_count=1).succeeded is True
        assert GateResult(state=PollState.FAILED, poll_count=1).succeeded is False
