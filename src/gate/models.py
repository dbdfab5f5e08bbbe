"""Models for status reports, gate configuration and poll outcomes."""

import re
from datetime import UTC, datetime
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.gate.constants import EXPECTED_CHECKS_ERROR, STATUS_REGEX_ERROR
from src.gate.errors import ConfigurationError, GateErrorClass
from src.gate.state_machine import PollState


# Plain ASCII decimal integer with an optional sign.
DECIMAL_PATTERN = re.compile(r"[+-]?[0-9]+")


class CheckState(str, Enum):
    """Normalized state of a named check.

    Anything the source reports that is not success, failure or pending
    (GitHub's ``error``, typos, future values) is folded into UNKNOWN and
    counted as not-yet-successful.
    """

    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: str) -> "CheckState":
        """Map a raw state string to a CheckState.

        Args:
            raw: State as reported by the source.

        Returns:
            Matching state, or UNKNOWN for unrecognized values.
        """
        try:
            return cls(raw)
        except ValueError:
            return cls.UNKNOWN


class StatusReport(BaseModel):
    """One timestamped observation of a named check.

    Names are not unique across a report list; the reducer picks the
    authoritative report per name.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    state: str
    observed_at: datetime
    detail: str | None = None
    target_url: str | None = None

    @field_validator("observed_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Treat timestamps without an offset as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    @property
    def check_state(self) -> CheckState:
        """Normalized state of this report."""
        return CheckState.parse(self.state)


# Name -> authoritative report, in first-appearance order of each name.
ReducedSet = dict[str, StatusReport]


class GateConfig(BaseModel):
    """Validated gate configuration, immutable for the run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    status_regex: str
    expected_checks: Annotated[int, Field(ge=1)]

    @classmethod
    def from_inputs(cls, raw_regex: str, raw_expected: str | None) -> "GateConfig":
        """Build a configuration from raw input strings.

        Args:
            raw_regex: Pattern used to select check names.
            raw_expected: Decimal string with the number of checks to wait for.

        Returns:
            Validated configuration.

        Raises:
            ConfigurationError: If either input is invalid.
        """
        try:
            re.compile(raw_regex)
        except re.error as e:
            raise ConfigurationError(
                f"{STATUS_REGEX_ERROR}: {e}",
                field="status-regex",
                value=raw_regex,
            ) from e

        value = (raw_expected or "").strip()
        if DECIMAL_PATTERN.fullmatch(value) is None:
            raise ConfigurationError(
                EXPECTED_CHECKS_ERROR,
                field="expected-checks",
                value=raw_expected,
            )

        expected = int(value)
        if expected < 1:
            raise ConfigurationError(
                EXPECTED_CHECKS_ERROR,
                field="expected-checks",
                value=raw_expected,
            )

        return cls(status_regex=raw_regex, expected_checks=expected)

    def matches(self, name: str) -> bool:
        """Check if a check name is selected by the pattern.

        Args:
            name: Check name (GitHub status context).

        Returns:
            True if the pattern is found anywhere in the name.
        """
        return re.search(self.status_regex, name) is not None


class PollOutcome(BaseModel):
    """Classification of one reduced set.

    Created and consumed within a single poll cycle.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    successful: Annotated[int, Field(ge=0)]
    pending: Annotated[int, Field(ge=0)]
    total: Annotated[int, Field(ge=0)]
    failure: StatusReport | None = None
    evaluated: tuple[StatusReport, ...] = ()


class CycleVerdict(str, Enum):
    """Decision taken at the end of a poll cycle."""

    CONTINUE = "CONTINUE"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class CycleResult(BaseModel):
    """Tagged result of evaluating one poll cycle."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    verdict: CycleVerdict
    outcome: PollOutcome | None = None
    reason: str | None = None


class GateResult(BaseModel):
    """Terminal result of a gate run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    state: PollState
    poll_count: Annotated[int, Field(ge=0)]
    message: str | None = None
    error_class: GateErrorClass | None = None

    @property
    def succeeded(self) -> bool:
        """Whether the gate ended in SUCCEEDED."""
        return self.state == PollState.SUCCEEDED
