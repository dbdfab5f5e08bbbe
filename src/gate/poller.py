"""Poll loop that waits for matching status checks to pass."""

import time
import uuid
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Protocol

import structlog

from src.gate.classifier import classify, failure_message, is_success
from src.gate.constants import (
    COMPONENT_GATE,
    ICON_FAILURE,
    ICON_PENDING,
    ICON_SUCCESS,
    POLL_INTERVAL_SECONDS,
)
from src.gate.errors import ConfigurationError, GateErrorClass, TransportError
from src.gate.metrics import GateMetrics
from src.gate.models import (
    CheckState,
    CycleResult,
    CycleVerdict,
    GateConfig,
    GateResult,
    StatusReport,
)
from src.gate.reducer import reduce_latest
from src.gate.reporter import Reporter, format_timestamp
from src.gate.state_machine import PollState, PollStateMachine


logger = structlog.get_logger()


class StatusFetcher(Protocol):
    """Protocol for the source of status reports."""

    def fetch_statuses(self) -> Sequence[StatusReport]:
        """Return every report currently visible for the tracked revision.

        Raises:
            TransportError: If the source cannot be read.
        """
        ...


def _utc_now() -> datetime:
    return datetime.now(UTC)


def evaluate_cycle(reports: Sequence[StatusReport], config: GateConfig) -> CycleResult:
    """Filter, reduce and classify one batch of reports.

    Args:
        reports: Reports returned by a single fetch.
        config: Gate configuration.

    Returns:
        CONTINUE without an outcome when nothing matched, otherwise the
        verdict together with the classified outcome.
    """
    matching = [report for report in reports if config.matches(report.name)]
    reduced = reduce_latest(matching)

    if not reduced:
        return CycleResult(verdict=CycleVerdict.CONTINUE)

    outcome = classify(reduced)

    if outcome.failure is not None:
        return CycleResult(
            verdict=CycleVerdict.FAILED,
            outcome=outcome,
            reason=failure_message(outcome.failure),
        )

    if is_success(outcome, config.expected_checks):
        return CycleResult(verdict=CycleVerdict.SUCCEEDED, outcome=outcome)

    return CycleResult(verdict=CycleVerdict.CONTINUE, outcome=outcome)


def format_check_line(report: StatusReport) -> str:
    """Format the per-check progress line.

    Args:
        report: Latest report for a check.

    Returns:
        Indented line with an icon, the name and the raw state.
    """
    state = report.check_state
    if state == CheckState.SUCCESS:
        icon = ICON_SUCCESS
    elif state == CheckState.FAILURE:
        icon = ICON_FAILURE
    else:
        icon = ICON_PENDING
    return f"   {icon} {report.name} ({report.state})"


class StatusGate:
    """Polls a status source until the expected checks pass or one fails.

    One fetch-and-classify cycle is in flight at a time. The only
    suspension points are the fetch itself and the fixed wait between
    cycles; both ``sleep`` and ``clock`` are injectable so tests run
    without real delays.
    """

    def __init__(  # noqa: PLR0913
        self,
        fetcher: StatusFetcher,
        reporter: Reporter,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = _utc_now,
        interval_seconds: float = POLL_INTERVAL_SECONDS,
        run_id: str | None = None,
    ) -> None:
        """Initialize the gate.

        Args:
            fetcher: Source of status reports.
            reporter: Sink for progress and failure output.
            sleep: Blocking wait primitive.
            clock: Current time provider for timestamped lines.
            interval_seconds: Fixed wait between poll cycles.
            run_id: Identifier for log correlation.
        """
        self._fetcher = fetcher
        self._reporter = reporter
        self._sleep = sleep
        self._clock = clock
        self._interval_seconds = interval_seconds
        self._run_id = run_id or uuid.uuid4().hex[:12]
        self._metrics = GateMetrics.get_instance()
        self._log = logger.bind(component=COMPONENT_GATE, run_id=self._run_id)

    @property
    def run_id(self) -> str:
        """Get the run identifier."""
        return self._run_id

    def run(self, raw_regex: str, raw_expected: str | None) -> GateResult:
        """Run the gate to a terminal state.

        Args:
            raw_regex: Pattern selecting check names.
            raw_expected: Decimal string with the number of checks to wait for.

        Returns:
            SUCCEEDED with the number of polls, or FAILED with the message
            that was sent to the reporter's failure channel.
        """
        machine = PollStateMachine(run_id=self._run_id)

        try:
            config = GateConfig.from_inputs(raw_regex, raw_expected)
        except ConfigurationError as e:
            self._log.warning("config_invalid", **e.to_dict())
            machine.to_failed()
            return self._fail(e.message, e.error_class, poll_count=0)

        self._echo_configuration(config)
        poll_count = 0

        while True:
            machine.to_polling()
            poll_count += 1
            self._metrics.record_poll()

            try:
                reports = self._fetcher.fetch_statuses()
            except TransportError as e:
                self._metrics.record_transport_failure()
                self._log.warning("fetch_failed", poll=poll_count, **e.to_dict())
                machine.to_failed()
                return self._fail(e.message, e.error_class, poll_count)

            cycle = evaluate_cycle(reports, config)
            self._metrics.record_cycle(cycle.verdict.value)
            self._report_cycle(poll_count, len(reports), config, cycle)

            if cycle.verdict == CycleVerdict.FAILED:
                machine.to_failed()
                return self._fail(
                    self._stamp(cycle.reason or "Check failed"),
                    GateErrorClass.CHECK_FAILURE,
                    poll_count,
                )

            if cycle.verdict == CycleVerdict.SUCCEEDED:
                machine.to_succeeded()
                return self._succeed(config, poll_count)

            machine.to_waiting()
            wait_line = f"🔄 Polling again in {self._interval_seconds:g} seconds..."
            self._reporter.info(self._stamp(wait_line))
            self._metrics.record_wait()
            self._sleep(self._interval_seconds)

    def _stamp(self, message: str) -> str:
        return f"{format_timestamp(self._clock())} {message}"

    def _echo_configuration(self, config: GateConfig) -> None:
        self._reporter.info(self._stamp("🔍 Starting to monitor status checks..."))
        self._reporter.info(self._stamp("⚙️ Configuration:"))
        self._reporter.info(f"   • Status regex: /{config.status_regex}/")
        self._reporter.info(f"   • Expected checks: {config.expected_checks}")
        self._log.info(
            "gate_started",
            status_regex=config.status_regex,
            expected_checks=config.expected_checks,
            interval_seconds=self._interval_seconds,
        )

    def _report_cycle(
        self,
        poll_count: int,
        fetched: int,
        config: GateConfig,
        cycle: CycleResult,
    ) -> None:
        self._reporter.debug(f"Found {fetched} checks")
        outcome = cycle.outcome

        if outcome is None:
            self._reporter.info(
                self._stamp(f"⏳ Poll #{poll_count}: No matching checks found yet")
            )
            self._log.info(
                "poll_cycle_complete",
                poll=poll_count,
                fetched=fetched,
                matched=0,
                verdict=cycle.verdict.value,
            )
            return

        self._reporter.debug(f"Found {outcome.total} matching checks")
        self._reporter.info(self._stamp(f"📊 Poll #{poll_count} Status:"))
        for report in outcome.evaluated:
            self._reporter.info(format_check_line(report))

        if cycle.verdict != CycleVerdict.FAILED:
            self._reporter.info(
                f"\n   Summary: {outcome.successful}/{config.expected_checks} passed, "
                f"{outcome.pending} pending"
            )

        self._log.info(
            "poll_cycle_complete",
            poll=poll_count,
            fetched=fetched,
            matched=outcome.total,
            successful=outcome.successful,
            pending=outcome.pending,
            verdict=cycle.verdict.value,
        )

    def _succeed(self, config: GateConfig, poll_count: int) -> GateResult:
        self._reporter.info(
            self._stamp(
                f"✅ Success! All {config.expected_checks} expected checks have passed"
            )
        )
        self._reporter.info(f"   Total polls: {poll_count}")
        self._metrics.record_run(PollState.SUCCEEDED.value)
        self._log.info("gate_succeeded", polls=poll_count)
        return GateResult(state=PollState.SUCCEEDED, poll_count=poll_count)

    def _fail(
        self,
        message: str,
        error_class: GateErrorClass,
        poll_count: int,
    ) -> GateResult:
        self._reporter.fail(message)
        self._metrics.record_run(PollState.FAILED.value)
        self._log.error(
            "gate_failed",
            polls=poll_count,
            error_class=error_class.value,
            message=message,
        )
        return GateResult(
            state=PollState.FAILED,
            poll_count=poll_count,
            message=message,
            error_class=error_class,
        )
