"""Status gate: wait for named status checks on a revision to pass."""

from src.gate.classifier import classify, failure_message, is_success
from src.gate.errors import (
    ConfigurationError,
    GateError,
    GateErrorClass,
    TransportError,
)
from src.gate.metrics import GateMetrics
from src.gate.models import (
    CheckState,
    CycleResult,
    CycleVerdict,
    GateConfig,
    GateResult,
    PollOutcome,
    ReducedSet,
    StatusReport,
)
from src.gate.poller import StatusFetcher, StatusGate, evaluate_cycle
from src.gate.reducer import reduce_latest
from src.gate.reporter import ConsoleReporter, RecordingReporter, Reporter
from src.gate.state_machine import (
    PollState,
    PollStateMachine,
    PollStateTransitionError,
)


__all__ = [
    # Models
    "CheckState",
    "CycleResult",
    "CycleVerdict",
    "GateConfig",
    "GateResult",
    "PollOutcome",
    "ReducedSet",
    "StatusReport",
    # Core
    "StatusFetcher",
    "StatusGate",
    "classify",
    "evaluate_cycle",
    "failure_message",
    "is_success",
    "reduce_latest",
    # Reporting
    "ConsoleReporter",
    "RecordingReporter",
    "Reporter",
    # State machine
    "PollState",
    "PollStateMachine",
    "PollStateTransitionError",
    # Errors
    "ConfigurationError",
    "GateError",
    "GateErrorClass",
    "TransportError",
    # Metrics
    "GateMetrics",
]
