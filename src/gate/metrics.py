"""Metrics for status gate runs."""

from collections import Counter
from threading import Lock


class GateMetrics:
    """Collects metrics for gate runs.

    Provides thread-safe counters for:
    - gate_polls_total
    - gate_waits_total
    - gate_cycles_total{verdict}
    - gate_transport_failures_total
    - gate_runs_total{state}
    """

    _instance: "GateMetrics | None" = None
    _lock = Lock()

    def __init__(self) -> None:
        """Initialize the metrics collector."""
        self._polls = 0
        self._waits = 0
        self._transport_failures = 0
        self._cycles: Counter[str] = Counter()
        self._runs: Counter[str] = Counter()
        self._lock = Lock()

    @classmethod
    def get_instance(cls) -> "GateMetrics":
        """Get the singleton metrics instance.

        Returns:
            The shared GateMetrics instance.
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance (for testing)."""
        with cls._lock:
            cls._instance = None

    def record_poll(self) -> None:
        """Record one fetch of the status source."""
        with self._lock:
            self._polls += 1

    def record_wait(self) -> None:
        """Record one fixed-interval wait."""
        with self._lock:
            self._waits += 1

    def record_cycle(self, verdict: str) -> None:
        """Record the verdict of a completed poll cycle.

        Args:
            verdict: Cycle verdict value.
        """
        with self._lock:
            self._cycles[verdict] += 1

    def record_transport_failure(self) -> None:
        """Record a fetch that failed at the transport level."""
        with self._lock:
            self._transport_failures += 1

    def record_run(self, state: str) -> None:
        """Record the terminal state of a run.

        Args:
            state: Terminal state value.
        """
        with self._lock:
            self._runs[state] += 1

    def get_polls_total(self) -> int:
        """Get total number of polls."""
        with self._lock:
            return self._polls

    def get_waits_total(self) -> int:
        """Get total number of waits."""
        with self._lock:
            return self._waits

    def get_transport_failures_total(self) -> int:
        """Get total number of transport failures."""
        with self._lock:
            return self._transport_failures

    def get_cycles_total(self) -> dict[str, int]:
        """Get cycle counts by verdict.

        Returns:
            Dict mapping verdict to count.
        """
        with self._lock:
            return dict(self._cycles)

    def get_runs_total(self) -> dict[str, int]:
        """Get run counts by terminal state.

        Returns:
            Dict mapping terminal state to count.
        """
        with self._lock:
            return dict(self._runs)
