"""State machine for the status gate poll loop."""

from enum import Enum

import structlog

from src.gate.constants import COMPONENT_GATE


logger = structlog.get_logger()


class PollState(str, Enum):
    """State of a gate run.

    States represent the lifecycle of one gate run:
    - STARTING: Validating configuration
    - POLLING: Fetching and classifying statuses
    - WAITING: Sleeping for the fixed interval before the next poll
    - SUCCEEDED: Expected number of checks passed
    - FAILED: Configuration error, check failure or transport failure
    """

    STARTING = "STARTING"
    POLLING = "POLLING"
    WAITING = "WAITING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


_VALID_TRANSITIONS: dict[PollState, set[PollState]] = {
    PollState.STARTING: {PollState.POLLING, PollState.FAILED},
    PollState.POLLING: {
        PollState.WAITING,
        PollState.SUCCEEDED,
        PollState.FAILED,
    },
    PollState.WAITING: {PollState.POLLING},
    PollState.SUCCEEDED: set(),  # Terminal state
    PollState.FAILED: set(),  # Terminal state
}


class PollStateTransitionError(Exception):
    """Raised when an illegal state transition is attempted."""

    def __init__(
        self,
        run_id: str,
        from_state: PollState,
        to_state: PollState,
    ) -> None:
        """Initialize the transition error.

        Args:
            run_id: Identifier of the gate run.
            from_state: Current state.
            to_state: Attempted target state.
        """
        self.run_id = run_id
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal state transition for gate run '{run_id}': "
            f"{from_state.value} -> {to_state.value}"
        )


class PollStateMachine:
    """Manages state transitions for a gate run.

    Enforces valid transitions and logs all state changes.
    """

    def __init__(
        self,
        run_id: str,
        initial_state: PollState = PollState.STARTING,
    ) -> None:
        """Initialize the state machine.

        Args:
            run_id: Identifier for the current run.
            initial_state: Starting state.
        """
        self._run_id = run_id
        self._state = initial_state
        self._log = logger.bind(component=COMPONENT_GATE, run_id=run_id)

    @property
    def state(self) -> PollState:
        """Get the current state."""
        return self._state

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return self._state in (PollState.SUCCEEDED, PollState.FAILED)

    def can_transition_to(self, target: PollState) -> bool:
        """Check if a transition to the target state is valid.

        Args:
            target: The target state.

        Returns:
            True if the transition is valid.
        """
        return target in _VALID_TRANSITIONS.get(self._state, set())

    def transition_to(self, target: PollState) -> None:
        """Transition to a new state.

        Args:
            target: The target state.

        Raises:
            PollStateTransitionError: If the transition is invalid.
        """
        if not self.can_transition_to(target):
            self._log.error(
                "illegal_state_transition",
                from_state=self._state.value,
                to_state=target.value,
            )
            raise PollStateTransitionError(
                run_id=self._run_id,
                from_state=self._state,
                to_state=target,
            )

        old_state = self._state
        self._state = target

        self._log.debug(
            "state_transition",
            from_state=old_state.value,
            to_state=target.value,
        )

    def to_polling(self) -> None:
        """Transition to POLLING state."""
        self.transition_to(PollState.POLLING)

    def to_waiting(self) -> None:
        """Transition to WAITING state."""
        self.transition_to(PollState.WAITING)

    def to_succeeded(self) -> None:
        """Transition to SUCCEEDED state."""
        self.transition_to(PollState.SUCCEEDED)

    def to_failed(self) -> None:
        """Transition to FAILED state."""
        self.transition_to(PollState.FAILED)
