"""State machine for the recording session lifecycle."""

from enum import Enum

import structlog

from flowtrace.recorder.errors import RecorderError


logger = structlog.get_logger()


class RecorderState(str, Enum):
    """State of the recorder.

    States represent the lifecycle of one recording session:
    - IDLE: No session allocated yet
    - RECORDING: Capture events are accepted
    - STOPPED: Session finalized and ready for persistence
    - CANCELLED: Session discarded, nothing to persist
    """

    IDLE = "IDLE"
    RECORDING = "RECORDING"
    STOPPED = "STOPPED"
    CANCELLED = "CANCELLED"


_VALID_TRANSITIONS: dict[RecorderState, set[RecorderState]] = {
    RecorderState.IDLE: {RecorderState.RECORDING},
    RecorderState.RECORDING: {RecorderState.STOPPED, RecorderState.CANCELLED},
    RecorderState.STOPPED: set(),
    RecorderState.CANCELLED: set(),
}


class InvalidStateTransition(RecorderError):
    """Raised when an operation is attempted in the wrong recorder state."""

    def __init__(
        self,
        session_id: str | None,
        from_state: RecorderState,
        operation: str,
        to_state: RecorderState | None = None,
    ) -> None:
        """Initialize the transition error.

        Args:
            session_id: Identifier of the session, if one was allocated.
            from_state: Current recorder state.
            operation: Name of the rejected operation.
            to_state: Target state of the rejected transition, if any.
        """
        self.session_id = session_id
        self.from_state = from_state
        self.operation = operation
        self.to_state = to_state
        target = f" -> {to_state.value}" if to_state else ""
        super().__init__(
            f"Cannot {operation} for session '{session_id}' "
            f"in state {from_state.value}{target}"
        )


class RecorderStateMachine:
    """Manages state transitions for a recording session.

    Enforces valid transitions and logs all state changes.
    """

    def __init__(
        self,
        initial_state: RecorderState = RecorderState.IDLE,
    ) -> None:
        """Initialize the state machine.

        Args:
            initial_state: Starting state.
        """
        self._state = initial_state
        self._session_id: str | None = None
        self._log = logger.bind(component="recorder")

    @property
    def state(self) -> RecorderState:
        """Get the current state."""
        return self._state

    @property
    def session_id(self) -> str | None:
        """Get the session identifier bound on entering RECORDING."""
        return self._session_id

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return not _VALID_TRANSITIONS[self._state]

    def can_transition_to(self, target: RecorderState) -> bool:
        """Check if a transition to the target state is valid.

        Args:
            target: The target state.

        Returns:
            True if the transition is valid.
        """
        return target in _VALID_TRANSITIONS.get(self._state, set())

    def transition_to(self, target: RecorderState, operation: str) -> None:
        """Transition to a new state.

        Args:
            target: The target state.
            operation: Name of the operation requesting the transition.

        Raises:
            InvalidStateTransition: If the transition is invalid.
        """
        if not self.can_transition_to(target):
            self._log.error(
                "illegal_recorder_state_transition",
                session_id=self._session_id,
                operation=operation,
                from_state=self._state.value,
                to_state=target.value,
            )
            raise InvalidStateTransition(
                session_id=self._session_id,
                from_state=self._state,
                operation=operation,
                to_state=target,
            )

        old_state = self._state
        self._state = target

        self._log.info(
            "recorder_state_transition",
            session_id=self._session_id,
            from_state=old_state.value,
            to_state=target.value,
        )

    def to_recording(self, session_id: str | None = None) -> None:
        """Transition to RECORDING, binding the session id if given."""
        self.transition_to(RecorderState.RECORDING, operation="start")
        if session_id is not None:
            self.bind_session(session_id)

    def bind_session(self, session_id: str) -> None:
        """Attach the identifier of the session being recorded."""
        self._session_id = session_id

    def to_stopped(self) -> None:
        """Transition to STOPPED state."""
        self.transition_to(RecorderState.STOPPED, operation="stop")

    def to_cancelled(self) -> None:
        """Transition to CANCELLED state."""
        self.transition_to(RecorderState.CANCELLED, operation="cancel")

    def require_recording(self, operation: str) -> None:
        """Ensure the recorder accepts capture events.

        Args:
            operation: Name of the operation being attempted.

        Raises:
            InvalidStateTransition: If the state is not RECORDING.
        """
        if self._state != RecorderState.RECORDING:
            self._log.error(
                "capture_outside_recording",
                session_id=self._session_id,
                operation=operation,
                state=self._state.value,
            )
            raise InvalidStateTransition(
                session_id=self._session_id,
                from_state=self._state,
                operation=operation,
            )
