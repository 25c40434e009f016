"""Recording session controller.

Correlates raw capture events into an ordered graph of states and
actions. Each action is linked to the last state stored before it and
to the state the next capture resolves to.
"""

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import structlog

from flowtrace.observability.logging import bind_session_context, clear_session_context
from flowtrace.recorder.errors import MalformedCapture
from flowtrace.recorder.metrics import RecorderMetrics
from flowtrace.recorder.models import (
    Action,
    ActionCapture,
    ActionKind,
    RecordingStatus,
    Session,
    SessionCounts,
    SessionMetadata,
    State,
    StateCapture,
)
from flowtrace.recorder.observers import (
    RecorderEvent,
    RecordingObserver,
    notify_observers,
)
from flowtrace.recorder.state_machine import RecorderState, RecorderStateMachine


logger = structlog.get_logger()


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class NoPending:
    """No action is waiting for its following state."""


@dataclass(frozen=True)
class Pending:
    """One action waiting for its following state."""

    action: Action


PendingSlot = NoPending | Pending


@dataclass
class _SessionBuffer:
    """Mutable session contents owned by the controller while recording."""

    session_id: str
    started_at: datetime
    states: list[State] = field(default_factory=list)
    actions: list[Action] = field(default_factory=list)
    state_count: int = 0
    action_count: int = 0
    last_state: State | None = None
    pending: PendingSlot = field(default_factory=NoPending)


def validate_state_capture(capture: StateCapture) -> None:
    """Check a state capture for required fields.

    Raises:
        MalformedCapture: If the content hash is missing.
    """
    if capture.content_hash is None:
        raise MalformedCapture("state", "content_hash")


def validate_action_capture(capture: ActionCapture) -> None:
    """Check an action capture for required fields.

    Raises:
        MalformedCapture: If the kind or the target descriptor is missing.
    """
    if capture.kind is None:
        raise MalformedCapture("action", "kind")
    if capture.target is None:
        raise MalformedCapture("action", "target")


class RecordingController:
    """State machine driving one recording session.

    Lifecycle: IDLE -> RECORDING -> STOPPED | CANCELLED. Capture events are
    processed to completion one at a time; the controller is not
    thread-safe and expects a single event source.
    """

    def __init__(
        self,
        observers: list[RecordingObserver] | None = None,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_id,
        metrics: RecorderMetrics | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            observers: Collaborators notified of progress.
            clock: Source of capture timestamps.
            id_factory: Source of session, state and action identifiers.
            metrics: Optional metrics instance for dependency injection.
        """
        self._observers = list(observers or [])
        self._clock = clock
        self._new_id = id_factory
        self._metrics = metrics or RecorderMetrics.get_instance()
        self._state_machine = RecorderStateMachine()
        self._buffer: _SessionBuffer | None = None
        self._session: Session | None = None
        self._log = logger.bind(component="recorder")

    @property
    def state(self) -> RecorderState:
        """Get current recorder state."""
        return self._state_machine.state

    @property
    def session(self) -> Session | None:
        """Get the finalized session once stopped."""
        return self._session

    @property
    def pending_action(self) -> Action | None:
        """Get the action awaiting its following state, if any."""
        if self._buffer is not None and isinstance(self._buffer.pending, Pending):
            return self._buffer.pending.action
        return None

    def add_observer(self, observer: RecordingObserver) -> None:
        """Register an observer for subsequent events."""
        self._observers.append(observer)

    def status(self) -> RecordingStatus:
        """Get a point-in-time view of the recording."""
        buffer = self._buffer
        if buffer is None:
            session = self._session
            return RecordingStatus(
                state=self.state,
                session_id=self._state_machine.session_id,
                started_at=session.started_at if session else None,
                counts=session.counts if session else SessionCounts(),
            )
        return RecordingStatus(
            state=self.state,
            session_id=buffer.session_id,
            started_at=buffer.started_at,
            counts=SessionCounts(
                states=buffer.state_count, actions=buffer.action_count
            ),
            has_pending_action=isinstance(buffer.pending, Pending),
        )

    def start(self) -> str:
        """Start a new recording session.

        Returns:
            The new session identifier.

        Raises:
            InvalidStateTransition: If the recorder is not IDLE.
        """
        self._state_machine.to_recording()
        session_id = self._new_id()
        self._state_machine.bind_session(session_id)
        self._buffer = _SessionBuffer(session_id=session_id, started_at=self._clock())

        bind_session_context(session_id)
        self._metrics.record_session_started()
        self._log.info("recording_started", session_id=session_id)
        self._notify(RecorderEvent.RECORDING_STARTED, {"session_id": session_id})
        return session_id

    def on_action_captured(self, raw: ActionCapture | dict[str, Any]) -> Action:
        """Handle a raw action event.

        The action becomes the pending action until the next state capture
        resolves it. If an action is already pending it is finalized first,
        unlinked, so that no captured action is ever dropped.

        Args:
            raw: Action capture or its dictionary form.

        Returns:
            The pending action.

        Raises:
            InvalidStateTransition: If the recorder is not RECORDING.
        """
        self._state_machine.require_recording("capture action")
        buffer = self._require_buffer()
        capture = (
            raw if isinstance(raw, ActionCapture) else ActionCapture.model_validate(raw)
        )

        try:
            validate_action_capture(capture)
        except MalformedCapture as e:
            self._record_malformed(e)

        if isinstance(buffer.pending, Pending):
            superseded = buffer.pending.action
            buffer.actions.append(superseded)
            self._metrics.record_unlinked_action()
            self._log.warning(
                "pending_action_superseded",
                action_id=superseded.id,
                sequence_number=superseded.sequence_number,
            )

        action = Action(
            id=self._new_id(),
            session_id=buffer.session_id,
            sequence_number=buffer.action_count + 1,
            captured_at=self._clock(),
            raw_timestamp=capture.raw_timestamp,
            kind=capture.kind or ActionKind.OTHER,
            target=dict(capture.target or {}),
            url=capture.url,
            state_before_id=buffer.last_state.id if buffer.last_state else None,
        )
        buffer.pending = Pending(action)
        buffer.action_count += 1

        self._metrics.record_action()
        self._log.debug(
            "action_captured",
            action_id=action.id,
            kind=action.kind.value,
            sequence_number=action.sequence_number,
            state_before_id=action.state_before_id,
        )
        self._notify(
            RecorderEvent.ACTION_CAPTURED,
            {"action_count": buffer.action_count, "kind": action.kind.value},
        )
        return action

    def on_state_captured(self, raw: StateCapture | dict[str, Any]) -> State:
        """Handle a raw content snapshot.

        A snapshot whose hash equals the previous state's hash is a repeat:
        no state is stored and the pending action is linked to the existing
        state. A snapshot without a hash is never treated as a repeat.

        Args:
            raw: State capture or its dictionary form.

        Returns:
            The state the capture resolved to (new or existing).

        Raises:
            InvalidStateTransition: If the recorder is not RECORDING.
        """
        self._state_machine.require_recording("capture state")
        buffer = self._require_buffer()
        capture = (
            raw if isinstance(raw, StateCapture) else StateCapture.model_validate(raw)
        )

        try:
            validate_state_capture(capture)
        except MalformedCapture as e:
            self._record_malformed(e)

        previous = buffer.last_state
        if previous is not None and self._is_repeat(previous, capture):
            self._resolve_pending(buffer, previous.id)
            self._metrics.record_state(duplicate=True)
            self._log.debug(
                "duplicate_state_skipped",
                state_id=previous.id,
                content_hash=capture.content_hash,
            )
            return previous

        state = State(
            id=self._new_id(),
            session_id=buffer.session_id,
            sequence_number=buffer.state_count + 1,
            captured_at=self._clock(),
            raw_timestamp=capture.raw_timestamp,
            location=capture.location,
            location_pattern=capture.location_pattern,
            title=capture.title,
            content=capture.content,
            content_hash=capture.content_hash,
            elements=list(capture.elements),
        )
        self._resolve_pending(buffer, state.id)
        buffer.states.append(state)
        buffer.state_count += 1
        buffer.last_state = state

        self._metrics.record_state()
        self._log.debug(
            "state_captured",
            state_id=state.id,
            sequence_number=state.sequence_number,
            location_pattern=state.location_pattern,
            content_length=len(state.content),
        )
        self._notify(
            RecorderEvent.STATE_CAPTURED,
            {
                "state_count": buffer.state_count,
                "location_pattern": state.location_pattern,
            },
        )
        return state

    def stop(self, metadata: SessionMetadata | dict[str, Any] | None = None) -> Session:
        """Stop recording and finalize the session.

        A still-pending action is kept with no following state.

        Args:
            metadata: Optional labels for the session.

        Returns:
            The finalized, read-only session.

        Raises:
            InvalidStateTransition: If the recorder is not RECORDING.
        """
        self._state_machine.to_stopped()
        buffer = self._require_buffer()

        unlinked = 0
        if isinstance(buffer.pending, Pending):
            buffer.actions.append(buffer.pending.action)
            buffer.pending = NoPending()
            unlinked = 1

        if metadata is not None and not isinstance(metadata, SessionMetadata):
            metadata = SessionMetadata.model_validate(metadata)

        self._session = Session(
            id=buffer.session_id,
            started_at=buffer.started_at,
            ended_at=self._clock(),
            states=list(buffer.states),
            actions=list(buffer.actions),
            counts=SessionCounts(
                states=buffer.state_count, actions=buffer.action_count
            ),
            metadata=metadata,
        )
        self._buffer = None

        self._metrics.record_session_stopped(unlinked_actions=unlinked)
        self._log.info(
            "recording_stopped",
            session_id=self._session.id,
            state_count=self._session.counts.states,
            action_count=self._session.counts.actions,
            unlinked_actions=unlinked,
        )
        self._notify(
            RecorderEvent.RECORDING_STOPPED,
            {
                "session_id": self._session.id,
                "state_count": self._session.counts.states,
                "action_count": self._session.counts.actions,
                "duration_seconds": self._session.duration_seconds,
            },
        )
        clear_session_context()
        return self._session

    def cancel(self) -> None:
        """Abort recording and discard everything captured.

        Raises:
            InvalidStateTransition: If the recorder is not RECORDING.
        """
        self._state_machine.to_cancelled()
        buffer = self._require_buffer()
        session_id = buffer.session_id

        buffer.pending = NoPending()
        buffer.states.clear()
        buffer.actions.clear()
        self._buffer = None

        self._metrics.record_session_cancelled()
        self._log.info("recording_cancelled", session_id=session_id)
        self._notify(RecorderEvent.RECORDING_CANCELLED, {"session_id": session_id})
        clear_session_context()

    def _require_buffer(self) -> _SessionBuffer:
        if self._buffer is None:
            msg = "Recording buffer missing in RECORDING state"
            raise RuntimeError(msg)
        return self._buffer

    @staticmethod
    def _is_repeat(previous: State, capture: StateCapture) -> bool:
        if previous.content_hash is None or capture.content_hash is None:
            return False
        return previous.content_hash == capture.content_hash

    def _resolve_pending(self, buffer: _SessionBuffer, state_id: str) -> None:
        """Link the pending action, if any, to ``state_id`` and store it."""
        if not isinstance(buffer.pending, Pending):
            return
        action = buffer.pending.action.linked_to(state_id)
        buffer.actions.append(action)
        buffer.pending = NoPending()
        self._log.debug(
            "action_linked",
            action_id=action.id,
            state_before_id=action.state_before_id,
            state_after_id=action.state_after_id,
        )

    def _record_malformed(self, error: MalformedCapture) -> None:
        self._metrics.record_malformed_capture()
        self._log.warning(
            "malformed_capture_recovered",
            capture_type=error.capture_type,
            missing_field=error.field,
        )

    def _notify(self, event: RecorderEvent, payload: dict[str, Any]) -> None:
        failures = notify_observers(self._observers, event, payload)
        if failures:
            self._metrics.record_observer_failures(failures)
