"""Recording session controller correlating captures into states and actions."""

from flowtrace.recorder.controller import (
    NoPending,
    Pending,
    PendingSlot,
    RecordingController,
    validate_action_capture,
    validate_state_capture,
)
from flowtrace.recorder.errors import MalformedCapture, RecorderError
from flowtrace.recorder.hash import compute_content_hash
from flowtrace.recorder.metrics import RecorderMetrics
from flowtrace.recorder.models import (
    Action,
    ActionCapture,
    ActionKind,
    ElementDescriptor,
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
from flowtrace.recorder.state_machine import (
    InvalidStateTransition,
    RecorderState,
    RecorderStateMachine,
)
from flowtrace.recorder.url import normalize_location


__all__ = [
    "Action",
    "ActionCapture",
    "ActionKind",
    "ElementDescriptor",
    "InvalidStateTransition",
    "MalformedCapture",
    "NoPending",
    "Pending",
    "PendingSlot",
    "RecorderError",
    "RecorderEvent",
    "RecorderMetrics",
    "RecorderState",
    "RecorderStateMachine",
    "RecordingController",
    "RecordingObserver",
    "RecordingStatus",
    "Session",
    "SessionCounts",
    "SessionMetadata",
    "State",
    "StateCapture",
    "compute_content_hash",
    "normalize_location",
    "notify_observers",
    "validate_action_capture",
    "validate_state_capture",
]
