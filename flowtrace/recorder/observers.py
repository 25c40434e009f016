"""Fire-and-forget notifications to recording observers."""

from enum import Enum
from typing import Any, Protocol, runtime_checkable

import structlog


logger = structlog.get_logger()


class RecorderEvent(str, Enum):
    """Events published by the controller."""

    RECORDING_STARTED = "recording_started"
    ACTION_CAPTURED = "action_captured"
    STATE_CAPTURED = "state_captured"
    RECORDING_STOPPED = "recording_stopped"
    RECORDING_CANCELLED = "recording_cancelled"


@runtime_checkable
class RecordingObserver(Protocol):
    """Protocol for collaborators following a recording (UI counters, progress).

    Observers are informational only: a failing observer never affects
    the recorded session.
    """

    def on_event(self, event: RecorderEvent, payload: dict[str, Any]) -> None:
        """Receive a controller event.

        Args:
            event: The event that occurred.
            payload: Event details (counts, last capture summary).
        """
        ...


def notify_observers(
    observers: list[RecordingObserver],
    event: RecorderEvent,
    payload: dict[str, Any],
) -> int:
    """Deliver an event to every observer, isolating failures.

    Args:
        observers: Observers to notify.
        event: Event to deliver.
        payload: Event details.

    Returns:
        Number of observers that raised.
    """
    failures = 0
    for observer in observers:
        try:
            observer.on_event(event, payload)
        except Exception:  # noqa: BLE001
            failures += 1
            logger.warning(
                "observer_notification_failed",
                component="recorder",
                event_name=event.value,
                observer=type(observer).__name__,
                exc_info=True,
            )
    return failures
