"""Exceptions for the recording session controller.

Structural errors (calling an operation in the wrong recorder state) are
raised to the caller, see ``InvalidStateTransition`` in the state machine
module. Content anomalies in capture events are signalled with
``MalformedCapture`` and recovered inside the controller.
"""


class RecorderError(Exception):
    """Base exception for all recorder errors."""


class MalformedCapture(RecorderError):
    """Raised when a capture event lacks a required field."""

    def __init__(self, capture_type: str, field: str) -> None:
        """Initialize the error.

        Args:
            capture_type: "action" or "state".
            field: Name of the missing field.
        """
        self.capture_type = capture_type
        self.field = field
        super().__init__(f"Malformed {capture_type} capture: missing {field}")
