"""Metrics for recording session operations."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class RecorderMetrics:
    """Metrics for the recording controller.

    Tracks session lifecycle counts, captures, deduplication and
    recovered anomalies.
    """

    sessions_started: int = 0
    sessions_stopped: int = 0
    sessions_cancelled: int = 0
    states_captured: int = 0
    duplicate_states_skipped: int = 0
    actions_captured: int = 0
    actions_unlinked: int = 0
    malformed_captures: int = 0
    observer_failures: int = 0

    _instance: ClassVar["RecorderMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "RecorderMetrics":
        """Get or create the singleton instance.

        Returns:
            RecorderMetrics instance.
        """
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance for testing."""
        cls._instance = None

    def record_session_started(self) -> None:
        """Record a session start."""
        self.sessions_started += 1

    def record_session_stopped(self, unlinked_actions: int = 0) -> None:
        """Record a session stop.

        Args:
            unlinked_actions: Actions finalized without a following state.
        """
        self.sessions_stopped += 1
        self.actions_unlinked += unlinked_actions

    def record_session_cancelled(self) -> None:
        """Record a session cancellation."""
        self.sessions_cancelled += 1

    def record_state(self, duplicate: bool = False) -> None:
        """Record a state capture.

        Args:
            duplicate: Whether the capture repeated the previous state.
        """
        if duplicate:
            self.duplicate_states_skipped += 1
        else:
            self.states_captured += 1

    def record_action(self) -> None:
        """Record an action capture."""
        self.actions_captured += 1

    def record_unlinked_action(self) -> None:
        """Record an action finalized without a following state."""
        self.actions_unlinked += 1

    def record_malformed_capture(self) -> None:
        """Record a capture recovered with a default."""
        self.malformed_captures += 1

    def record_observer_failures(self, count: int) -> None:
        """Record failed observer notifications.

        Args:
            count: Number of observers that raised.
        """
        self.observer_failures += count

    @property
    def duplicate_ratio(self) -> float:
        """Share of state captures that were duplicates (0.0-1.0)."""
        total = self.states_captured + self.duplicate_states_skipped
        if total == 0:
            return 0.0
        return self.duplicate_states_skipped / total

    def to_dict(self) -> dict[str, object]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric values.
        """
        return {
            "sessions_started": self.sessions_started,
            "sessions_stopped": self.sessions_stopped,
            "sessions_cancelled": self.sessions_cancelled,
            "states_captured": self.states_captured,
            "duplicate_states_skipped": self.duplicate_states_skipped,
            "actions_captured": self.actions_captured,
            "actions_unlinked": self.actions_unlinked,
            "malformed_captures": self.malformed_captures,
            "observer_failures": self.observer_failures,
            "duplicate_ratio": round(self.duplicate_ratio, 4),
        }
