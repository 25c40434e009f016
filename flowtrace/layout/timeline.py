"""Chronological interleaving of states and actions."""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from flowtrace.layout.models import ProcessedState
from flowtrace.recorder.models import Action, State


class TimelineEntryKind(str, Enum):
    """Kind of timeline entry."""

    STATE = "state"
    ACTION = "action"


@dataclass(frozen=True)
class TimelineEntry:
    """One step of a session timeline.

    Attributes:
        kind: Whether the entry is a state or an action.
        state: Annotated state for state entries.
        action: Action for action entries.
        is_first: First state overall or first state of its location.
    """

    kind: TimelineEntryKind
    state: ProcessedState | None = None
    action: Action | None = None
    is_first: bool = False

    @property
    def sequence_number(self) -> int:
        """Sequence number of the underlying state or action."""
        if self.state is not None:
            return self.state.sequence_number
        if self.action is not None:
            return self.action.sequence_number
        return 0


def build_timeline(
    states: Sequence[State | ProcessedState],
    actions: Sequence[Action],
) -> list[TimelineEntry]:
    """Interleave states and actions in the order they happened.

    Each state is followed by the actions taken from it, in action order.
    Actions recorded before any state, or taken from a state missing from
    ``states``, are appended last by timestamp.

    Args:
        states: States of one session, plain or annotated.
        actions: Actions of the same session.

    Returns:
        Timeline entries.
    """
    processed = sorted(
        (
            state
            if isinstance(state, ProcessedState)
            else ProcessedState.from_state(state)
            for state in states
        ),
        key=lambda item: item.sequence_number,
    )

    known_ids = {state.state.id for state in processed}
    by_state: dict[str, list[Action]] = {}
    orphans: list[Action] = []
    for action in actions:
        if action.state_before_id not in known_ids:
            orphans.append(action)
        else:
            by_state.setdefault(action.state_before_id, []).append(action)

    timeline: list[TimelineEntry] = []
    for index, state in enumerate(processed):
        timeline.append(
            TimelineEntry(
                kind=TimelineEntryKind.STATE,
                state=state,
                is_first=index == 0 or state.is_first_of_location,
            )
        )
        for action in sorted(
            by_state.get(state.state.id, []), key=lambda item: item.sequence_number
        ):
            timeline.append(TimelineEntry(kind=TimelineEntryKind.ACTION, action=action))

    for action in sorted(orphans, key=lambda item: item.captured_at):
        timeline.append(TimelineEntry(kind=TimelineEntryKind.ACTION, action=action))
    return timeline
