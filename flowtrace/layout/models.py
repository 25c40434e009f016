"""Data models for layout extraction and export-time annotations."""

from dataclasses import dataclass, field

from flowtrace.differ.models import DiffResult
from flowtrace.recorder.models import Action, ElementDescriptor, Session, State


@dataclass(frozen=True)
class StateDiff:
    """Diff of a state against the previous state at the same location.

    Attributes:
        diff_from_state_id: State the diff was computed against.
        result: Block diff result.
    """

    diff_from_state_id: str
    result: DiffResult

    @property
    def has_content_change(self) -> bool:
        """Check whether the diff contains any entry."""
        return self.result.has_changes


@dataclass(frozen=True)
class ProcessedState:
    """A recorded state with its export-time annotations.

    The wrapped State is never modified; annotations live alongside it.

    Attributes:
        state: Original state.
        elements: Elements left after common layout extraction.
        is_first_of_location: Anchor of a location group with several
            states; keeps its full content.
        has_common_layout: Whether common content was computed for the
            state's location group.
        common_layout: Summary of content shared within the group (anchor
            only).
        diff: Diff against the previous state of the same group, None for
            anchors and single-state groups.
    """

    state: State
    elements: list[ElementDescriptor] = field(default_factory=list)
    is_first_of_location: bool = False
    has_common_layout: bool = False
    common_layout: str = ""
    diff: StateDiff | None = None

    @classmethod
    def from_state(cls, state: State) -> "ProcessedState":
        """Wrap a state without annotations."""
        return cls(state=state, elements=list(state.elements))

    @property
    def sequence_number(self) -> int:
        """Sequence number of the wrapped state."""
        return self.state.sequence_number

    @property
    def group_key(self) -> str:
        """Key used to group states by location."""
        return self.state.location_pattern or self.state.location

    def to_json_dict(self) -> dict[str, object]:
        """Convert to JSON-serializable dictionary.

        Anchors and ungrouped states carry their full content; later states
        of a group carry only the diff.
        """
        data: dict[str, object] = {
            "id": self.state.id,
            "sequence_number": self.state.sequence_number,
            "captured_at": self.state.captured_at.isoformat(),
            "location": self.state.location,
            "location_pattern": self.state.location_pattern,
            "title": self.state.title,
            "content_hash": self.state.content_hash,
            "elements": [
                element.model_dump(mode="json", exclude_none=True)
                for element in self.elements
            ],
            "is_first_of_location": self.is_first_of_location,
            "has_common_layout": self.has_common_layout,
        }
        if self.common_layout:
            data["common_layout"] = self.common_layout
        if self.diff is None:
            data["content"] = self.state.content
        else:
            data["diff_from_state_id"] = self.diff.diff_from_state_id
            data["has_content_change"] = self.diff.has_content_change
            data["content_diff"] = self.diff.result.text
            data["diff_metrics"] = self.diff.result.metrics.to_dict()
        return data


@dataclass(frozen=True)
class ElementExtraction:
    """Result of common element extraction.

    Attributes:
        layout_elements: One representative per common fingerprint.
        states: States with common elements removed.
        common_fingerprints: Fingerprints present in every state.
    """

    layout_elements: list[ElementDescriptor]
    states: list[ProcessedState]
    common_fingerprints: frozenset[str] = frozenset()


@dataclass(frozen=True)
class ContentExtraction:
    """Result of per-location diffing and global commonality.

    Attributes:
        states: States in sequence order with diff annotations.
        common_layout: Summary of blocks present in every state.
    """

    states: list[ProcessedState]
    common_layout: str = ""

    @property
    def diffed_count(self) -> int:
        """Number of states carrying a diff."""
        return sum(1 for state in self.states if state.diff is not None)


@dataclass(frozen=True)
class CompressedSession:
    """Session with layout factored out and per-state diffs computed.

    Attributes:
        session: Finalized session the compression was computed from.
        layout_elements: Elements present in every state.
        common_layout: Content blocks present in every state.
        states: Annotated states in sequence order.
    """

    session: Session
    layout_elements: list[ElementDescriptor]
    common_layout: str
    states: list[ProcessedState]

    @property
    def actions(self) -> list[Action]:
        """Actions of the session."""
        return self.session.actions

    def to_json_dict(self) -> dict[str, object]:
        """Convert to JSON-serializable dictionary.

        Returns:
            Dictionary suitable for JSON serialization.
        """
        session = self.session
        return {
            "session": {
                "id": session.id,
                "started_at": session.started_at.isoformat(),
                "ended_at": session.ended_at.isoformat() if session.ended_at else None,
                "duration_seconds": session.duration_seconds,
                "start_location": session.start_location,
                "end_location": session.end_location,
                "counts": session.counts.model_dump(),
                "metadata": (
                    session.metadata.model_dump() if session.metadata else None
                ),
                "layout_elements": [
                    element.model_dump(mode="json", exclude_none=True)
                    for element in self.layout_elements
                ],
                "common_layout": self.common_layout,
            },
            "states": [state.to_json_dict() for state in self.states],
            "actions": [
                {
                    "id": action.id,
                    "sequence_number": action.sequence_number,
                    "captured_at": action.captured_at.isoformat(),
                    "kind": action.kind.value,
                    "target": action.target,
                    "url": action.url,
                    "state_before_id": action.state_before_id,
                    "state_after_id": action.state_after_id,
                }
                for action in session.actions
            ],
        }
