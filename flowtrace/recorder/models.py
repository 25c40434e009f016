"""Data models for recorded sessions."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from flowtrace.recorder.state_machine import RecorderState
from flowtrace.recorder.url import normalize_location


class ActionKind(str, Enum):
    """Kind of recorded interaction.

    Unknown kinds reported by instrumentation are stored as OTHER.
    """

    CLICK = "click"
    INPUT = "input"
    CHANGE = "change"
    SUBMIT = "submit"
    NAVIGATION = "navigation"
    OTHER = "other"


class ElementDescriptor(BaseModel):
    """Interactive element seen in a captured state.

    Only the attributes used for fingerprinting are typed; anything else
    the instrumentation reports is kept as extra data. camelCase keys
    from browser instrumentation are accepted.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    id: str | None = None
    name: str | None = None
    tag_name: str | None = Field(default=None, alias="tagName")
    type: str | None = None
    role: str | None = None
    placeholder: str | None = None
    text_content: str | None = Field(default=None, alias="textContent")
    class_name: str | None = Field(default=None, alias="className")

    @model_validator(mode="before")
    @classmethod
    def lift_selector_class(cls, data: Any) -> Any:
        """Use ``selectors.className`` when no top-level class is given."""
        if not isinstance(data, dict):
            return data
        if data.get("className") or data.get("class_name"):
            return data
        selectors = data.get("selectors")
        if isinstance(selectors, dict) and selectors.get("className"):
            return {**data, "className": selectors["className"]}
        return data


class ActionCapture(BaseModel):
    """Raw action event produced by the instrumentation."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    kind: ActionKind | None = None
    target: dict[str, Any] | None = None
    raw_timestamp: datetime | None = None
    url: str | None = None

    @field_validator("kind", mode="before")
    @classmethod
    def coerce_kind(cls, v: Any) -> ActionKind | None:
        """Coerce strings to ActionKind, mapping unknown kinds to OTHER.

        A non-string kind is treated as missing.
        """
        if isinstance(v, ActionKind):
            return v
        if isinstance(v, str):
            try:
                return ActionKind(v.lower())
            except ValueError:
                return ActionKind.OTHER
        return None


class StateCapture(BaseModel):
    """Raw content snapshot produced by the instrumentation."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    content: str = ""
    content_hash: str | None = None
    location: str = ""
    location_pattern: str = ""
    title: str = ""
    raw_timestamp: datetime | None = None
    elements: list[ElementDescriptor] = Field(default_factory=list)

    @field_validator("content", "location", "title", mode="before")
    @classmethod
    def none_text_is_empty(cls, v: Any) -> Any:
        """Store missing text fields as empty strings."""
        return "" if v is None else v

    @field_validator("elements", mode="before")
    @classmethod
    def none_elements_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("content_hash", mode="before")
    @classmethod
    def blank_hash_is_missing(cls, v: Any) -> Any:
        """Treat an empty hash the same as a missing one."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="before")
    @classmethod
    def default_location_pattern(cls, data: Any) -> Any:
        """Derive the location pattern from the location when absent."""
        if isinstance(data, dict) and not data.get("location_pattern"):
            return {
                **data,
                "location_pattern": normalize_location(data.get("location") or ""),
            }
        return data


class State(BaseModel):
    """Stored content snapshot.

    Attributes:
        id: Unique state identifier.
        session_id: Owning session.
        sequence_number: 1-based, contiguous within the session.
        captured_at: When the controller accepted the capture.
        raw_timestamp: Timestamp reported by the instrumentation.
        location: Captured location.
        location_pattern: Normalized location used for grouping.
        title: Page title.
        content: Raw textual content.
        content_hash: Deduplication hash, None if the capture had none.
        elements: Interactive elements present in the snapshot.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: Annotated[str, Field(min_length=1)]
    session_id: Annotated[str, Field(min_length=1)]
    sequence_number: Annotated[int, Field(ge=1)]
    captured_at: datetime
    raw_timestamp: datetime | None = None
    location: str = ""
    location_pattern: str = ""
    title: str = ""
    content: str = ""
    content_hash: str | None = None
    elements: list[ElementDescriptor] = Field(default_factory=list)


class Action(BaseModel):
    """Stored interaction linked to the states around it.

    Attributes:
        id: Unique action identifier.
        session_id: Owning session.
        sequence_number: 1-based order of capture.
        captured_at: When the controller accepted the capture.
        raw_timestamp: Timestamp reported by the instrumentation.
        kind: Interaction kind.
        target: Opaque target descriptor.
        url: Location the action happened on, if reported.
        state_before_id: Last state stored before the action.
        state_after_id: State the next capture resolved to; None if the
            session ended first.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: Annotated[str, Field(min_length=1)]
    session_id: Annotated[str, Field(min_length=1)]
    sequence_number: Annotated[int, Field(ge=1)]
    captured_at: datetime
    raw_timestamp: datetime | None = None
    kind: ActionKind
    target: dict[str, Any] = Field(default_factory=dict)
    url: str | None = None
    state_before_id: str | None = None
    state_after_id: str | None = None

    @property
    def is_linked(self) -> bool:
        """Check whether the action has been linked to a following state."""
        return self.state_after_id is not None

    def linked_to(self, state_id: str | None) -> "Action":
        """Return a copy linked to the state that followed it."""
        return self.model_copy(update={"state_after_id": state_id})


class SessionCounts(BaseModel):
    """Running counts of a session."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    states: Annotated[int, Field(ge=0)] = 0
    actions: Annotated[int, Field(ge=0)] = 0


class SessionMetadata(BaseModel):
    """Optional labels attached to a session when it is stopped."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str = ""
    description: str = ""
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v: Any) -> Any:
        """Accept comma-separated tag strings."""
        if v is None:
            return []
        if isinstance(v, str):
            return [tag.strip() for tag in v.split(",") if tag.strip()]
        return v


class Session(BaseModel):
    """Finalized recording session.

    Attributes:
        id: Session identifier.
        started_at: When recording started.
        ended_at: When recording stopped.
        states: States in sequence order.
        actions: Actions in the order they were linked.
        counts: Captured state and action counts.
        metadata: Optional labels.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: Annotated[str, Field(min_length=1)]
    started_at: datetime
    ended_at: datetime | None = None
    states: list[State] = Field(default_factory=list)
    actions: list[Action] = Field(default_factory=list)
    counts: SessionCounts = Field(default_factory=SessionCounts)
    metadata: SessionMetadata | None = None

    @property
    def duration_seconds(self) -> float | None:
        """Recording duration, None while the session has no end."""
        if self.ended_at is None:
            return None
        return (self.ended_at - self.started_at).total_seconds()

    @property
    def start_location(self) -> str:
        """Location of the first state, empty if none."""
        return self.states[0].location if self.states else ""

    @property
    def end_location(self) -> str:
        """Location of the last state, empty if none."""
        return self.states[-1].location if self.states else ""

    def state_by_id(self, state_id: str) -> State | None:
        """Look up a state by identifier."""
        for state in self.states:
            if state.id == state_id:
                return state
        return None

    @classmethod
    def from_json_dict(cls, data: Any) -> "Session":
        """Load a session from its ``to_json_dict`` form.

        Derived keys (duration, start and end location) are ignored.

        Raises:
            ValueError: If the data is not a JSON object.
            ValidationError: If the data does not describe a session.
        """
        if not isinstance(data, dict):
            msg = f"Session data must be an object, got {type(data).__name__}"
            raise ValueError(msg)
        return cls.model_validate(
            {key: value for key, value in data.items() if key in cls.model_fields}
        )

    def to_json_dict(self) -> dict[str, object]:
        """Convert to JSON-serializable dictionary.

        Returns:
            Dictionary suitable for JSON serialization.
        """
        return {
            "id": self.id,
            "started_at": self.started_at.isoformat(),
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_seconds": self.duration_seconds,
            "start_location": self.start_location,
            "end_location": self.end_location,
            "counts": self.counts.model_dump(),
            "metadata": self.metadata.model_dump() if self.metadata else None,
            "states": [state.model_dump(mode="json") for state in self.states],
            "actions": [action.model_dump(mode="json") for action in self.actions],
        }


class RecordingStatus(BaseModel):
    """Point-in-time view of the controller for UI collaborators."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    state: RecorderState
    session_id: str | None = None
    started_at: datetime | None = None
    counts: SessionCounts = Field(default_factory=SessionCounts)
    has_pending_action: bool = False
