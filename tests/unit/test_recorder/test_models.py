"""Tests for recorder data models."""

import pytest
from pydantic import ValidationError

from flowtrace.recorder import (
    ActionCapture,
    ActionKind,
    ElementDescriptor,
    Session,
    SessionMetadata,
    StateCapture,
)
from tests.helpers.captures import make_state


class TestElementDescriptor:
    """Tests for ElementDescriptor."""

    def test_camel_case_aliases(self) -> None:
        """Browser-style keys populate the typed fields."""
        element = ElementDescriptor.model_validate(
            {"tagName": "BUTTON", "textContent": "Save", "className": "btn primary"}
        )

        assert element.tag_name == "BUTTON"
        assert element.text_content == "Save"
        assert element.class_name == "btn primary"

    def test_selector_class_lifted(self) -> None:
        """A class nested under selectors is used when none is given."""
        element = ElementDescriptor.model_validate(
            {"tagName": "A", "selectors": {"className": "nav-link"}}
        )
        assert element.class_name == "nav-link"

    def test_extra_attributes_kept(self) -> None:
        """Unknown attributes survive validation."""
        element = ElementDescriptor.model_validate({"id": "x", "href": "/home"})
        assert element.model_dump()["href"] == "/home"


class TestCaptures:
    """Tests for raw capture models."""

    def test_kind_case_insensitive(self) -> None:
        """Kinds are matched case-insensitively."""
        assert ActionCapture.model_validate({"kind": "CLICK"}).kind == ActionKind.CLICK

    def test_kind_optional(self) -> None:
        """A capture without a kind validates with no kind."""
        assert ActionCapture.model_validate({"target": {}}).kind is None

    def test_non_string_kind_is_missing(self) -> None:
        """A non-string kind is treated as absent."""
        assert ActionCapture.model_validate({"kind": 3}).kind is None

    def test_none_content_is_empty(self) -> None:
        """Null text fields become empty strings."""
        capture = StateCapture.model_validate({"content": None, "title": None})
        assert capture.content == ""
        assert capture.title == ""

    def test_explicit_pattern_kept(self) -> None:
        """A given location pattern is not overwritten."""
        capture = StateCapture.model_validate(
            {"location": "https://a.example.com/x/1", "location_pattern": "custom"}
        )
        assert capture.location_pattern == "custom"


class TestStateModel:
    """Tests for State validation."""

    def test_frozen(self) -> None:
        """Stored states cannot be mutated."""
        state = make_state("s1", 1, content="A")
        with pytest.raises(ValidationError):
            state.content = "B"  # type: ignore[misc]

    def test_sequence_number_positive(self) -> None:
        """Sequence numbers start at 1."""
        with pytest.raises(ValidationError):
            make_state("s1", 0)


class TestSessionMetadata:
    """Tests for SessionMetadata."""

    def test_comma_tags(self) -> None:
        """Comma-separated tags are split and trimmed."""
        metadata = SessionMetadata.model_validate({"tags": " a, b ,, c "})
        assert metadata.tags == ["a", "b", "c"]

    def test_none_tags(self) -> None:
        """Missing tags become an empty list."""
        assert SessionMetadata.model_validate({"tags": None}).tags == []


class TestSessionLoading:
    """Tests for Session.from_json_dict."""

    @pytest.mark.parametrize("data", [[1, 2], "session", None])
    def test_non_object_rejected(self, data: object) -> None:
        """Only JSON objects describe a session."""
        with pytest.raises(ValueError, match="must be an object"):
            Session.from_json_dict(data)
