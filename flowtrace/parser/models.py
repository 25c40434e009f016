"""Data models for parsed text blocks."""

from dataclasses import dataclass
from enum import Enum


class BlockType(str, Enum):
    """Structural type of a text block."""

    HEADING = "heading"
    LIST_ITEM = "listItem"
    SEPARATOR = "separator"
    CODE_BLOCK = "codeBlock"
    PARAGRAPH = "paragraph"
    LINK = "link"
    IMAGE = "image"


@dataclass(frozen=True)
class Block:
    """A typed, contiguous unit of text.

    Attributes:
        type: Structural type.
        content: Trimmed text content (without heading or list marker).
        start: Start offset in the source text (inclusive).
        end: End offset in the source text (exclusive).
        level: Heading level (1-6), None for other types.
        marker: List item marker ("-", "*", "+", "1."), None otherwise.
        ordered: True for numbered list items.
        raw: Exact source slice the block was matched from.
    """

    type: BlockType
    content: str
    start: int
    end: int
    level: int | None = None
    marker: str | None = None
    ordered: bool = False
    raw: str = ""

    def to_json_dict(self) -> dict[str, object]:
        """Convert to JSON-serializable dictionary."""
        data: dict[str, object] = {
            "type": self.type.value,
            "content": self.content,
            "start": self.start,
            "end": self.end,
        }
        if self.level is not None:
            data["level"] = self.level
        if self.marker is not None:
            data["marker"] = self.marker
            data["ordered"] = self.ordered
        return data
