"""Data models for block diffs."""

from dataclasses import dataclass, field

from flowtrace.parser.models import Block


DIFF_TOKEN_SEPARATOR = " | "


@dataclass(frozen=True)
class ModifiedBlock:
    """A base block paired with the new block it most likely became.

    Attributes:
        before: Block on the base side.
        after: Block on the new side.
        similarity: Content similarity in [0, 1].
    """

    before: Block
    after: Block
    similarity: float

    @property
    def similarity_percent(self) -> int:
        """Similarity rounded to a whole percentage."""
        return round(self.similarity * 100)


@dataclass(frozen=True)
class BlockComparison:
    """Raw classification produced by ``compare_blocks``."""

    added: list[Block] = field(default_factory=list)
    removed: list[Block] = field(default_factory=list)
    modified: list[ModifiedBlock] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Check whether nothing was added, removed or modified."""
        return not (self.added or self.removed or self.modified)


@dataclass(frozen=True)
class DiffMetrics:
    """Counts describing a diff.

    Attributes:
        base_blocks: Blocks parsed from the base text.
        new_blocks: Blocks parsed from the new text.
        added: Added block count.
        removed: Removed block count.
        modified: Modified pair count.
        unchanged: Estimate, ``max(0, min(base, new) - modified)``.
    """

    base_blocks: int = 0
    new_blocks: int = 0
    added: int = 0
    removed: int = 0
    modified: int = 0
    unchanged: int = 0

    def to_dict(self) -> dict[str, int]:
        """Convert metrics to dictionary."""
        return {
            "base_blocks": self.base_blocks,
            "new_blocks": self.new_blocks,
            "added": self.added,
            "removed": self.removed,
            "modified": self.modified,
            "unchanged": self.unchanged,
        }


@dataclass(frozen=True)
class DiffResult:
    """Result of comparing two texts.

    Attributes:
        added: Blocks only present in the new text.
        removed: Blocks only present in the base text.
        modified: Base/new pairs judged to be edits of one another.
        tokens: Rendered diff entries in output order.
        metrics: Block counts.
        fallback: True when the texts could not be parsed and the diff
            replaces the whole content.
    """

    added: list[Block] = field(default_factory=list)
    removed: list[Block] = field(default_factory=list)
    modified: list[ModifiedBlock] = field(default_factory=list)
    tokens: list[str] = field(default_factory=list)
    metrics: DiffMetrics = field(default_factory=DiffMetrics)
    fallback: bool = False

    @property
    def text(self) -> str:
        """Diff rendered as a single line."""
        return DIFF_TOKEN_SEPARATOR.join(self.tokens)

    @property
    def has_changes(self) -> bool:
        """Check whether the diff contains any entry."""
        return bool(self.tokens)

    def to_json_dict(self) -> dict[str, object]:
        """Convert to JSON-serializable dictionary."""
        return {
            "diff": self.text,
            "metrics": self.metrics.to_dict(),
            "fallback": self.fallback,
        }
