"""Metrics for block diff operations."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class DiffEngineMetrics:
    """Metrics for diff computations.

    Attributes:
        diffs_computed: Total ``compute_diff`` calls.
        identical_short_circuits: Calls answered without parsing.
        fallbacks: Calls that fell back to a whole-content diff.
        blocks_added: Added blocks across all diffs.
        blocks_removed: Removed blocks across all diffs.
        blocks_modified: Modified pairs across all diffs.
    """

    diffs_computed: int = 0
    identical_short_circuits: int = 0
    fallbacks: int = 0
    blocks_added: int = 0
    blocks_removed: int = 0
    blocks_modified: int = 0

    _instance: ClassVar["DiffEngineMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "DiffEngineMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance for testing."""
        cls._instance = None

    def record_identical(self) -> None:
        """Record a diff of identical texts."""
        self.diffs_computed += 1
        self.identical_short_circuits += 1

    def record_diff(
        self, added: int, removed: int, modified: int, fallback: bool = False
    ) -> None:
        """Record a computed diff.

        Args:
            added: Added block count.
            removed: Removed block count.
            modified: Modified pair count.
            fallback: Whether the fallback diff was used.
        """
        self.diffs_computed += 1
        self.blocks_added += added
        self.blocks_removed += removed
        self.blocks_modified += modified
        if fallback:
            self.fallbacks += 1

    def to_dict(self) -> dict[str, int]:
        """Convert metrics to dictionary."""
        return {
            "diffs_computed": self.diffs_computed,
            "identical_short_circuits": self.identical_short_circuits,
            "fallbacks": self.fallbacks,
            "blocks_added": self.blocks_added,
            "blocks_removed": self.blocks_removed,
            "blocks_modified": self.blocks_modified,
        }
