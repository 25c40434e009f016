"""Metrics for layout extraction."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class LayoutMetrics:
    """Metrics for layout and content commonality extraction.

    Attributes:
        layout_elements_extracted: Common elements factored out.
        element_occurrences_removed: Element entries removed from states.
        location_groups: Location groups processed.
        states_diffed: States whose content was replaced by a diff.
        sessions_compressed: Sessions run through the compressor.
    """

    layout_elements_extracted: int = 0
    element_occurrences_removed: int = 0
    location_groups: int = 0
    states_diffed: int = 0
    sessions_compressed: int = 0

    _instance: ClassVar["LayoutMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "LayoutMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance for testing."""
        cls._instance = None

    def record_elements(self, extracted: int, removed: int) -> None:
        """Record an element extraction.

        Args:
            extracted: Common elements found.
            removed: Element entries removed across all states.
        """
        self.layout_elements_extracted += extracted
        self.element_occurrences_removed += removed

    def record_content(self, groups: int, diffed: int) -> None:
        """Record a content extraction.

        Args:
            groups: Location groups processed.
            diffed: States given a diff.
        """
        self.location_groups += groups
        self.states_diffed += diffed

    def record_session(self) -> None:
        """Record a compressed session."""
        self.sessions_compressed += 1

    def to_dict(self) -> dict[str, int]:
        """Convert metrics to dictionary."""
        return {
            "layout_elements_extracted": self.layout_elements_extracted,
            "element_occurrences_removed": self.element_occurrences_removed,
            "location_groups": self.location_groups,
            "states_diffed": self.states_diffed,
            "sessions_compressed": self.sessions_compressed,
        }
