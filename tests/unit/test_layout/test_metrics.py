"""Tests for LayoutMetrics."""

from collections.abc import Generator

import pytest

from flowtrace.layout import LayoutMetrics


@pytest.fixture(autouse=True)
def reset_metrics() -> Generator[None]:
    """Reset singleton before and after each test."""
    LayoutMetrics.reset_instance()
    yield
    LayoutMetrics.reset_instance()


class TestLayoutMetrics:
    """Tests for layout metric collection."""

    def test_singleton(self) -> None:
        """get_instance returns the same instance each time."""
        assert LayoutMetrics.get_instance() is LayoutMetrics.get_instance()

    def test_records(self) -> None:
        """Recorded values appear in the dictionary."""
        metrics = LayoutMetrics.get_instance()
        metrics.record_elements(extracted=2, removed=5)
        metrics.record_content(groups=3, diffed=4)
        metrics.record_session()

        assert metrics.to_dict() == {
            "layout_elements_extracted": 2,
            "element_occurrences_removed": 5,
            "location_groups": 3,
            "states_diffed": 4,
            "sessions_compressed": 1,
        }
