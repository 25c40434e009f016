"""Tests for BlockDiffEngine."""

from collections.abc import Generator

import pytest

from flowtrace.differ import (
    DEFAULT_SIMILARITY_THRESHOLD,
    BlockDiffEngine,
    DiffComputationFailure,
    DiffEngineMetrics,
    block_similarity,
    compute_diff,
    reset_default_engine,
)
from flowtrace.parser import Block, parse_blocks
from flowtrace.settings import AppSettings


@pytest.fixture(autouse=True)
def reset_state() -> Generator[None]:
    """Reset singletons before and after each test."""
    DiffEngineMetrics.reset_instance()
    reset_default_engine()
    yield
    DiffEngineMetrics.reset_instance()
    reset_default_engine()


@pytest.fixture
def engine() -> BlockDiffEngine:
    """Engine with the default threshold."""
    return BlockDiffEngine(similarity_threshold=0.5)


class TestEngineConfiguration:
    """Tests for engine construction."""

    def test_default_threshold(self) -> None:
        """The default modify threshold is 0.5."""
        assert DEFAULT_SIMILARITY_THRESHOLD == 0.5
        assert BlockDiffEngine().similarity_threshold == 0.5

    def test_threshold_out_of_range(self) -> None:
        """Thresholds outside [0, 1] are rejected."""
        with pytest.raises(ValueError, match="similarity_threshold"):
            BlockDiffEngine(similarity_threshold=1.5)

    def test_identity_chars_must_be_positive(self) -> None:
        """A zero identity prefix is rejected."""
        with pytest.raises(ValueError, match="identity_chars"):
            BlockDiffEngine(identity_chars=0)

    def test_from_settings(self) -> None:
        """Settings values configure the engine."""
        engine = BlockDiffEngine.from_settings(AppSettings(similarity_threshold=0.3))
        assert engine.similarity_threshold == 0.3


class TestComputeDiffBasics:
    """Tests for additions, removals and identical input."""

    def test_identical_inputs(self, engine: BlockDiffEngine) -> None:
        """Identical texts give an empty diff."""
        result = engine.compute_diff("# Same\nbody", "# Same\nbody")

        assert result.tokens == []
        assert result.text == ""
        assert not result.has_changes

    def test_identical_short_circuit_recorded(self, engine: BlockDiffEngine) -> None:
        """Identical texts are counted without parsing."""
        engine.compute_diff("x", "x")

        metrics = DiffEngineMetrics.get_instance()
        assert metrics.diffs_computed == 1
        assert metrics.identical_short_circuits == 1

    def test_single_addition(self, engine: BlockDiffEngine) -> None:
        """A new paragraph is reported as one addition."""
        result = engine.compute_diff("X", "X\n\nY")

        assert result.tokens == ["+ Y"]
        assert result.metrics.base_blocks == 1
        assert result.metrics.new_blocks == 2
        assert result.metrics.added == 1
        assert result.metrics.unchanged == 1

    def test_chained_additions(self, engine: BlockDiffEngine) -> None:
        """Consecutive snapshots each report only their own addition."""
        assert engine.compute_diff("X", "X\n\nY").text == "+ Y"
        assert engine.compute_diff("X\n\nY", "X\n\nY\n\nZ").text == "+ Z"

    def test_single_removal(self, engine: BlockDiffEngine) -> None:
        """A dropped paragraph is reported as one removal."""
        result = engine.compute_diff("A\n\nB", "A")
        assert result.tokens == ["- B"]

    def test_prefixes_in_tokens(self, engine: BlockDiffEngine) -> None:
        """Tokens carry the block type prefix."""
        result = engine.compute_diff("", "## Setup\n- step one")
        assert result.tokens == ["+ ## Setup", "+ - step one"]

    def test_removals_before_additions(self, engine: BlockDiffEngine) -> None:
        """Removed entries precede added entries."""
        result = engine.compute_diff("Old text", "Completely different")
        assert result.tokens == ["- Old text", "+ Completely different"]


class TestComputeDiffModifications:
    """Tests for similarity-based modify detection."""

    def test_similar_heading_is_modified(self, engine: BlockDiffEngine) -> None:
        """A lightly edited heading is reported as modified."""
        result = engine.compute_diff("# Welcome back Alice", "# Welcome back Alicia")

        assert result.tokens == [
            "~ # [89% similar]",
            "  - Welcome back Alice",
            "  + Welcome back Alicia",
        ]
        assert result.text == (
            "~ # [89% similar] |   - Welcome back Alice |   + Welcome back Alicia"
        )
        assert result.metrics.modified == 1
        assert result.metrics.added == 0
        assert result.metrics.removed == 0

    def test_threshold_is_exclusive(self, engine: BlockDiffEngine) -> None:
        """Similarity equal to the threshold is not a modification."""
        result = engine.compute_diff("abcd", "abxy")
        assert result.tokens == ["- abcd", "+ abxy"]

    def test_lower_threshold_pairs_blocks(self) -> None:
        """A lower threshold accepts weaker matches."""
        result = BlockDiffEngine(similarity_threshold=0.4).compute_diff("abcd", "abxy")
        assert result.tokens[0] == "~ [50% similar]"

    def test_cross_type_never_modified(self, engine: BlockDiffEngine) -> None:
        """Blocks of different types are never paired."""
        result = engine.compute_diff("# Title", "Title")
        assert result.tokens == ["- # Title", "+ Title"]

    def test_heading_level_change_not_modified(self, engine: BlockDiffEngine) -> None:
        """Headings of different levels are never paired."""
        result = engine.compute_diff("# Title", "## Title")
        assert result.tokens == ["- # Title", "+ ## Title"]

    def test_unchanged_block_not_paired(self, engine: BlockDiffEngine) -> None:
        """A removal is not paired with a block that stayed unchanged."""
        result = engine.compute_diff("Alpha one\n\nAlpha two", "Alpha one")

        assert result.tokens == ["- Alpha two"]
        assert result.modified == []

    def test_new_block_paired_once(self, engine: BlockDiffEngine) -> None:
        """One new block absorbs at most one removal."""
        result = engine.compute_diff("Hello there\n\nHello thera", "Hello thereX")

        assert len(result.modified) == 1
        assert result.modified[0].before.content == "Hello there"
        assert [b.content for b in result.removed] == ["Hello thera"]
        assert result.added == []

    def test_best_candidate_chosen(self, engine: BlockDiffEngine) -> None:
        """The most similar free candidate wins."""
        comparison = engine.compare_blocks(
            parse_blocks("Report for March"),
            parse_blocks("Report for Mar\n\nReport for Marc"),
        )

        assert len(comparison.modified) == 1
        assert comparison.modified[0].after.content == "Report for Marc"
        assert [b.content for b in comparison.added] == ["Report for Mar"]

    def test_length_gap_skips_scoring(
        self, engine: BlockDiffEngine, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Pairs whose lengths alone rule out a match are never scored."""
        scored: list[tuple[str, str]] = []

        def recording_similarity(first: Block, second: Block) -> float:
            scored.append((first.content, second.content))
            return block_similarity(first, second)

        monkeypatch.setattr(
            "flowtrace.differ.engine.block_similarity", recording_similarity
        )
        comparison = engine.compare_blocks(
            parse_blocks("Short note"),
            parse_blocks("Short notes\n\n" + "Short note " * 40),
        )

        assert scored == [("Short note", "Short notes")]
        assert comparison.modified[0].after.content == "Short notes"
        assert len(comparison.added) == 1


class TestCompareSameText:
    """Tests for comparing a text with an independent parse of itself."""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "# Title\n\n- item\n- item\n- other\n\n```\ncode\n```\n\n"
            "[docs](https://docs.example.com)",
            "## Steps\n1. one\n2. two\n---\n![logo](logo.png)\n\nTail text",
            "word    word\n\n\n   spaced     text   with  gaps",
        ],
    )
    def test_no_changes(self, engine: BlockDiffEngine, text: str) -> None:
        """Two parses of one text compare as unchanged."""
        comparison = engine.compare_blocks(parse_blocks(text), parse_blocks(text))

        assert comparison.is_empty
        assert engine.render_tokens(comparison) == []


class TestComputeDiffFallback:
    """Tests for unparsable input."""

    def test_fallback_on_invalid_bytes(self, engine: BlockDiffEngine) -> None:
        """Undecodable input falls back to a whole-content diff."""
        result = engine.compute_diff(b"\xff", "fresh")

        assert result.fallback
        assert result.tokens[-1] == "+ fresh"
        assert result.metrics.removed == 1
        assert DiffEngineMetrics.get_instance().fallbacks == 1

    def test_strict_raises(self, engine: BlockDiffEngine) -> None:
        """The strict variant surfaces the failure."""
        with pytest.raises(DiffComputationFailure, match="invalid UTF-8"):
            engine.compute_diff_strict(b"\xff", "fresh")

    def test_to_json_dict(self, engine: BlockDiffEngine) -> None:
        """Results serialize with text, metrics and fallback flag."""
        data = engine.compute_diff("X", "X\n\nY").to_json_dict()

        assert data["diff"] == "+ Y"
        assert data["fallback"] is False
        assert data["metrics"]["added"] == 1  # type: ignore[index]


class TestModuleLevelDiff:
    """Tests for the default-engine helpers."""

    def test_compute_diff_uses_default_engine(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The module helper diffs with settings from the environment."""
        monkeypatch.setenv("FLOWTRACE_SIMILARITY_THRESHOLD", "0.4")
        assert compute_diff("abcd", "abxy").tokens[0] == "~ [50% similar]"
