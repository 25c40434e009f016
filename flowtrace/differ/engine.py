"""Block-level diff engine with similarity-based modify detection."""

import structlog

from flowtrace.differ.errors import DiffComputationFailure
from flowtrace.differ.metrics import DiffEngineMetrics
from flowtrace.differ.models import (
    BlockComparison,
    DiffMetrics,
    DiffResult,
    ModifiedBlock,
)
from flowtrace.differ.similarity import similarity, similarity_upper_bound
from flowtrace.parser import (
    Block,
    BlockParseError,
    BlockType,
    block_identity,
    block_prefix,
    parse_blocks,
)
from flowtrace.parser.constants import DEFAULT_IDENTITY_CHARS
from flowtrace.settings import AppSettings, get_settings


logger = structlog.get_logger()

# Minimum similarity (exclusive) for a same-type block pair to count as a
# modification instead of a removal plus an addition.
DEFAULT_SIMILARITY_THRESHOLD = 0.5


def block_similarity(first: Block, second: Block) -> float:
    """Similarity of two blocks' content; 0.0 across types."""
    if first.type != second.type:
        return 0.0
    return similarity(first.content, second.content)


def _as_fallback_text(source: object) -> str:
    if source is None:
        return ""
    if isinstance(source, bytes | bytearray):
        return bytes(source).decode("utf-8", errors="replace")
    return str(source)


def _whole_text_block(text: str) -> list[Block]:
    content = text.strip()
    if not content:
        return []
    return [
        Block(
            type=BlockType.PARAGRAPH,
            content=content,
            start=0,
            end=len(text),
            raw=text,
        )
    ]


class BlockDiffEngine:
    """Compares block sequences and renders compact textual diffs.

    Stateless apart from its configuration, so one instance can be shared
    across sessions and threads.
    """

    def __init__(
        self,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
        identity_chars: int = DEFAULT_IDENTITY_CHARS,
        metrics: DiffEngineMetrics | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            similarity_threshold: Similarity a same-type pair must exceed
                to be reported as modified. Must lie in [0, 1].
            identity_chars: Content prefix length used for block identity.
            metrics: Optional metrics instance for dependency injection.

        Raises:
            ValueError: If a parameter is out of range.
        """
        if not 0.0 <= similarity_threshold <= 1.0:
            msg = f"similarity_threshold must be in [0, 1], got {similarity_threshold}"
            raise ValueError(msg)
        if identity_chars < 1:
            msg = f"identity_chars must be positive, got {identity_chars}"
            raise ValueError(msg)

        self._threshold = similarity_threshold
        self._identity_chars = identity_chars
        self._metrics = metrics
        self._log = logger.bind(component="differ")

    @classmethod
    def from_settings(cls, settings: AppSettings | None = None) -> "BlockDiffEngine":
        """Build an engine from application settings."""
        settings = settings or get_settings()
        return cls(
            similarity_threshold=settings.similarity_threshold,
            identity_chars=settings.block_identity_chars,
        )

    @property
    def similarity_threshold(self) -> float:
        """Get the modify-detection threshold."""
        return self._threshold

    @property
    def metrics(self) -> DiffEngineMetrics:
        """Get the metrics collector."""
        return self._metrics or DiffEngineMetrics.get_instance()

    def _identity(self, block: Block) -> str:
        return block_identity(block, self._identity_chars)

    def compare_blocks(
        self, base_blocks: list[Block], new_blocks: list[Block]
    ) -> BlockComparison:
        """Classify blocks as added, removed or modified.

        Args:
            base_blocks: Blocks of the older text.
            new_blocks: Blocks of the newer text.

        Returns:
            BlockComparison with the three classifications.
        """
        base_map = {self._identity(block): block for block in base_blocks}
        new_map = {self._identity(block): block for block in new_blocks}

        # Only new blocks without an exact counterpart may pair with a removal.
        unmatched_new = [
            block for identity, block in new_map.items() if identity not in base_map
        ]
        consumed: set[int] = set()

        removed: list[Block] = []
        modified: list[ModifiedBlock] = []
        for identity, block in base_map.items():
            if identity in new_map:
                continue
            match = self._find_similar(block, unmatched_new, consumed)
            if match is None:
                removed.append(block)
                continue
            index, score = match
            consumed.add(index)
            modified.append(
                ModifiedBlock(
                    before=block, after=unmatched_new[index], similarity=score
                )
            )

        added = [
            block for index, block in enumerate(unmatched_new) if index not in consumed
        ]
        return BlockComparison(added=added, removed=removed, modified=modified)

    def _find_similar(
        self,
        target: Block,
        candidates: list[Block],
        consumed: set[int],
    ) -> tuple[int, float] | None:
        """Find the most similar free candidate of the same type.

        Returns:
            ``(index, similarity)`` of the best candidate, or None if no
            candidate exceeds the threshold.
        """
        best: tuple[int, float] | None = None
        for index, candidate in enumerate(candidates):
            if index in consumed or candidate.type != target.type:
                continue
            if target.type == BlockType.HEADING and candidate.level != target.level:
                continue
            bound = similarity_upper_bound(target.content, candidate.content)
            if bound <= self._threshold or (best is not None and bound <= best[1]):
                continue
            score = block_similarity(target, candidate)
            if score > self._threshold and (best is None or score > best[1]):
                best = (index, score)
        return best

    def render_tokens(self, comparison: BlockComparison) -> list[str]:
        """Render a comparison as diff tokens.

        Removed blocks come first, then added blocks, then modified pairs as
        a ``~`` marker followed by indented before and after entries.
        """
        tokens: list[str] = []
        for block in comparison.removed:
            tokens.append(f"- {block_prefix(block)}{block.content}")
        for block in comparison.added:
            tokens.append(f"+ {block_prefix(block)}{block.content}")
        for pair in comparison.modified:
            tokens.append(
                f"~ {block_prefix(pair.before)}[{pair.similarity_percent}% similar]"
            )
            tokens.append(f"  - {pair.before.content}")
            tokens.append(f"  + {pair.after.content}")
        return tokens

    def compute_diff_strict(
        self, base_text: str | bytes | None, new_text: str | bytes | None
    ) -> DiffResult:
        """Diff two texts, raising instead of falling back.

        Raises:
            DiffComputationFailure: If either text cannot be parsed.
        """
        if base_text == new_text:
            return DiffResult()

        try:
            base_blocks = parse_blocks(base_text)
            new_blocks = parse_blocks(new_text)
        except BlockParseError as e:
            raise DiffComputationFailure(e.reason) from e

        comparison = self.compare_blocks(base_blocks, new_blocks)
        metrics = DiffMetrics(
            base_blocks=len(base_blocks),
            new_blocks=len(new_blocks),
            added=len(comparison.added),
            removed=len(comparison.removed),
            modified=len(comparison.modified),
            unchanged=max(
                0, min(len(base_blocks), len(new_blocks)) - len(comparison.modified)
            ),
        )
        return DiffResult(
            added=comparison.added,
            removed=comparison.removed,
            modified=comparison.modified,
            tokens=[] if comparison.is_empty else self.render_tokens(comparison),
            metrics=metrics,
        )

    def compute_diff(
        self, base_text: str | bytes | None, new_text: str | bytes | None
    ) -> DiffResult:
        """Diff two texts at block level.

        Identical inputs short-circuit to the empty diff. Unparsable input
        never raises: the result replaces the whole old content with the
        whole new content and is flagged as a fallback.

        Args:
            base_text: Older text.
            new_text: Newer text.

        Returns:
            DiffResult with tokens and metrics.
        """
        if base_text == new_text:
            self.metrics.record_identical()
            return DiffResult()

        try:
            result = self.compute_diff_strict(base_text, new_text)
        except DiffComputationFailure as e:
            self._log.warning("diff_fallback_used", reason=e.reason)
            result = self._fallback_diff(base_text, new_text)

        self.metrics.record_diff(
            added=result.metrics.added,
            removed=result.metrics.removed,
            modified=result.metrics.modified,
            fallback=result.fallback,
        )
        return result

    def _fallback_diff(self, base_text: object, new_text: object) -> DiffResult:
        """Build a diff removing everything old and adding everything new."""
        removed = _whole_text_block(_as_fallback_text(base_text))
        added = _whole_text_block(_as_fallback_text(new_text))
        comparison = BlockComparison(added=added, removed=removed)
        return DiffResult(
            added=added,
            removed=removed,
            tokens=self.render_tokens(comparison),
            metrics=DiffMetrics(
                base_blocks=len(removed),
                new_blocks=len(added),
                added=len(added),
                removed=len(removed),
                unchanged=0,
            ),
            fallback=True,
        )


_default_engine: BlockDiffEngine | None = None


def get_default_engine() -> BlockDiffEngine:
    """Get the engine configured from application settings."""
    global _default_engine  # noqa: PLW0603
    if _default_engine is None:
        _default_engine = BlockDiffEngine.from_settings()
    return _default_engine


def reset_default_engine() -> None:
    """Drop the cached default engine (primarily for testing)."""
    global _default_engine  # noqa: PLW0603
    _default_engine = None


def compare_blocks(
    base_blocks: list[Block], new_blocks: list[Block]
) -> BlockComparison:
    """Compare block sequences with the default engine."""
    return get_default_engine().compare_blocks(base_blocks, new_blocks)


def compute_diff(
    base_text: str | bytes | None, new_text: str | bytes | None
) -> DiffResult:
    """Diff two texts with the default engine."""
    return get_default_engine().compute_diff(base_text, new_text)
