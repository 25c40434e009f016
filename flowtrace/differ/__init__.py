"""Block diff engine for comparing captured content."""

from flowtrace.differ.engine import (
    DEFAULT_SIMILARITY_THRESHOLD,
    BlockDiffEngine,
    block_similarity,
    compare_blocks,
    compute_diff,
    get_default_engine,
    reset_default_engine,
)
from flowtrace.differ.errors import DiffComputationFailure
from flowtrace.differ.metrics import DiffEngineMetrics
from flowtrace.differ.models import (
    BlockComparison,
    DiffMetrics,
    DiffResult,
    ModifiedBlock,
)
from flowtrace.differ.similarity import (
    levenshtein_distance,
    similarity,
    similarity_upper_bound,
)


__all__ = [
    "DEFAULT_SIMILARITY_THRESHOLD",
    "BlockComparison",
    "BlockDiffEngine",
    "DiffComputationFailure",
    "DiffEngineMetrics",
    "DiffMetrics",
    "DiffResult",
    "ModifiedBlock",
    "block_similarity",
    "compare_blocks",
    "compute_diff",
    "get_default_engine",
    "levenshtein_distance",
    "reset_default_engine",
    "similarity",
    "similarity_upper_bound",
]
