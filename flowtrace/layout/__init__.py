"""Layout and content commonality extraction for recorded sessions."""

from flowtrace.layout.compressor import compress_session
from flowtrace.layout.extractor import (
    diff_states_by_location,
    extract_common_elements,
    find_common_blocks,
    summarize_common_content,
)
from flowtrace.layout.fingerprint import element_fingerprint
from flowtrace.layout.metrics import LayoutMetrics
from flowtrace.layout.models import (
    CompressedSession,
    ContentExtraction,
    ElementExtraction,
    ProcessedState,
    StateDiff,
)
from flowtrace.layout.timeline import TimelineEntry, TimelineEntryKind, build_timeline


__all__ = [
    "CompressedSession",
    "ContentExtraction",
    "ElementExtraction",
    "LayoutMetrics",
    "ProcessedState",
    "StateDiff",
    "TimelineEntry",
    "TimelineEntryKind",
    "build_timeline",
    "compress_session",
    "diff_states_by_location",
    "element_fingerprint",
    "extract_common_elements",
    "find_common_blocks",
    "summarize_common_content",
]
