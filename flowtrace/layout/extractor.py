"""Extraction of content and elements shared across captured states.

Elements present in every state are factored out once per session. Content
is compressed per location: the first state of each location keeps its full
content and every later state at that location keeps only a diff against its
predecessor.
"""

from collections.abc import Sequence
from dataclasses import replace

import structlog

from flowtrace.differ import BlockDiffEngine, get_default_engine
from flowtrace.layout.fingerprint import (
    DEFAULT_FINGERPRINT_TEXT_CHARS,
    element_fingerprint,
)
from flowtrace.layout.metrics import LayoutMetrics
from flowtrace.layout.models import (
    ContentExtraction,
    ElementExtraction,
    ProcessedState,
    StateDiff,
)
from flowtrace.parser import (
    Block,
    BlockParseError,
    block_identity,
    block_prefix,
    parse_blocks,
)
from flowtrace.recorder.models import ElementDescriptor, State


logger = structlog.get_logger()

DEFAULT_COMMON_IDENTITY_CHARS = 100
DEFAULT_SUMMARY_PREVIEW_CHARS = 50
SUMMARY_SEPARATOR = " | "


def _as_processed(states: Sequence[State | ProcessedState]) -> list[ProcessedState]:
    return [
        state if isinstance(state, ProcessedState) else ProcessedState.from_state(state)
        for state in states
    ]


def extract_common_elements(
    states: Sequence[State | ProcessedState],
    text_chars: int = DEFAULT_FINGERPRINT_TEXT_CHARS,
    metrics: LayoutMetrics | None = None,
) -> ElementExtraction:
    """Factor out the elements present in every state.

    Args:
        states: States of one session.
        text_chars: Text prefix length used in combo fingerprints.
        metrics: Optional metrics instance for dependency injection.

    Returns:
        ElementExtraction with the common elements and the reduced states.
    """
    processed = _as_processed(states)
    if len(processed) < 2:
        return ElementExtraction(layout_elements=[], states=processed)

    fingerprint_sets = [
        {element_fingerprint(element, text_chars) for element in state.elements}
        for state in processed
    ]
    common = frozenset(set.intersection(*fingerprint_sets))
    if not common:
        return ElementExtraction(layout_elements=[], states=processed)

    layout_elements: list[ElementDescriptor] = []
    seen: set[str] = set()
    for element in processed[0].elements:
        fingerprint = element_fingerprint(element, text_chars)
        if fingerprint in common and fingerprint not in seen:
            seen.add(fingerprint)
            layout_elements.append(element)

    reduced: list[ProcessedState] = []
    removed = 0
    for state in processed:
        kept = [
            element
            for element in state.elements
            if element_fingerprint(element, text_chars) not in common
        ]
        removed += len(state.elements) - len(kept)
        reduced.append(replace(state, elements=kept))

    (metrics or LayoutMetrics.get_instance()).record_elements(
        extracted=len(layout_elements), removed=removed
    )
    logger.bind(component="layout").info(
        "layout_elements_extracted",
        common_count=len(layout_elements),
        removed_count=removed,
        state_count=len(processed),
    )
    return ElementExtraction(
        layout_elements=layout_elements,
        states=reduced,
        common_fingerprints=common,
    )


def find_common_blocks(
    block_lists: Sequence[list[Block]],
    identity_chars: int = DEFAULT_COMMON_IDENTITY_CHARS,
) -> list[Block]:
    """Find blocks of the first list present in every other list.

    Args:
        block_lists: Parsed blocks per text.
        identity_chars: Content prefix length used for block identity.

    Returns:
        Common blocks in first-list order, each identity at most once.
    """
    if len(block_lists) < 2:
        return []

    other_identities = [
        {block_identity(block, identity_chars) for block in blocks}
        for blocks in block_lists[1:]
    ]
    common: list[Block] = []
    seen: set[str] = set()
    for block in block_lists[0]:
        identity = block_identity(block, identity_chars)
        if identity in seen:
            continue
        if all(identity in identities for identities in other_identities):
            seen.add(identity)
            common.append(block)
    return common


def summarize_common_content(
    contents: Sequence[str],
    identity_chars: int = DEFAULT_COMMON_IDENTITY_CHARS,
    preview_chars: int = DEFAULT_SUMMARY_PREVIEW_CHARS,
) -> str:
    """Summarize the blocks shared by every text.

    Each common block renders as its type prefix followed by a content
    preview, with ``...`` appended when the content was cut.

    Returns:
        Summary joined by `` | ``, or an empty string when fewer than two
        texts are given or nothing is shared.
    """
    if len(contents) < 2:
        return ""

    block_lists: list[list[Block]] = []
    for content in contents:
        try:
            block_lists.append(parse_blocks(content))
        except BlockParseError as e:
            logger.bind(component="layout").warning(
                "common_content_unparsable", reason=e.reason
            )
            return ""

    parts = []
    for block in find_common_blocks(block_lists, identity_chars):
        preview = block.content[:preview_chars]
        if len(block.content) > preview_chars:
            preview += "..."
        parts.append(block_prefix(block) + preview)
    return SUMMARY_SEPARATOR.join(parts)


def diff_states_by_location(
    states: Sequence[State | ProcessedState],
    engine: BlockDiffEngine | None = None,
    identity_chars: int = DEFAULT_COMMON_IDENTITY_CHARS,
    preview_chars: int = DEFAULT_SUMMARY_PREVIEW_CHARS,
    metrics: LayoutMetrics | None = None,
) -> ContentExtraction:
    """Replace repeated content with diffs within each location group.

    States are grouped by location pattern in order of first appearance.
    A group of one state is left untouched. In larger groups the first state
    is the anchor and keeps its content; every later state is diffed against
    the state immediately before it in the same group.

    Args:
        states: States of one session.
        engine: Diff engine, the default engine if None.
        identity_chars: Content prefix length for commonality detection.
        preview_chars: Preview length in common layout summaries.
        metrics: Optional metrics instance for dependency injection.

    Returns:
        ContentExtraction with annotated states in sequence order and the
        content common to every state of the session.
    """
    engine = engine or get_default_engine()
    processed = _as_processed(states)

    groups: dict[str, list[ProcessedState]] = {}
    for state in processed:
        groups.setdefault(state.group_key, []).append(state)

    annotated: dict[str, ProcessedState] = {}
    diffed = 0
    for key, group in groups.items():
        group.sort(key=lambda item: item.sequence_number)
        if len(group) == 1:
            annotated[group[0].state.id] = group[0]
            continue

        anchor = group[0]
        annotated[anchor.state.id] = replace(
            anchor,
            is_first_of_location=True,
            has_common_layout=True,
            common_layout=summarize_common_content(
                [item.state.content for item in group], identity_chars, preview_chars
            ),
        )
        for previous, current in zip(group, group[1:], strict=False):
            result = engine.compute_diff(previous.state.content, current.state.content)
            annotated[current.state.id] = replace(
                current,
                diff=StateDiff(diff_from_state_id=previous.state.id, result=result),
            )
            diffed += 1

        logger.bind(component="layout").debug(
            "location_group_diffed",
            location_pattern=key,
            state_count=len(group),
        )

    ordered = sorted(annotated.values(), key=lambda item: item.sequence_number)
    (metrics or LayoutMetrics.get_instance()).record_content(
        groups=len(groups), diffed=diffed
    )
    return ContentExtraction(
        states=ordered,
        common_layout=summarize_common_content(
            [item.state.content for item in processed], identity_chars, preview_chars
        ),
    )
