"""Block matchers applied in priority order by the parser.

Each matcher scans the full text, skips matches that overlap a range
already claimed by a higher-priority matcher, and claims the ranges of
the blocks it emits.
"""

import re
from collections.abc import Callable

from flowtrace.parser.claimed import ClaimedRanges
from flowtrace.parser.constants import (
    BLANK_LINE_PATTERN,
    CODE_FENCE_PATTERN,
    HEADING_PATTERN,
    IMAGE_PATTERN,
    LINK_PATTERN,
    LIST_ITEM_PATTERN,
    ORDERED_MARKER_PATTERN,
    SEPARATOR_PATTERN,
)
from flowtrace.parser.models import Block, BlockType


Matcher = Callable[[str, ClaimedRanges], list[Block]]


def _claim_whole_matches(
    text: str,
    pattern: re.Pattern[str],
    block_type: BlockType,
    claimed: ClaimedRanges,
) -> list[Block]:
    """Emit one block per free match, using the whole match as content."""
    blocks: list[Block] = []
    for match in pattern.finditer(text):
        start, end = match.span()
        if claimed.overlaps(start, end):
            continue
        blocks.append(
            Block(
                type=block_type,
                content=match.group(0).strip(),
                start=start,
                end=end,
                raw=match.group(0),
            )
        )
        claimed.claim(start, end)
    return blocks


def match_code_blocks(text: str, claimed: ClaimedRanges) -> list[Block]:
    """Match fenced code blocks."""
    return _claim_whole_matches(text, CODE_FENCE_PATTERN, BlockType.CODE_BLOCK, claimed)


def match_headings(text: str, claimed: ClaimedRanges) -> list[Block]:
    """Match headings and record their level."""
    blocks: list[Block] = []
    for match in HEADING_PATTERN.finditer(text):
        start, end = match.span()
        content = match.group(2).strip()
        if not content or claimed.overlaps(start, end):
            continue
        blocks.append(
            Block(
                type=BlockType.HEADING,
                content=content,
                start=start,
                end=end,
                level=len(match.group(1)),
                raw=match.group(0),
            )
        )
        claimed.claim(start, end)
    return blocks


def match_separators(text: str, claimed: ClaimedRanges) -> list[Block]:
    """Match horizontal rules."""
    return _claim_whole_matches(text, SEPARATOR_PATTERN, BlockType.SEPARATOR, claimed)


def match_list_items(text: str, claimed: ClaimedRanges) -> list[Block]:
    """Match bullet and numbered list items."""
    blocks: list[Block] = []
    for match in LIST_ITEM_PATTERN.finditer(text):
        start, end = match.span()
        content = match.group(2).strip()
        if not content or claimed.overlaps(start, end):
            continue
        marker = match.group(1)
        blocks.append(
            Block(
                type=BlockType.LIST_ITEM,
                content=content,
                start=start,
                end=end,
                marker=marker,
                ordered=bool(ORDERED_MARKER_PATTERN.match(marker)),
                raw=match.group(0),
            )
        )
        claimed.claim(start, end)
    return blocks


def match_images(text: str, claimed: ClaimedRanges) -> list[Block]:
    """Match inline images."""
    return _claim_whole_matches(text, IMAGE_PATTERN, BlockType.IMAGE, claimed)


def match_links(text: str, claimed: ClaimedRanges) -> list[Block]:
    """Match inline links."""
    return _claim_whole_matches(text, LINK_PATTERN, BlockType.LINK, claimed)


def collect_paragraphs(text: str, claimed: ClaimedRanges) -> list[Block]:
    """Turn every unclaimed range into paragraph blocks.

    A range containing blank lines yields one paragraph per chunk.
    Whitespace-only chunks are dropped. Paragraphs do not claim ranges.
    """
    paragraphs: list[Block] = []
    for gap_start, gap_end in claimed.gaps(len(text)):
        chunk_start = gap_start
        for separator in BLANK_LINE_PATTERN.finditer(text, gap_start, gap_end):
            paragraphs.extend(_paragraph(text, chunk_start, separator.start()))
            chunk_start = separator.end()
        paragraphs.extend(_paragraph(text, chunk_start, gap_end))
    return paragraphs


def _paragraph(text: str, start: int, end: int) -> list[Block]:
    raw = text[start:end]
    content = raw.strip()
    if not content:
        return []
    offset = start + (len(raw) - len(raw.lstrip()))
    return [
        Block(
            type=BlockType.PARAGRAPH,
            content=content,
            start=offset,
            end=offset + len(content),
            raw=content,
        )
    ]


# Priority order: code content is never reinterpreted by later matchers.
MATCHERS: tuple[Matcher, ...] = (
    match_code_blocks,
    match_headings,
    match_separators,
    match_list_items,
    match_images,
    match_links,
)
