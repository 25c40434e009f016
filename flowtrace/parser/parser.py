"""Structural text parser.

Splits semi-structured text, possibly rendered without reliable line
breaks, into an ordered sequence of typed, non-overlapping blocks.
"""

from flowtrace.parser.claimed import ClaimedRanges
from flowtrace.parser.constants import CODE_FENCE, DEFAULT_IDENTITY_CHARS
from flowtrace.parser.errors import BlockParseError
from flowtrace.parser.matchers import MATCHERS, Matcher, collect_paragraphs
from flowtrace.parser.models import Block, BlockType


def _as_text(source: object) -> str:
    """Coerce parser input to text.

    Raises:
        BlockParseError: If the input is not text or UTF-8 bytes.
    """
    if source is None:
        return ""
    if isinstance(source, str):
        return source
    if isinstance(source, bytes | bytearray):
        try:
            return bytes(source).decode("utf-8")
        except UnicodeDecodeError as e:
            raise BlockParseError(f"invalid UTF-8 at byte {e.start}") from e
    raise BlockParseError(f"unsupported input type {type(source).__name__}")


def parse_blocks(
    source: str | bytes | None,
    matchers: tuple[Matcher, ...] = MATCHERS,
) -> list[Block]:
    """Parse text into blocks sorted by source offset.

    Matchers run in priority order over a shared set of claimed ranges;
    whatever remains unclaimed becomes paragraphs.

    Args:
        source: Text to parse. ``None`` is treated as empty.
        matchers: Ordered matchers to apply before paragraph collection.

    Returns:
        Blocks in source order. Empty or whitespace-only input yields [].

    Raises:
        BlockParseError: If the input cannot be read as text.
    """
    text = _as_text(source)
    if not text.strip():
        return []

    claimed = ClaimedRanges()
    blocks: list[Block] = []
    for matcher in matchers:
        blocks.extend(matcher(text, claimed))
    blocks.extend(collect_paragraphs(text, claimed))

    blocks.sort(key=lambda block: block.start)
    return blocks


def block_identity(block: Block, prefix_chars: int = DEFAULT_IDENTITY_CHARS) -> str:
    """Compute the identity key used to compare blocks.

    Only a prefix of the content takes part, so long blocks compare
    cheaply and tolerate truncation at the tail.

    Args:
        block: Block to identify.
        prefix_chars: Number of content characters included.

    Returns:
        Identity string ``type:level:content-prefix``.
    """
    level = block.level if block.level is not None else ""
    return f"{block.type.value}:{level}:{block.content[:prefix_chars]}"


def block_prefix(block: Block) -> str:
    """Get the display prefix for a block type."""
    if block.type == BlockType.HEADING:
        return "#" * (block.level or 1) + " "
    if block.type == BlockType.LIST_ITEM:
        return f"{block.marker or '-'} "
    if block.type == BlockType.SEPARATOR:
        return "--- "
    if block.type == BlockType.CODE_BLOCK:
        return f"{CODE_FENCE} "
    return ""


def blocks_to_text(blocks: list[Block]) -> str:
    """Rebuild collapsed text from blocks."""
    parts: list[str] = []
    for block in blocks:
        if block.type in (BlockType.HEADING, BlockType.LIST_ITEM):
            parts.append(block_prefix(block) + block.content)
        else:
            parts.append(block.content)
    return " ".join(parts)
