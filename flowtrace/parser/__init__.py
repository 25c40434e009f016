"""Structural text parser producing typed blocks."""

from flowtrace.parser.claimed import ClaimedRanges
from flowtrace.parser.errors import BlockParseError
from flowtrace.parser.models import Block, BlockType
from flowtrace.parser.parser import (
    block_identity,
    block_prefix,
    blocks_to_text,
    parse_blocks,
)


__all__ = [
    "Block",
    "BlockParseError",
    "BlockType",
    "ClaimedRanges",
    "block_identity",
    "block_prefix",
    "blocks_to_text",
    "parse_blocks",
]
