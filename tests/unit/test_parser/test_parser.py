"""Tests for the structural text parser."""

import pytest

from flowtrace.parser import (
    Block,
    BlockParseError,
    BlockType,
    block_identity,
    block_prefix,
    blocks_to_text,
    parse_blocks,
)


def _types(blocks: list[Block]) -> list[BlockType]:
    return [block.type for block in blocks]


class TestParseBlocksEmptyInput:
    """Tests for empty and missing input."""

    def test_empty_string(self) -> None:
        """Empty text yields no blocks."""
        assert parse_blocks("") == []

    def test_whitespace_only(self) -> None:
        """Whitespace-only text yields no blocks."""
        assert parse_blocks("   \n\t \n ") == []

    def test_none(self) -> None:
        """None is treated as empty text."""
        assert parse_blocks(None) == []


class TestParseBlocksInputTypes:
    """Tests for input coercion."""

    def test_utf8_bytes(self) -> None:
        """UTF-8 bytes are decoded before parsing."""
        blocks = parse_blocks("# Café".encode())
        assert _types(blocks) == [BlockType.HEADING]
        assert blocks[0].content == "Café"

    def test_invalid_bytes_raise(self) -> None:
        """Bytes that are not UTF-8 raise BlockParseError."""
        with pytest.raises(BlockParseError, match="invalid UTF-8"):
            parse_blocks(b"\xff\xfe")

    def test_unsupported_type_raises(self) -> None:
        """Non-text input raises BlockParseError."""
        with pytest.raises(BlockParseError, match="unsupported input type int"):
            parse_blocks(42)  # type: ignore[arg-type]


class TestParseBlocksHeadings:
    """Tests for heading recognition."""

    def test_heading_then_paragraph(self) -> None:
        """A heading line is followed by a paragraph."""
        blocks = parse_blocks("# Title\nSome text")

        assert _types(blocks) == [BlockType.HEADING, BlockType.PARAGRAPH]
        assert blocks[0].content == "Title"
        assert blocks[0].level == 1
        assert blocks[0].start == 0
        assert blocks[1].content == "Some text"
        assert blocks[1].start == 8

    def test_collapsed_headings(self) -> None:
        """Headings on one line split at the next heading marker."""
        blocks = parse_blocks("# Intro ## Details body text")

        assert _types(blocks) == [BlockType.HEADING, BlockType.HEADING]
        assert [(b.level, b.content) for b in blocks] == [
            (1, "Intro"),
            (2, "Details body text"),
        ]

    def test_level_six(self) -> None:
        """Six markers give a level 6 heading."""
        blocks = parse_blocks("###### Deep")
        assert blocks[0].level == 6
        assert blocks[0].content == "Deep"


class TestParseBlocksLists:
    """Tests for list item recognition."""

    def test_collapsed_bullets(self) -> None:
        """Bullets on one line become separate items."""
        blocks = parse_blocks("- alpha - beta")

        assert _types(blocks) == [BlockType.LIST_ITEM, BlockType.LIST_ITEM]
        assert [b.content for b in blocks] == ["alpha", "beta"]
        assert all(b.marker == "-" and not b.ordered for b in blocks)

    def test_numbered_items(self) -> None:
        """Numbered markers produce ordered items."""
        blocks = parse_blocks("1. first 2. second")

        assert [b.content for b in blocks] == ["first", "second"]
        assert [b.marker for b in blocks] == ["1.", "2."]
        assert all(b.ordered for b in blocks)

    def test_hyphenated_word_is_not_a_list(self) -> None:
        """A hyphen inside a word is plain text."""
        blocks = parse_blocks("well-known fact")
        assert _types(blocks) == [BlockType.PARAGRAPH]


class TestParseBlocksPriority:
    """Tests for matcher priority and overlap handling."""

    def test_code_content_not_reinterpreted(self) -> None:
        """Markers inside a code fence stay part of the code block."""
        blocks = parse_blocks("```x = 1 # not heading```")

        assert _types(blocks) == [BlockType.CODE_BLOCK]
        assert blocks[0].content == "```x = 1 # not heading```"

    def test_separator_between_paragraphs(self) -> None:
        """A separator splits the surrounding text into paragraphs."""
        blocks = parse_blocks("Above --- Below")

        assert _types(blocks) == [
            BlockType.PARAGRAPH,
            BlockType.SEPARATOR,
            BlockType.PARAGRAPH,
        ]
        assert [b.content for b in blocks] == ["Above", "---", "Below"]

    def test_image_wins_over_link(self) -> None:
        """An image is not also reported as a link."""
        blocks = parse_blocks("See [docs](http://x) and ![logo](a.png)")

        assert _types(blocks) == [
            BlockType.PARAGRAPH,
            BlockType.LINK,
            BlockType.PARAGRAPH,
            BlockType.IMAGE,
        ]
        assert blocks[1].content == "[docs](http://x)"
        assert blocks[3].content == "![logo](a.png)"

    def test_blocks_sorted_and_disjoint(self) -> None:
        """Blocks come back in source order without overlaps."""
        text = "# Head\n- item one\n```code```\nTail text ***"
        blocks = parse_blocks(text)

        starts = [b.start for b in blocks]
        assert starts == sorted(starts)
        for first, second in zip(blocks, blocks[1:], strict=False):
            assert first.end <= second.start


class TestParseBlocksParagraphs:
    """Tests for paragraph collection."""

    def test_blank_line_splits_paragraphs(self) -> None:
        """A blank line separates two paragraphs."""
        blocks = parse_blocks("First para\n\nSecond para")
        assert [b.content for b in blocks] == ["First para", "Second para"]

    def test_paragraph_offsets_are_trimmed(self) -> None:
        """Paragraph offsets point at the trimmed content."""
        text = "   Padded   "
        block = parse_blocks(text)[0]
        assert text[block.start : block.end] == "Padded"


class TestBlockIdentity:
    """Tests for block_identity."""

    def test_heading_includes_level(self) -> None:
        """Heading identity carries the level."""
        block = Block(type=BlockType.HEADING, content="Title", start=0, end=7, level=2)
        assert block_identity(block) == "heading:2:Title"

    def test_paragraph_has_empty_level(self) -> None:
        """Non-heading identity leaves the level empty."""
        block = Block(type=BlockType.PARAGRAPH, content="text", start=0, end=4)
        assert block_identity(block) == "paragraph::text"

    def test_content_truncated(self) -> None:
        """Only the configured prefix of the content takes part."""
        first = Block(type=BlockType.PARAGRAPH, content="a" * 60, start=0, end=60)
        second = Block(type=BlockType.PARAGRAPH, content="a" * 50 + "b", start=0, end=51)

        assert block_identity(first) == block_identity(second)
        assert block_identity(first, 55) != block_identity(second, 55)


class TestBlockPrefix:
    """Tests for block_prefix and blocks_to_text."""

    @pytest.mark.parametrize(
        ("block", "expected"),
        [
            (Block(type=BlockType.HEADING, content="t", start=0, end=1, level=3), "### "),
            (Block(type=BlockType.LIST_ITEM, content="t", start=0, end=1, marker="*"), "* "),
            (Block(type=BlockType.SEPARATOR, content="---", start=0, end=3), "--- "),
            (Block(type=BlockType.CODE_BLOCK, content="```x```", start=0, end=7), "``` "),
            (Block(type=BlockType.PARAGRAPH, content="t", start=0, end=1), ""),
        ],
    )
    def test_prefix(self, block: Block, expected: str) -> None:
        """Each type gets its display prefix."""
        assert block_prefix(block) == expected

    def test_blocks_to_text(self) -> None:
        """Blocks rebuild collapsed text with their markers."""
        assert blocks_to_text(parse_blocks("# A\n- b\nc")) == "# A - b c"
