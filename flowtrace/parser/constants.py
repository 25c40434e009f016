"""Patterns and limits for the structural text parser."""

import re


# ```code``` fences; content may not contain a backtick
CODE_FENCE_PATTERN = re.compile(r"```[^`]*```")

# "## Title" up to the next heading marker, a line break, or end of input
HEADING_PATTERN = re.compile(r"(#{1,6})\s+([^#\n]+?)(?=\s+#{1,6}\s|\n|\Z)")

# Horizontal rules
SEPARATOR_PATTERN = re.compile(r"---|___|\*\*\*")

# "- item", "* item", "+ item", "1. item" up to the next marker or line break
LIST_ITEM_PATTERN = re.compile(
    r"([-*+]|\d+\.)\s+(.*?)(?=\s+(?:[-*+]|\d+\.)\s+|\n|\Z)"
)

ORDERED_MARKER_PATTERN = re.compile(r"^\d+\.$")

# ![alt](url)
IMAGE_PATTERN = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")

# [text](url)
LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

# Blank line between paragraphs when the renderer kept line breaks
BLANK_LINE_PATTERN = re.compile(r"\n[ \t]*\n\s*")

# Characters of content used in a block identity
DEFAULT_IDENTITY_CHARS = 50

CODE_FENCE = "```"
