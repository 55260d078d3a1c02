"""Constants used across the markdown-html package."""

from __future__ import annotations

import re

# Document skeleton
DOCTYPE = "<!DOCTYPE html>\n"
TITLE_PREFIX = "@@ "
HEAD_BLOCK_START = "@$"
HEAD_BLOCK_END = "$@"
STYLESHEET_LINK = '<link rel="stylesheet" href="{href}" type="text/css" />'

# Block markers
CODE_FENCE = "```"
BLOCKQUOTE_MARKER = ">"
HEADING_MARKER = "#"
MAX_HEADING_LEVEL = 6
RAW_LINE_MARKER = "@"
RAW_TAG_MARKER = "<"
LIST_INDENT_COLUMNS = 4
ORDERED_LIST_PATTERN = re.compile(r"\d+\.")

# Inline markup
EM_SPACE = "&emsp;"
SOFT_BREAK = "<br />\n"
INLINE_CODE_OPEN = '<code class="code-inline">'
INLINE_CODE_CLOSE = "</code>"
SPAN_CLOSE = "</span>"
BOLD_OPEN = '<span class="span-bold" style="font-weight: bold">'
ITALIC_OPEN = '<span class="span-italic" style="font-style: italic">'
BOLD_ITALIC_OPEN = (
    '<span class="span-bold span-italic" style="font-weight: bold; font-style: italic">'
)
STRIKETHROUGH_OPEN = (
    '<span class="span-strikethrough" style="text-decoration: line-through">'
)
ESCAPED_CHARACTERS = {"<": "&lt;", ">": "&gt;", "&": "&amp;"}
