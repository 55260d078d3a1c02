"""Block structure tracking: the stack of open HTML containers."""

from __future__ import annotations

import logging

from .attributes import extract_attributes
from .config import HtmlConfig, normalize_config
from .constants import (
    BLOCKQUOTE_MARKER,
    CODE_FENCE,
    HEADING_MARKER,
    LIST_INDENT_COLUMNS,
    MAX_HEADING_LEVEL,
    ORDERED_LIST_PATTERN,
    RAW_LINE_MARKER,
    RAW_TAG_MARKER,
    SOFT_BREAK,
)
from .inline import escape_text, render_inline
from .models import (
    AttributeSet,
    BlockKind,
    BlockTransition,
    Diagnostic,
    LineKind,
    OpenBlock,
    ParserState,
)

logger = logging.getLogger(__name__)


def strip_line_ending(line: str) -> str:
    """Remove a trailing LF or CRLF terminator.

    Examples:
        strip_line_ending("text\\r\\n")  # "text"
    """
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def _leading_whitespace_columns(line: str) -> int:
    """Compute the column width of leading whitespace.

    Tabs advance to the next multiple of four columns.

    Examples:
        _leading_whitespace_columns("    text")  # 4
        _leading_whitespace_columns("\\ttext")  # 4
    """
    columns = 0
    for character in line:
        if character == " ":
            columns += 1
            continue
        if character == "\t":
            columns += 4 - (columns % 4)
            continue
        break
    return columns


def match_list_marker(line: str) -> tuple[bool, int, int] | None:
    """Detect a list item marker.

    Args:
        line: Line to inspect.

    Returns:
        tuple[bool, int, int] | None: Whether the list is ordered, the nesting
            level (one per four columns of indentation, starting at 1), and the
            offset just past the marker. None when the line is not a list item.

    Examples:
        match_list_marker("- item")  # (False, 1, 1)
        match_list_marker("    12. item")  # (True, 2, 7)
    """
    stripped = line.lstrip(" \t")
    offset = len(line) - len(stripped)
    level = _leading_whitespace_columns(line) // LIST_INDENT_COLUMNS + 1

    if stripped.startswith("-"):
        return False, level, offset + 1

    number = ORDERED_LIST_PATTERN.match(stripped)
    if number:
        return True, level, offset + number.end()

    return None


def _raw_html_start(line: str) -> int | None:
    """Return the offset of the first non-blank character when it starts raw HTML."""
    stripped = line.lstrip(" \t")
    if stripped.startswith((RAW_LINE_MARKER, RAW_TAG_MARKER)):
        return len(line) - len(stripped)
    return None


class BlockStackMachine:
    """Convert document body lines into indented HTML.

    Owns a `ParserState`. `peek_classification` answers what a line would do
    without touching the state; `process_line` applies it and renders the line.

    Examples:
        machine = BlockStackMachine()
        machine.open_template(BlockKind.BODY)
        html = machine.process_line("# Title\\n") + machine.drain()
    """

    def __init__(self, config: HtmlConfig | None = None):
        self.config = normalize_config(config or HtmlConfig())
        self.state = ParserState()
        self.diagnostics: list[Diagnostic] = []

    # Output helpers

    def _indent(self, depth: int | None = None) -> str:
        if depth is None:
            depth = len(self.state.stack) + self.state.raw_offset
        return self.config.indent_chars * max(depth, 0)

    def indent_text(self, text: str) -> str:
        """Indent `text` at the current depth and terminate it with a newline."""
        return f"{self._indent()}{text}\n"

    def _open(self, kind: BlockKind, attributes: AttributeSet | None = None) -> str:
        attributes = attributes or AttributeSet()
        if kind is BlockKind.PRE:
            rendered = f"{self._indent()}<pre{attributes.render()}>"
        elif kind is BlockKind.CODE:
            rendered = f"<code{attributes.render()}>\n"
        else:
            rendered = f"{self._indent()}<{kind.tag}{attributes.render()}>\n"
        self.state.stack.append(OpenBlock(kind, attributes))
        return rendered

    def _close(self) -> str:
        block = self.state.stack.pop()
        if block.kind is BlockKind.CODE:
            # Pre is still open; align the pair with its opening line.
            return f"{self._indent(len(self.state.stack) - 1 + self.state.raw_offset)}</code>"
        if block.kind is BlockKind.PRE:
            return "</pre>\n"
        return f"{self._indent()}</{block.kind.tag}>\n"

    def _clear(self) -> str:
        output = []
        while self.state.stack and not self.state.stack[-1].kind.is_template:
            output.append(self._close())
        self.state.list_level = 0
        return "".join(output)

    def open_template(self, kind: BlockKind) -> str:
        """Open a document-template block (``html``, ``head``, ``body``, ``style``)."""
        return self._open(kind)

    def close_innermost(self) -> str:
        """Close the innermost open block."""
        return self._close()

    def drain(self) -> str:
        """Close every open block, deepest first, leaving the stack empty.

        An unclosed raw-HTML region ends with the document, so the closing
        tags are indented by stack depth alone.
        """
        self.state.raw_offset = 0
        output = []
        while self.state.stack:
            output.append(self._close())
        self.state.list_level = 0
        return "".join(output)

    # Classification

    def peek_classification(self, line: str) -> BlockTransition:
        """Classify `line` against the current state without changing it.

        Args:
            line: Input line, including its terminator if any.

        Returns:
            BlockTransition: What `process_line` would do with the line.
        """
        top = self.state.top

        if top is BlockKind.CODE and not line.startswith(CODE_FENCE):
            return BlockTransition(LineKind.CODE, content_start=0)

        raw_start = _raw_html_start(line)
        if raw_start is not None:
            return self._classify_raw(line, raw_start)
        if self.state.raw_offset > 0:
            return BlockTransition(LineKind.RAW, content_start=0)

        if line in ("\n", "\r\n"):
            return BlockTransition(LineKind.BLANK, clear=True)

        if line.startswith(CODE_FENCE):
            if top is BlockKind.CODE:
                return BlockTransition(LineKind.FENCE, close_count=2)
            return BlockTransition(
                LineKind.FENCE, clear=True, opens=(BlockKind.PRE, BlockKind.CODE)
            )

        if line.startswith(BLOCKQUOTE_MARKER):
            if top is BlockKind.BLOCKQUOTE:
                transition = BlockTransition(LineKind.BLOCKQUOTE, content_start=1)
            else:
                transition = BlockTransition(
                    LineKind.BLOCKQUOTE,
                    content_start=1,
                    clear=True,
                    opens=(BlockKind.BLOCKQUOTE,),
                )
            return self._with_attributes(line, transition)

        if line.startswith(HEADING_MARKER):
            level = len(line) - len(line.lstrip(HEADING_MARKER))
            level = min(level, MAX_HEADING_LEVEL)
            transition = BlockTransition(
                LineKind.HEADING,
                content_start=level,
                clear=True,
                opens=(BlockKind.heading(level),),
            )
            return self._with_attributes(line, transition)

        marker = match_list_marker(line)
        if marker is not None:
            return self._with_attributes(line, self._classify_list_item(*marker))

        if top is BlockKind.PARAGRAPH:
            transition = BlockTransition(LineKind.TEXT, content_start=0, list_level=0)
        else:
            transition = BlockTransition(
                LineKind.TEXT,
                content_start=0,
                clear=True,
                opens=(BlockKind.PARAGRAPH,),
                list_level=0,
            )
        return self._with_attributes(line, transition)

    def _classify_raw(self, line: str, start: int) -> BlockTransition:
        # Any `<tag` line deepens the region; `@` passes a single line through.
        offset = self.state.raw_offset
        if line[start] == RAW_LINE_MARKER:
            return BlockTransition(LineKind.RAW, content_start=start + 1, clear=True)
        if line[start + 1 : start + 2] == "/":
            return BlockTransition(
                LineKind.RAW, content_start=start, clear=True, raw_offset=max(offset - 1, 0)
            )
        return BlockTransition(
            LineKind.RAW,
            content_start=start,
            clear=True,
            raw_offset=offset + 1,
            raw_opening=True,
        )

    def _classify_list_item(self, ordered: bool, level: int, content_start: int) -> BlockTransition:
        container = BlockKind.list_container(ordered)

        if self.state.list_level == 0:
            return BlockTransition(
                LineKind.LIST_ITEM,
                content_start=content_start,
                clear=True,
                opens=(container,) * level + (BlockKind.LIST_ITEM,),
                list_level=level,
            )

        kinds = [block.kind for block in self.state.stack]
        containers = sum(1 for kind in kinds if kind.is_list_container)

        if level > containers:
            return BlockTransition(
                LineKind.LIST_ITEM,
                content_start=content_start,
                opens=(container,) * (level - containers) + (BlockKind.LIST_ITEM,),
                list_level=level,
            )

        # One item and its container per level dropped, then the sibling item.
        close_count = 0
        while containers > level:
            if kinds[-1 - close_count].is_list_container:
                containers -= 1
            close_count += 1
        if kinds[-1 - close_count] is BlockKind.LIST_ITEM:
            close_count += 1

        opens: tuple[BlockKind, ...] = (BlockKind.LIST_ITEM,)
        if kinds[-1 - close_count] is not container:
            close_count += 1
            opens = (container, BlockKind.LIST_ITEM)

        return BlockTransition(
            LineKind.LIST_ITEM,
            content_start=content_start,
            close_count=close_count,
            opens=opens,
            list_level=level,
        )

    def _with_attributes(self, line: str, transition: BlockTransition) -> BlockTransition:
        start = transition.content_start
        attributes, content_start = extract_attributes(line, start)

        clear, opens = transition.clear, transition.opens
        if attributes and start == 0 and not clear and not transition.close_count and not opens:
            clear, opens = True, (BlockKind.PARAGRAPH,)
        if not opens:
            attributes = AttributeSet()

        if content_start > 0 and line[content_start : content_start + 1] == " ":
            content_start += 1

        return BlockTransition(
            transition.line_kind,
            content_start=content_start,
            clear=clear,
            close_count=transition.close_count,
            opens=opens,
            attributes=attributes,
            list_level=transition.list_level,
            raw_offset=transition.raw_offset,
            raw_opening=transition.raw_opening,
        )

    # Transitions

    def _apply(self, transition: BlockTransition) -> str:
        output = []
        if transition.clear:
            output.append(self._clear())
        else:
            output.extend(self._close() for _ in range(transition.close_count))

        for position, kind in enumerate(transition.opens):
            is_last = position == len(transition.opens) - 1
            output.append(self._open(kind, transition.attributes if is_last else None))

        if transition.list_level is not None:
            self.state.list_level = transition.list_level
        if transition.raw_offset is not None:
            self.state.raw_offset = transition.raw_offset
        return "".join(output)

    def line_terminator(self, lookahead: str | None) -> str:
        """Decide between a plain newline and a forced ``<br />`` after a content line.

        Args:
            lookahead: The next input line, or None at the end of input.

        Returns:
            str: ``"<br />\\n"`` when the next line continues the current
                paragraph or blockquote, otherwise ``"\\n"``.
        """
        if lookahead is None:
            return "\n"

        upcoming = self.peek_classification(lookahead)
        if upcoming.line_kind is LineKind.RAW:
            return "\n"

        top = self.state.top
        if top is BlockKind.PARAGRAPH and upcoming.content_start == 0:
            return SOFT_BREAK
        if top is BlockKind.BLOCKQUOTE and lookahead.startswith(BLOCKQUOTE_MARKER):
            return SOFT_BREAK
        return "\n"

    def process_line(self, line: str, lookahead: str | None = None) -> str:
        """Process one body line and return the HTML it produces.

        Args:
            line: Input line, including its terminator if any.
            lookahead: The following line, used for the soft line break
                decision; None at the end of input.

        Returns:
            str: Tags closed and opened by the line, followed by its rendered
                content and terminator.
        """
        self.state.line_number += 1
        transition = self.peek_classification(line)
        output = [self._apply(transition)]

        if transition.content_start is None:
            return "".join(output)

        content = strip_line_ending(line[transition.content_start :])

        if transition.line_kind is LineKind.CODE:
            output.append(f"{escape_text(content)}\n")
            return "".join(output)

        if transition.line_kind is LineKind.RAW:
            depth = len(self.state.stack) + self.state.raw_offset
            if transition.raw_opening:
                depth -= 1
            output.append(f"{self._indent(depth)}{content}\n")
            return "".join(output)

        rendered, inline_state = render_inline(content)
        if inline_state.code:
            self._report("unterminated inline code span")

        output.append(f"{self._indent()}{rendered}{self.line_terminator(lookahead)}")
        return "".join(output)

    def _report(self, message: str) -> None:
        diagnostic = Diagnostic(self.state.line_number, message)
        self.diagnostics.append(diagnostic)
        logger.warning("%s", diagnostic)
