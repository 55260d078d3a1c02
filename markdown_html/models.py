"""Data models for markdown-html."""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from enum import Enum, auto


class BlockKind(Enum):
    """Block-level containers tracked by the block stack.

    The value of each member is the HTML tag it renders as. ``HTML``, ``HEAD``,
    ``BODY`` and ``STYLE`` are document-template containers; all other kinds
    are content blocks produced by Markdown markers.
    """

    PARAGRAPH = "p"
    BLOCKQUOTE = "blockquote"
    CODE = "code"
    PRE = "pre"
    UNORDERED_LIST = "ul"
    ORDERED_LIST = "ol"
    LIST_ITEM = "li"
    HEADING_1 = "h1"
    HEADING_2 = "h2"
    HEADING_3 = "h3"
    HEADING_4 = "h4"
    HEADING_5 = "h5"
    HEADING_6 = "h6"
    HTML = "html"
    HEAD = "head"
    BODY = "body"
    STYLE = "style"

    @property
    def tag(self) -> str:
        return self.value

    @property
    def is_template(self) -> bool:
        return self in _TEMPLATE_KINDS

    @property
    def is_list_container(self) -> bool:
        return self in (BlockKind.UNORDERED_LIST, BlockKind.ORDERED_LIST)

    @classmethod
    def heading(cls, level: int) -> BlockKind:
        """Return the heading kind for ``level``, clamped to 1..6.

        Examples:
            BlockKind.heading(2)  # BlockKind.HEADING_2
            BlockKind.heading(9)  # BlockKind.HEADING_6
        """
        level = min(max(level, 1), 6)
        return cls(f"h{level}")

    @classmethod
    def list_container(cls, ordered: bool) -> BlockKind:
        return cls.ORDERED_LIST if ordered else cls.UNORDERED_LIST


_TEMPLATE_KINDS = frozenset({BlockKind.HTML, BlockKind.HEAD, BlockKind.BODY, BlockKind.STYLE})


@dataclass(frozen=True)
class AttributeSet:
    """Attributes attached to a block when it is opened.

    Attributes:
        id: Value of the ``id`` attribute, from an ``^id^`` token.
        class_name: Value of the ``class`` attribute, from a ``$class$`` token.
        style: Inline CSS declarations, from a ``{style}`` token.
    """

    id: str | None = None
    class_name: str | None = None
    style: str | None = None

    def __bool__(self) -> bool:
        return any(value is not None for value in (self.id, self.class_name, self.style))

    def render(self) -> str:
        """Render the attributes as they appear inside an opening tag.

        Returns:
            str: Attribute text with a leading space per attribute, or an empty
                string when no attribute is set.

        Examples:
            AttributeSet(id="intro", class_name="lead").render()
            # ' id="intro" class="lead"'
        """
        parts = []
        for name, value in (("id", self.id), ("class", self.class_name), ("style", self.style)):
            if value is not None:
                parts.append(f' {name}="{html.escape(value)}"')
        return "".join(parts)


@dataclass(frozen=True)
class OpenBlock:
    """One entry of the block stack."""

    kind: BlockKind
    attributes: AttributeSet = field(default_factory=AttributeSet)


@dataclass
class ParserState:
    """Mutable state of one conversion, owned by a single block stack machine.

    Attributes:
        stack: Open blocks, innermost last.
        list_level: Nesting level of the most recent list line, 0 when no list
            is open.
        raw_offset: Open raw-HTML tags being passed through; only used to
            correct indentation.
        line_number: One-based number of the line being processed.
    """

    stack: list[OpenBlock] = field(default_factory=list)
    list_level: int = 0
    raw_offset: int = 0
    line_number: int = 0

    @property
    def top(self) -> BlockKind | None:
        return self.stack[-1].kind if self.stack else None


class LineKind(Enum):
    """Classification of a single input line."""

    BLANK = auto()
    RAW = auto()
    CODE = auto()
    FENCE = auto()
    BLOCKQUOTE = auto()
    HEADING = auto()
    LIST_ITEM = auto()
    TEXT = auto()


@dataclass(frozen=True)
class BlockTransition:
    """What processing a line does to the block stack.

    Produced without side effects by the block stack machine, then applied.

    Attributes:
        line_kind: How the line was classified.
        content_start: Offset where rendered content starts, or None when the
            line renders no content.
        clear: Close every content block down to the template base and reset
            the list level.
        close_count: Number of innermost blocks to close (ignored when `clear`).
        opens: Block kinds to open, outermost first.
        attributes: Attributes for the last block in `opens`.
        list_level: New list nesting level, or None to keep the current one.
        raw_offset: New raw-HTML offset, or None to keep the current one.
        raw_opening: Whether the line opens a raw-HTML region.
    """

    line_kind: LineKind
    content_start: int | None = None
    clear: bool = False
    close_count: int = 0
    opens: tuple[BlockKind, ...] = ()
    attributes: AttributeSet = field(default_factory=AttributeSet)
    list_level: int | None = None
    raw_offset: int | None = None
    raw_opening: bool = False


class SpanKind(Enum):
    """Inline spans that may be open while rendering a line."""

    BOLD = auto()
    ITALIC = auto()
    BOLD_ITALIC = auto()
    STRIKETHROUGH = auto()
    CUSTOM = auto()


@dataclass
class InlineRenderState:
    """Inline spans open during one inline-render call.

    Attributes:
        open_spans: Spans currently open, innermost last.
        code: Whether an inline code span is open.
    """

    open_spans: list[SpanKind] = field(default_factory=list)
    code: bool = False

    @property
    def bold(self) -> bool:
        return SpanKind.BOLD in self.open_spans

    @property
    def italic(self) -> bool:
        return SpanKind.ITALIC in self.open_spans

    @property
    def bold_italic(self) -> bool:
        return SpanKind.BOLD_ITALIC in self.open_spans

    @property
    def strikethrough(self) -> bool:
        return SpanKind.STRIKETHROUGH in self.open_spans

    @property
    def custom_spans(self) -> int:
        return self.open_spans.count(SpanKind.CUSTOM)


@dataclass(frozen=True)
class Diagnostic:
    """Non-fatal problem found while converting a document."""

    line_number: int
    message: str

    def __str__(self) -> str:
        return f"Line {self.line_number}: {self.message}"


@dataclass
class ConversionResult:
    """Outcome of converting one document.

    Attributes:
        diagnostics: Non-fatal problems found during conversion.
        stylesheets: Stylesheets actually linked or embedded, in output order.
    """

    diagnostics: list[Diagnostic] = field(default_factory=list)
    stylesheets: list[str] = field(default_factory=list)
