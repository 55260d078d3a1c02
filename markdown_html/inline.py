"""Inline span rendering for the content of a single line."""

from __future__ import annotations

import html

from .constants import (
    BOLD_ITALIC_OPEN,
    BOLD_OPEN,
    EM_SPACE,
    ESCAPED_CHARACTERS,
    INLINE_CODE_CLOSE,
    INLINE_CODE_OPEN,
    ITALIC_OPEN,
    SPAN_CLOSE,
    STRIKETHROUGH_OPEN,
)
from .models import InlineRenderState, SpanKind

_SPAN_OPENINGS = {
    SpanKind.BOLD: BOLD_OPEN,
    SpanKind.ITALIC: ITALIC_OPEN,
    SpanKind.BOLD_ITALIC: BOLD_ITALIC_OPEN,
    SpanKind.STRIKETHROUGH: STRIKETHROUGH_OPEN,
}


def escape_text(text: str) -> str:
    """Escape ``<``, ``>`` and ``&`` for use as HTML text.

    Examples:
        escape_text("a < b & c")  # "a &lt; b &amp; c"
    """
    return html.escape(text, quote=False)


def _escape_character(character: str) -> str:
    return ESCAPED_CHARACTERS.get(character, character)


def find_link(text: str, start: int) -> tuple[str, str, int] | None:
    """Match a ``[name](url)`` link beginning at `start`.

    Args:
        text: Text to scan.
        start: Offset of the opening ``[``.

    Returns:
        tuple[str, str, int] | None: Link name, URL, and the offset just past
            the closing ``)``; None when the text is not a link or the URL is
            empty.

    Examples:
        find_link("see [docs](http://x) now", 4)  # ("docs", "http://x", 20)
        find_link("[docs]()", 0)  # None
    """
    if text[start : start + 1] != "[":
        return None
    name_end = text.find("](", start + 1)
    if name_end == -1:
        return None
    url_end = text.find(")", name_end + 2)
    if url_end == -1:
        return None
    url = text[name_end + 2 : url_end]
    if not url:
        return None
    return text[start + 1 : name_end], url, url_end + 1


def find_custom_span(text: str, start: int) -> tuple[str, int] | None:
    """Match a ``$name$[`` custom span opening beginning at `start`.

    The opening is only accepted when the rest of the text closes at least as
    many brackets as it opens, counting the ``[`` of the opening itself and
    ignoring brackets preceded by a backslash.

    Args:
        text: Text to scan.
        start: Offset of the first ``$``.

    Returns:
        tuple[str, int] | None: Span name and the offset just past the ``[``,
            or None when no well-formed span opens here.

    Examples:
        find_custom_span("$note$[careful]", 0)  # ("note", 7)
        find_custom_span("$note$[careful", 0)  # None
    """
    if text[start : start + 1] != "$":
        return None
    name_end = text.find("$", start + 1)
    if name_end == -1 or text[name_end + 1 : name_end + 2] != "[":
        return None

    opened, closed = 1, 0
    for position in range(name_end + 2, len(text)):
        if text[position - 1] == "\\":
            continue
        if text[position] == "[":
            opened += 1
        elif text[position] == "]":
            closed += 1
    if closed < opened:
        return None
    return text[start + 1 : name_end], name_end + 2


def _custom_span_opening(name: str) -> str:
    if not name:
        return "<span>"
    if name.startswith("^"):
        return f'<span style="{html.escape(name[1:])}">'
    return f'<span class="{html.escape(name)}">'


def _image(name: str, url: str) -> str:
    details = ""
    if name:
        escaped_name = html.escape(name)
        details = f' title="{escaped_name}" alt="{escaped_name}"'
    return f'<img src="{html.escape(url)}"{details} />'


def _toggle(state: InlineRenderState, kind: SpanKind, output: list[str]) -> None:
    if kind in state.open_spans:
        # Drop the most recent occurrence; every span closes with the same tag.
        last = len(state.open_spans) - 1 - state.open_spans[::-1].index(kind)
        del state.open_spans[last]
        output.append(SPAN_CLOSE)
    else:
        state.open_spans.append(kind)
        output.append(_SPAN_OPENINGS[kind])


def render_inline(text: str) -> tuple[str, InlineRenderState]:
    """Render inline markup in the content of one line.

    Spans still open at the end of `text` are closed, innermost first. An
    inline code span left open is not closed; the returned state reports it
    with ``code`` set.

    Args:
        text: Line content without its block marker or line terminator.

    Returns:
        tuple[str, InlineRenderState]: Rendered HTML and the final inline state.

    Examples:
        render_inline("**bold** and `x < y`")[0]
        # '<span class="span-bold" style="font-weight: bold">bold</span> and '
        # '<code class="code-inline">x &lt; y</code>'
    """
    state = InlineRenderState()
    output: list[str] = []
    length = len(text)
    i = 0

    while i < length:
        character = text[i]

        if state.code:
            if character == "`":
                output.append(INLINE_CODE_CLOSE)
                state.code = False
            else:
                output.append(_escape_character(character))
            i += 1
            continue

        if character == "\\":
            if i + 1 < length:
                output.append(_escape_character(text[i + 1]))
                i += 2
            else:
                output.append(character)
                i += 1
            continue

        if text.startswith("    ", i):
            output.append(EM_SPACE)
            i += 4
            continue

        if character == "`":
            output.append(INLINE_CODE_OPEN)
            state.code = True
            i += 1
            continue

        if text.startswith("_**", i) and not state.bold_italic:
            _toggle(state, SpanKind.BOLD_ITALIC, output)
            i += 3
            continue

        if text.startswith("**_", i) and state.bold_italic:
            _toggle(state, SpanKind.BOLD_ITALIC, output)
            i += 3
            continue

        if text.startswith("**", i):
            _toggle(state, SpanKind.BOLD, output)
            i += 2
            continue

        if character == "*":
            _toggle(state, SpanKind.ITALIC, output)
            i += 1
            continue

        if text.startswith("~~", i):
            _toggle(state, SpanKind.STRIKETHROUGH, output)
            i += 2
            continue

        if character == "]" and state.custom_spans:
            last = len(state.open_spans) - 1 - state.open_spans[::-1].index(SpanKind.CUSTOM)
            del state.open_spans[last]
            output.append(SPAN_CLOSE)
            i += 1
            continue

        if character == "$":
            span = find_custom_span(text, i)
            if span is not None:
                name, i = span
                state.open_spans.append(SpanKind.CUSTOM)
                output.append(_custom_span_opening(name))
                continue

        if character == "!":
            link = find_link(text, i + 1)
            if link is not None:
                name, url, i = link
                output.append(_image(name, url))
                continue

        if character == "[":
            link = find_link(text, i)
            if link is not None:
                name, url, i = link
                output.append(f'<a href="{html.escape(url)}">{escape_text(name)}</a>')
                continue

        output.append(_escape_character(character))
        i += 1

    output.extend(SPAN_CLOSE for _ in state.open_spans)
    state.open_spans.clear()
    return "".join(output), state
