"""Block attribute tokens (``^id^``, ``$class$``, ``{style}``)."""

from __future__ import annotations

from .models import AttributeSet


def _match_token(line: str, start: int, opener: str, closer: str) -> tuple[str, int] | None:
    """Match a delimited token beginning exactly at `start`.

    Args:
        line: Line being scanned.
        start: Offset where the opening delimiter must be.
        opener: Opening delimiter character.
        closer: Closing delimiter character.

    Returns:
        tuple[str, int] | None: Token text and the offset just past the closing
            delimiter, or None when the token is absent or unterminated.

    Examples:
        _match_token("^intro^ text", 0, "^", "^")  # ("intro", 7)
        _match_token("{color: red", 0, "{", "}")  # None
    """
    if line[start : start + 1] != opener:
        return None
    end = line.find(closer, start + 1)
    if end == -1:
        return None
    return line[start + 1 : end], end + 1


def extract_attributes(line: str, start: int) -> tuple[AttributeSet, int]:
    """Read the attribute tokens that follow a block marker.

    Recognizes, in this order and at most once each, ``^id^``, ``$class$`` and
    ``{style}``, each one starting where the previous one ended. A ``$name$``
    immediately followed by ``[`` is an inline custom span, not a class token.

    Args:
        line: Full input line.
        start: Offset where content starts after the block marker.

    Returns:
        tuple[AttributeSet, int]: Attributes found and the offset just past the
            last token (`start` when there is none).

    Examples:
        extract_attributes("#^top^$big$ Title\\n", 1)
        # (AttributeSet(id="top", class_name="big"), 11)
    """
    attribute_id = class_name = style = None

    token = _match_token(line, start, "^", "^")
    if token is not None:
        attribute_id, start = token

    token = _match_token(line, start, "$", "$")
    if token is not None and line[token[1] : token[1] + 1] != "[":
        class_name, start = token

    token = _match_token(line, start, "{", "}")
    if token is not None:
        style, start = token

    return AttributeSet(id=attribute_id, class_name=class_name, style=style), start
