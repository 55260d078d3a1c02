"""Line-by-line document input with one line of lookahead."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

_EXHAUSTED = object()


class LineSource:
    """Supply document lines one at a time, with a single-line peek buffer.

    Lines keep their terminators. Any iterable of strings works as input,
    including an open text file, so lines are never truncated.

    Examples:
        source = LineSource.from_text("first\\nsecond\\n")
        source.peek_line()  # "first\\n"
        source.next_line()  # "first\\n"
        source.line_number  # 1
    """

    def __init__(self, lines: Iterable[str]):
        self._lines = iter(lines)
        self._pending: object = None
        self._has_pending = False
        self.line_number = 0

    @classmethod
    def from_text(cls, text: str) -> LineSource:
        # Split on LF only, the way a text file is iterated.
        parts = text.split("\n")
        lines = [f"{part}\n" for part in parts[:-1]]
        if parts[-1]:
            lines.append(parts[-1])
        return cls(lines)

    def _pull(self) -> object:
        if self._has_pending:
            self._has_pending = False
            return self._pending
        return next(self._lines, _EXHAUSTED)

    def next_line(self) -> str | None:
        """Consume and return the next line, or None at the end of input."""
        line = self._pull()
        if line is _EXHAUSTED:
            # Keep reporting the end without touching the underlying iterator.
            self._pending = _EXHAUSTED
            self._has_pending = True
            return None
        self.line_number += 1
        return line

    def peek_line(self) -> str | None:
        """Return the next line without consuming it, or None at the end of input."""
        line = self._pull()
        self._pending = line
        self._has_pending = True
        return None if line is _EXHAUSTED else line

    def __iter__(self) -> Iterator[str]:
        while (line := self.next_line()) is not None:
            yield line
