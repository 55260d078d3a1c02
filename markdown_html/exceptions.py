"""Package-specific exception types."""

from __future__ import annotations


class ConversionError(ValueError):
    """Base class for conversion-related errors.

    Represents errors encountered while turning a document into HTML.
    """


class HeadBlockError(ConversionError):
    """Raised when a ``@$`` head-injection block is never closed by ``$@``.

    Args:
        line_number: One-based index of the line that opened the block.
    """

    def __init__(self, line_number: int):
        self.line_number = line_number
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return (
            f"Head block opened at line {self.line_number} "
            "is not closed by a `$@` line"
        )
