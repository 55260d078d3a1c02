"""Whole-document conversion: skeleton, head section and body."""

from __future__ import annotations

import html
import logging
from collections.abc import Iterable
from io import StringIO
from pathlib import Path
from typing import TextIO

from .blocks import BlockStackMachine, strip_line_ending
from .config import ConfigError, HtmlConfig, normalize_config, validate_config
from .constants import DOCTYPE, HEAD_BLOCK_END, HEAD_BLOCK_START, STYLESHEET_LINK, TITLE_PREFIX
from .exceptions import ConversionError, HeadBlockError
from .filesystem import safe_read, write_output
from .models import BlockKind, ConversionResult, Diagnostic
from .source import LineSource

logger = logging.getLogger(__name__)


def _read_title(source: LineSource, default_title: str) -> str:
    line = source.peek_line()
    if line is None or not line.startswith(TITLE_PREFIX):
        return default_title
    source.next_line()
    return strip_line_ending(line[len(TITLE_PREFIX) :])


def _write_stylesheets(
    machine: BlockStackMachine,
    sink: TextIO,
    stylesheets: Iterable[str],
    config: HtmlConfig,
) -> list[str]:
    written = []
    for stylesheet in stylesheets:
        if not config.embed_styles:
            sink.write(machine.indent_text(STYLESHEET_LINK.format(href=html.escape(stylesheet))))
            logger.info("Linked to stylesheet located at %s", stylesheet)
            written.append(stylesheet)
            continue

        try:
            with safe_read(Path(stylesheet), config.encoding) as handle:
                lines = handle.readlines()
        except (IOError, UnicodeDecodeError) as error:
            diagnostic = Diagnostic(0, f"Stylesheet {stylesheet} was not embedded: {error}")
            machine.diagnostics.append(diagnostic)
            logger.warning("%s", diagnostic)
            continue

        sink.write(machine.open_template(BlockKind.STYLE))
        for line in lines:
            sink.write(machine.indent_text(strip_line_ending(line)))
        sink.write(machine.close_innermost())
        logger.info("Embedded stylesheet %s", stylesheet)
        written.append(stylesheet)
    return written


def _write_head_block(machine: BlockStackMachine, sink: TextIO, source: LineSource) -> None:
    line = source.peek_line()
    if line is None or strip_line_ending(line) != HEAD_BLOCK_START:
        return

    source.next_line()
    opened_at = source.line_number
    while True:
        line = source.next_line()
        if line is None:
            raise HeadBlockError(opened_at)
        if strip_line_ending(line) == HEAD_BLOCK_END:
            return
        sink.write(machine.indent_text(strip_line_ending(line)))


def convert(
    source: Iterable[str],
    sink: TextIO,
    config: HtmlConfig | None = None,
    stylesheets: Iterable[str] | None = None,
) -> ConversionResult:
    """Convert a document into a complete HTML page.

    Reads an optional ``@@ title`` first line and an optional ``@$`` ... ``$@``
    head block, then renders every remaining line as the page body.

    Args:
        source: Document lines, including their terminators (an open text file
            works).
        sink: Writable text stream receiving the HTML.
        config: Conversion settings. Defaults to a new `HtmlConfig` when omitted.
        stylesheets: Stylesheets to link or embed; defaults to
            ``config.stylesheets``.

    Returns:
        ConversionResult: Diagnostics found during conversion and the
            stylesheets actually linked or embedded.

    Raises:
        ConfigError: If the configuration fails validation.
        HeadBlockError: If a ``@$`` head block is never closed.

    Examples:
        with open("notes.md") as src, open("notes.htm", "w") as dst:
            convert(src, dst, HtmlConfig(), ["style.css"])
    """
    config = normalize_config(config or HtmlConfig())
    validate_config(config)
    if stylesheets is None:
        stylesheets = config.stylesheets

    lines = source if isinstance(source, LineSource) else LineSource(source)
    machine = BlockStackMachine(config)

    sink.write(DOCTYPE)
    sink.write(machine.open_template(BlockKind.HTML))
    sink.write(machine.open_template(BlockKind.HEAD))

    title = _read_title(lines, config.default_title)
    sink.write(machine.indent_text(f"<title>{html.escape(title, quote=False)}</title>"))
    written = _write_stylesheets(machine, sink, stylesheets, config)
    _write_head_block(machine, sink, lines)

    sink.write(machine.close_innermost())
    sink.write(machine.open_template(BlockKind.BODY))

    machine.state.line_number = lines.line_number
    for line in lines:
        sink.write(machine.process_line(line, lines.peek_line()))

    sink.write(machine.drain())
    return ConversionResult(machine.diagnostics, written)


def render_html(
    text: str, config: HtmlConfig | None = None, stylesheets: Iterable[str] | None = None
) -> str:
    """Convert document text into an HTML page held in memory.

    Examples:
        render_html("@@ Notes\\n# Hello\\n")
    """
    buffer = StringIO()
    convert(LineSource.from_text(text), buffer, config, stylesheets)
    return buffer.getvalue()


class ConvertFileError(Exception):
    """Raised when converting a document file fails."""


def convert_file(
    source_path: Path,
    output_path: Path | None,
    config: HtmlConfig | None = None,
    stylesheets: Iterable[str] | None = None,
) -> tuple[str, ConversionResult]:
    """Convert a document file, writing the page to `output_path`.

    Args:
        source_path: Path to the document.
        output_path: Destination file; when None nothing is written.
        config: Conversion settings; defaults to a new `HtmlConfig`.
        stylesheets: Stylesheets to link or embed; defaults to
            ``config.stylesheets``.

    Returns:
        tuple[str, ConversionResult]: Rendered HTML and the conversion result.

    Raises:
        ConvertFileError: If the configuration is invalid, the document cannot
            be read or decoded, its head block is malformed, or the output
            cannot be written.

    Examples:
        page, result = convert_file(Path("notes.md"), Path("notes.htm"))
    """
    config = config or HtmlConfig()
    try:
        validate_config(config)
    except ConfigError as error:
        raise ConvertFileError(str(error)) from error

    buffer = StringIO()
    try:
        with safe_read(source_path, config.encoding) as handle:
            result = convert(handle, buffer, config, stylesheets)
    except UnicodeDecodeError as error:
        error_message = f"Invalid {config.encoding} sequence in {source_path}: {error}"
        raise ConvertFileError(error_message) from error
    except IOError as error:
        raise ConvertFileError(str(error)) from error
    except ConversionError as error:
        raise ConvertFileError(f"{source_path}: {error}") from error

    page = buffer.getvalue()
    if output_path is not None:
        try:
            write_output(output_path, page, config.encoding)
        except IOError as error:
            raise ConvertFileError(str(error)) from error
    return page, result
