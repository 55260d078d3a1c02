"""
markdown-html: convert Markdown-like documents into HTML pages.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    markdown-html notes.md style.css

Library Usage:
    from markdown_html import render_html

    page = render_html("@@ Notes\\n# Hello\\n\\nSome **bold** text.\\n")
"""

import logging

from .blocks import BlockStackMachine
from .config import ConfigError, HtmlConfig
from .document import ConvertFileError, convert, convert_file, render_html
from .exceptions import ConversionError, HeadBlockError
from .inline import escape_text, render_inline
from .models import (
    AttributeSet,
    BlockKind,
    BlockTransition,
    ConversionResult,
    Diagnostic,
    LineKind,
)
from .source import LineSource

__version__ = "0.1.0"

# Applications decide where diagnostics go; the CLI reports them itself.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core functionality
    "render_html",
    "convert",
    "convert_file",
    "BlockStackMachine",
    "render_inline",
    "LineSource",
    # Data models
    "AttributeSet",
    "BlockKind",
    "BlockTransition",
    "ConversionResult",
    "Diagnostic",
    "LineKind",
    "HtmlConfig",
    # Utilities
    "escape_text",
    # Exceptions
    "ConfigError",
    "ConversionError",
    "ConvertFileError",
    "HeadBlockError",
    # Version
    "__version__",
]
