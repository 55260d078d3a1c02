"""Filesystem helpers for markdown-html."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import TextIO


def safe_read(filepath: Path, encoding: str = "utf-8") -> TextIO:
    """Open a file for reading with consistent error handling.

    Args:
        filepath: Path to the file.
        encoding: Text encoding of the file.

    Returns:
        TextIO: File handle opened for reading.

    Raises:
        IOError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_read(Path("notes.md")) as handle:
            first_line = handle.readline()
    """
    try:
        return open(filepath, "r", encoding=encoding)
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


def resolve_output_path(source: Path, suffix: str = ".htm", no_overwrite: bool = False) -> Path:
    """Derive the HTML output path for a source document.

    The source extension is replaced by `suffix`. With `no_overwrite`, an
    existing file is kept and the first free name of the form
    ``name_1.htm``, ``name_2.htm``, ... is returned instead.

    Args:
        source: Path to the source document.
        suffix: Extension of the output file, including the dot.
        no_overwrite: Whether existing files must be preserved.

    Returns:
        Path: Output file path next to the source document.

    Examples:
        resolve_output_path(Path("docs/notes.md"))  # Path("docs/notes.htm")
        resolve_output_path(Path("notes.md"), no_overwrite=True)  # Path("notes_1.htm") if taken
    """
    candidate = source.with_suffix(suffix)
    if not no_overwrite:
        return candidate

    modifier = 0
    while candidate.exists():
        modifier += 1
        candidate = source.with_name(f"{source.stem}_{modifier}{suffix}")
    return candidate


def write_output(filepath: Path, text: str, encoding: str = "utf-8") -> None:
    """Write `text` to `filepath` atomically.

    Args:
        filepath: Destination file.
        text: Content to write.
        encoding: Text encoding of the written file.

    Returns:
        None.

    Raises:
        IOError: If the destination directory is not writable or the file
            cannot be replaced.

    Examples:
        write_output(Path("notes.htm"), page)
    """
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding=encoding, delete=False, dir=filepath.parent, suffix=".tmp"
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(text)

            # Ensure the temporary file is flushed and synced before the swap
            tmp_file.flush()
            os.fsync(tmp_file.fileno())

        # Replace the destination with the temporary file (atomic operation)
        os.replace(temp_path, filepath)
        temp_path = None
    except OSError as error:
        error_message = f"Error writing {filepath}: {error}"
        raise IOError(error_message) from error
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
