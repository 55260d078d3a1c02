"""
Converts a Markdown-like document into an HTML page.
The page is written next to the source file (``notes.md`` becomes
``notes.htm``) or, with ``--stdout``, printed to standard output.
"""

from __future__ import annotations

from pathlib import Path

import click
from .config import ConfigError, build_config
from .document import ConvertFileError, convert_file
from .filesystem import resolve_output_path

__all__ = ["cli"]


@click.command()
@click.version_option(package_name="markdown-html")
@click.option("-e", "--embed-styles", is_flag=True, help="Embed stylesheets instead of linking them")
@click.option("-n", "--no-overwrite", is_flag=True, help="Never overwrite an existing output file")
@click.option("-o", "--stdout", "to_stdout", is_flag=True, help="Write the page to standard output")
@click.option("-v", "--verbose", is_flag=True, help="Report files written and problems found")
@click.option("--title", help="Page title when the document has no @@ line")
@click.option("--indent-spaces", type=int, help="Spaces per nesting level")
@click.option("--encoding", help="Text encoding of input and output files")
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.argument("stylesheets", nargs=-1)
def cli(
    source: str,
    stylesheets: tuple[str, ...] = (),
    embed_styles: bool = False,
    no_overwrite: bool = False,
    to_stdout: bool = False,
    verbose: bool = False,
    title: str | None = None,
    indent_spaces: int | None = None,
    encoding: str | None = None,
):
    """
    Entry point for converting a document into an HTML page.

    Args:
        source: Path to the document to convert.
        stylesheets: Stylesheets to link (or embed with `embed_styles`).
        embed_styles: Copy stylesheet contents into the page.
        no_overwrite: Number the output file instead of replacing one.
        to_stdout: Print the page instead of writing a file.
        verbose: Report the output file, stylesheets and diagnostics on stderr.
        title: Fallback page title.
        indent_spaces: Spaces per nesting level.
        encoding: Text encoding of input and output files.

    Returns:
        None.

    Raises:
        click.BadParameter: If configuration values are invalid.
        click.ClickException: If the document cannot be read, converted, or
            written.

    Examples:
        markdown-html -e notes.md style.css
    """
    source_path = Path(source).resolve()
    try:
        config = build_config(
            source_path.parent,
            default_title=title,
            indent_spaces=indent_spaces,
            encoding=encoding,
            embed_styles=True if embed_styles else None,
            no_overwrite=True if no_overwrite else None,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    selected_stylesheets = list(stylesheets) or config.stylesheets

    output_path = None
    if not to_stdout:
        output_path = resolve_output_path(
            source_path, config.output_suffix, no_overwrite=config.no_overwrite
        )
        if verbose:
            mode = "Embedding stylesheets" if config.embed_styles else "Linking to stylesheets"
            click.echo(f'Writing to file "{output_path}" ({mode})', err=True)

    try:
        page, result = convert_file(source_path, output_path, config, selected_stylesheets)
    except ConvertFileError as error:
        raise click.ClickException(str(error)) from error

    if verbose:
        for stylesheet in result.stylesheets:
            action = "Embedded" if config.embed_styles else "Linked to stylesheet located at"
            click.echo(f'{action} "{stylesheet}"', err=True)
        for diagnostic in result.diagnostics:
            click.echo(f"Warning: {diagnostic}", err=True)

    if to_stdout:
        click.echo(page, nl=False)


if __name__ == "__main__":
    cli()
