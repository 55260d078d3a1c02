"""Configuration loading and management."""

from __future__ import annotations

import codecs
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path


@dataclass
class HtmlConfig:
    """Configuration for converting documents to HTML.

    Attributes:
        indent_chars: Characters written once per nesting level.
        indent_spaces: Number of spaces per nesting level; overrides
            `indent_chars` when set.
        default_title: Page title used when the document has no ``@@`` line.
        embed_styles: Whether stylesheet contents are embedded in ``<style>``
            blocks instead of linked.
        no_overwrite: Whether existing output files are kept by numbering the
            new output file.
        stylesheets: Stylesheets linked or embedded when none are given on the
            command line.
        output_suffix: Extension of the generated HTML file.
        encoding: Text encoding of source, stylesheet and output files.

    Examples:
        HtmlConfig(indent_spaces=2, embed_styles=True)
    """

    # Formatting
    indent_chars: str = "    "
    indent_spaces: int | None = None
    default_title: str = "Untitled"

    # Stylesheets
    embed_styles: bool = False
    stylesheets: list[str] = field(default_factory=list)

    # Files
    no_overwrite: bool = False
    output_suffix: str = ".htm"
    encoding: str = "utf-8"


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Attributes:
        args: Arguments provided to the underlying `ValueError`.

    Examples:
        raise ConfigError("`indent_chars` must not be empty")
    """


# Checked in every directory, nearest directory first.
CONFIG_SOURCES = (
    ("pyproject.toml", ("tool", "markdown-html")),
    (".markdown-html.toml", ("markdown-html",)),
)


def load_config(search_path: Path) -> HtmlConfig:
    """Load configuration from the nearest config file.

    Looks in `search_path` and then each parent directory for a
    ``[tool.markdown-html]`` table in `pyproject.toml` or a ``[markdown-html]``
    table in `.markdown-html.toml`. The first table found wins, even an empty
    one. Files that cannot be read or parsed are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        HtmlConfig: Loaded configuration, or the defaults when no table is found.

    Raises:
        ConfigError: If the table found is not a mapping or contains unknown
            settings.

    Examples:
        load_config(Path("docs"))
    """
    start = search_path.resolve()
    for directory in (start, *start.parents):
        for filename, table_path in CONFIG_SOURCES:
            config_file = directory / filename
            table = _read_table(config_file, table_path)
            if table is not None:
                return normalize_config(_config_from_table(table, config_file, table_path))
    return HtmlConfig()


def _read_table(config_file: Path, table_path: tuple[str, ...]) -> object | None:
    try:
        with open(config_file, "rb") as stream:
            table: object = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for key in table_path:
        if not isinstance(table, dict) or key not in table:
            return None
        table = table[key]
    return table


def _config_from_table(table: object, config_file: Path, table_path: tuple[str, ...]) -> HtmlConfig:
    table_name = ".".join(table_path)
    if not isinstance(table, dict):
        raise ConfigError(f"`[{table_name}]` in {config_file} must be a table")

    unknown = sorted(set(table) - {setting.name for setting in fields(HtmlConfig)})
    if unknown:
        raise ConfigError(
            f"Unknown `[{table_name}]` settings in {config_file}: {', '.join(unknown)}"
        )
    return HtmlConfig(**table)


def normalize_config(config: HtmlConfig) -> HtmlConfig:
    indent_chars = config.indent_chars
    if config.indent_spaces is not None:
        _ensure_integers({"indent_spaces": config.indent_spaces})
        if config.indent_spaces <= 0:
            raise ConfigError("`indent_spaces` must be a positive integer")
        indent_chars = " " * config.indent_spaces

    output_suffix = config.output_suffix
    if isinstance(output_suffix, str) and output_suffix and not output_suffix.startswith("."):
        output_suffix = f".{output_suffix}"

    return replace(config, indent_chars=indent_chars, output_suffix=output_suffix)


def validate_config(config: HtmlConfig) -> None:
    """Validate a `HtmlConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If the indentation is empty or not whitespace, the title or
            suffix is empty, a flag is not a boolean, the stylesheet list holds
            non-strings, or the encoding is unknown.

    Examples:
        validate_config(HtmlConfig(indent_spaces=2))
    """
    config = normalize_config(config)

    if not isinstance(config.indent_chars, str) or not config.indent_chars:
        raise ConfigError("`indent_chars` must not be empty")
    if config.indent_chars.strip():
        raise ConfigError("`indent_chars` must contain only whitespace")
    if not isinstance(config.default_title, str) or not config.default_title:
        raise ConfigError("`default_title` must not be empty")
    if not isinstance(config.output_suffix, str) or config.output_suffix in ("", "."):
        raise ConfigError("`output_suffix` must not be empty")

    _ensure_booleans({"embed_styles": config.embed_styles, "no_overwrite": config.no_overwrite})

    if not isinstance(config.stylesheets, list) or not all(
        isinstance(stylesheet, str) for stylesheet in config.stylesheets
    ):
        raise ConfigError("`stylesheets` must be a list of strings")

    try:
        codecs.lookup(config.encoding)
    except (LookupError, TypeError) as error:
        raise ConfigError(f"`encoding` is not a known text encoding: {config.encoding}") from error


def apply_overrides(config: HtmlConfig, **overrides: object) -> HtmlConfig:
    """Apply override values to a `HtmlConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        HtmlConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `HtmlConfig`.

    Examples:
        updated = apply_overrides(config, default_title="Notes", embed_styles=True)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if "indent_chars" in changes and "indent_spaces" not in changes:
        changes["indent_spaces"] = None
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> HtmlConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        HtmlConfig: Validated configuration ready for conversion.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), embed_styles=True)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_booleans(values: dict[str, object]) -> None:
    for key, value in values.items():
        if not isinstance(value, bool):
            raise ConfigError(f"`{key}` must be a boolean")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
