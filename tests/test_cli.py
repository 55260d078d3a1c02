from __future__ import annotations

import textwrap
from pathlib import Path

from markdown_html.cli import cli


def _write(tmp_path: Path, filename: str, content: str) -> Path:
    path = tmp_path / filename
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_cli_writes_page_next_to_source(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(
        tmp_path,
        "notes.md",
        """
        @@ Notes
        # Introduction
        Hello
        """,
    )

    result = cli_runner.invoke(cli, [str(source)])

    assert result.exit_code == 0
    assert result.output == ""
    page = (tmp_path / "notes.htm").read_text(encoding="utf-8")
    assert page.startswith("<!DOCTYPE html>\n")
    assert "<title>Notes</title>" in page


def test_cli_stdout_does_not_write_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(tmp_path, "notes.md", "# Hi\n")

    result = cli_runner.invoke(cli, ["-o", str(source)])

    assert result.exit_code == 0
    assert result.stdout.startswith("<!DOCTYPE html>\n")
    assert result.stdout.endswith("</html>\n")
    assert not (tmp_path / "notes.htm").exists()


def test_cli_no_overwrite_numbers_output(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(tmp_path, "notes.md", "text\n")
    existing = tmp_path / "notes.htm"
    existing.write_text("keep me", encoding="utf-8")

    first = cli_runner.invoke(cli, ["-n", str(source)])
    second = cli_runner.invoke(cli, ["--no-overwrite", str(source)])

    assert first.exit_code == 0
    assert second.exit_code == 0
    assert existing.read_text(encoding="utf-8") == "keep me"
    assert (tmp_path / "notes_1.htm").exists()
    assert (tmp_path / "notes_2.htm").exists()


def test_cli_overwrites_by_default(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(tmp_path, "notes.md", "text\n")
    existing = tmp_path / "notes.htm"
    existing.write_text("old", encoding="utf-8")

    result = cli_runner.invoke(cli, [str(source)])

    assert result.exit_code == 0
    assert "<p>" in existing.read_text(encoding="utf-8")
    assert not (tmp_path / "notes_1.htm").exists()


def test_cli_links_stylesheets(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(tmp_path, "notes.md", "text\n")

    result = cli_runner.invoke(cli, ["-o", str(source), "base.css", "print.css"])

    assert result.exit_code == 0
    assert 'href="base.css"' in result.stdout
    assert result.stdout.index("base.css") < result.stdout.index("print.css")


def test_cli_embeds_stylesheets(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(tmp_path, "notes.md", "text\n")
    _write(tmp_path, "style.css", "p { margin: 0; }\n")

    result = cli_runner.invoke(cli, ["-e", "-o", str(source), "style.css"])

    assert result.exit_code == 0
    assert "<style>" in result.stdout
    assert "p { margin: 0; }" in result.stdout
    assert "<link" not in result.stdout


def test_cli_verbose_reports_output_and_warnings(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(tmp_path, "notes.md", "see `open\n")

    result = cli_runner.invoke(cli, ["-v", str(source), "style.css"])

    assert result.exit_code == 0
    assert "Writing to file" in result.output
    assert "notes.htm" in result.output
    assert "Linking to stylesheets" in result.output
    assert 'Linked to stylesheet located at "style.css"' in result.output
    assert "Warning: Line 1: unterminated inline code span" in result.output


def test_cli_missing_embedded_stylesheet_is_not_fatal(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(tmp_path, "notes.md", "text\n")

    result = cli_runner.invoke(cli, ["-e", "-v", str(source), "missing.css"])

    assert result.exit_code == 0
    assert "Warning: Line 0: Stylesheet missing.css was not embedded" in result.output
    assert 'Embedded "missing.css"' not in result.output
    assert (tmp_path / "notes.htm").exists()


def test_cli_verbose_lists_only_embedded_stylesheets(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(tmp_path, "notes.md", "text\n")
    _write(tmp_path, "style.css", "p { margin: 0; }\n")

    result = cli_runner.invoke(cli, ["-e", "-v", str(source), "missing.css", "style.css"])

    assert result.exit_code == 0
    assert 'Embedded "style.css"' in result.output
    assert 'Embedded "missing.css"' not in result.output


def test_cli_title_option(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(tmp_path, "notes.md", "text\n")

    result = cli_runner.invoke(cli, ["-o", "--title", "Fallback", str(source)])

    assert result.exit_code == 0
    assert "<title>Fallback</title>" in result.stdout


def test_cli_reads_pyproject_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.markdown-html]
        default_title = "From Config"
        indent_spaces = 2
        stylesheets = ["site.css"]
        """,
    )
    source = _write(tmp_path, "notes.md", "text\n")

    result = cli_runner.invoke(cli, ["-o", str(source)])

    assert result.exit_code == 0
    assert "  <head>\n    <title>From Config</title>\n" in result.stdout
    assert 'href="site.css"' in result.stdout


def test_cli_arguments_override_config_stylesheets(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.markdown-html]
        stylesheets = ["site.css"]
        """,
    )
    source = _write(tmp_path, "notes.md", "text\n")

    result = cli_runner.invoke(cli, ["-o", str(source), "other.css"])

    assert result.exit_code == 0
    assert 'href="other.css"' in result.stdout
    assert "site.css" not in result.stdout


def test_cli_config_suffix(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write(
        tmp_path,
        ".markdown-html.toml",
        """
        [markdown-html]
        output_suffix = "html"
        """,
    )
    source = _write(tmp_path, "notes.md", "text\n")

    result = cli_runner.invoke(cli, [str(source)])

    assert result.exit_code == 0
    assert (tmp_path / "notes.html").exists()


def test_cli_rejects_invalid_indent(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(tmp_path, "notes.md", "text\n")

    result = cli_runner.invoke(cli, ["--indent-spaces", "0", str(source)])

    assert result.exit_code == 2
    assert "indent_spaces" in result.output


def test_cli_rejects_unknown_encoding(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(tmp_path, "notes.md", "text\n")

    result = cli_runner.invoke(cli, ["--encoding", "no-such-codec", str(source)])

    assert result.exit_code == 2
    assert "encoding" in result.output


def test_cli_reports_unclosed_head_block(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(
        tmp_path,
        "notes.md",
        """
        @$
        <meta charset="utf-8">
        """,
    )

    result = cli_runner.invoke(cli, [str(source)])

    assert result.exit_code == 1
    assert "not closed" in result.output
    assert not (tmp_path / "notes.htm").exists()


def test_cli_missing_source(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, [str(tmp_path / "missing.md")])

    assert result.exit_code == 2


def test_cli_rejects_directory_source(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, [str(tmp_path)])

    assert result.exit_code == 2
