from __future__ import annotations

import copy
import html
import re
import string

from hypothesis import given
from hypothesis import strategies as st

from markdown_html.blocks import BlockStackMachine
from markdown_html.inline import render_inline
from markdown_html.models import BlockKind
from markdown_html.source import LineSource

TAG_PATTERN = re.compile(r"<(/?)([a-z][a-z0-9]*)([^>]*)>")

# No "<", "@" or backtick: every "<" in the output is then a generated tag.
inline_text = st.text(
    alphabet=string.ascii_letters + string.digits + " *_~$[]()!^{}\\-#>.",
    max_size=40,
)
prefixes = st.sampled_from(
    ["", "- ", "    - ", "        1. ", "2. ", "> ", "# ", "###### ", "^id^ ", "$c$ ", "\t- "]
)
document_lines = st.lists(
    st.one_of(
        st.builds(lambda prefix, text: prefix + text, prefixes, inline_text),
        st.sampled_from(["```", "", "    "]),
    ),
    max_size=30,
)


def _render_body(lines: list[str]) -> tuple[BlockStackMachine, str]:
    machine = BlockStackMachine()
    output = [machine.open_template(BlockKind.HTML), machine.open_template(BlockKind.BODY)]
    source = LineSource([f"{line}\n" for line in lines])
    for line in source:
        output.append(machine.process_line(line, source.peek_line()))
    output.append(machine.drain())
    return machine, "".join(output)


def _assert_well_nested(page: str) -> None:
    open_tags: list[str] = []
    for match in TAG_PATTERN.finditer(page):
        closing, name, rest = match.groups()
        if rest.endswith("/"):
            continue
        if closing:
            assert open_tags, f"unexpected </{name}>"
            assert open_tags.pop() == name
        else:
            open_tags.append(name)
    assert open_tags == []


@given(document_lines)
def test_output_tags_are_balanced_and_nested(lines: list[str]):
    machine, page = _render_body(lines)

    assert machine.state.stack == []
    _assert_well_nested(page)


@given(document_lines)
def test_list_level_matches_open_containers(lines: list[str]):
    machine = BlockStackMachine()
    machine.open_template(BlockKind.BODY)
    source = LineSource([f"{line}\n" for line in lines])

    for line in source:
        machine.process_line(line, source.peek_line())
        containers = sum(1 for block in machine.state.stack if block.kind.is_list_container)
        if machine.state.list_level:
            assert containers == machine.state.list_level
        else:
            assert containers == 0


@given(document_lines, st.text(alphabet="-# >1.\tabc`$^[]<@/", max_size=20))
def test_peek_classification_never_mutates_state(lines: list[str], probe: str):
    machine = BlockStackMachine()
    machine.open_template(BlockKind.BODY)
    source = LineSource([f"{line}\n" for line in lines])

    for line in source:
        before = copy.deepcopy(machine.state)
        first = machine.peek_classification(probe + "\n")
        second = machine.peek_classification(probe + "\n")
        assert first == second
        assert machine.state == before
        machine.process_line(line, source.peek_line())


@given(st.text(alphabet=string.ascii_letters + "<>&", max_size=60))
def test_special_characters_are_escaped_exactly_once(text: str):
    rendered, _ = render_inline(text)

    assert "<" not in rendered and ">" not in rendered
    assert html.unescape(rendered) == text


@given(st.lists(st.text(alphabet=string.ascii_letters + "<>&*", max_size=20), max_size=10))
def test_code_block_content_is_escaped_verbatim(lines: list[str]):
    machine, page = _render_body(["```", *lines, "```"])

    body = page.split("<code>\n", 1)[1].split("</code>", 1)[0]
    assert html.unescape(body).split("\n")[: len(lines)] == lines
