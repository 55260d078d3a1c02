from markdown_html.source import LineSource


def test_next_line_keeps_terminators():
    source = LineSource.from_text("one\ntwo\n")

    assert source.next_line() == "one\n"
    assert source.next_line() == "two\n"
    assert source.next_line() is None


def test_last_line_without_terminator():
    source = LineSource.from_text("one\ntwo")

    assert list(source) == ["one\n", "two"]


def test_peek_does_not_advance():
    source = LineSource.from_text("one\ntwo\n")

    assert source.peek_line() == "one\n"
    assert source.peek_line() == "one\n"
    assert source.line_number == 0
    assert source.next_line() == "one\n"
    assert source.line_number == 1
    assert source.peek_line() == "two\n"
    assert source.next_line() == "two\n"


def test_peek_past_end_returns_none():
    source = LineSource.from_text("only\n")
    source.next_line()

    assert source.peek_line() is None
    assert source.peek_line() is None
    assert source.next_line() is None
    assert source.line_number == 1


def test_empty_input():
    source = LineSource([])

    assert source.peek_line() is None
    assert source.next_line() is None


def test_form_feed_does_not_split_lines():
    source = LineSource.from_text("a\x0cb\n")

    assert list(source) == ["a\x0cb\n"]


def test_accepts_any_iterable_and_long_lines():
    long_line = "x" * 100_000 + "\n"
    source = LineSource(iter([long_line, "end\n"]))

    assert source.next_line() == long_line
    assert source.peek_line() == "end\n"


def test_iteration_interleaves_with_peek():
    source = LineSource.from_text("a\nb\nc\n")
    seen = []

    for line in source:
        seen.append((line, source.peek_line()))

    assert seen == [("a\n", "b\n"), ("b\n", "c\n"), ("c\n", None)]
