import pytest

from docspell.span import LineColumn, LineIndex, Span, load_span_from, replay, span_offsets


def test_line_column_rejects_invalid():
    with pytest.raises(ValueError):
        LineColumn(0, 0)
    with pytest.raises(ValueError):
        LineColumn(1, -1)


def test_span_end_is_inclusive():
    span = Span(LineColumn(1, 4), LineColumn(1, 6))
    assert span.one_line_len() == 3
    assert Span(LineColumn(1, 4), LineColumn(2, 0)).one_line_len() is None


def test_span_rejects_reversed():
    with pytest.raises(ValueError):
        Span(LineColumn(2, 0), LineColumn(1, 5))


def test_replay_counts_newlines():
    got = list(replay("ab\nc", LineColumn(3, 2)))
    assert got == [LineColumn(3, 2), LineColumn(3, 3), LineColumn(3, 4), LineColumn(4, 0)]


def test_line_index_both_ways():
    index = LineIndex("ab\ncd\n")
    assert index.position(3) == LineColumn(2, 0)
    assert index.offset(LineColumn(2, 1)) == 4
    assert index.position(index.offset(LineColumn(1, 1))) == LineColumn(1, 1)


def test_load_span_from():
    src = "fn x() {}\n/// Hello\n"
    assert load_span_from(src, Span(LineColumn(2, 4), LineColumn(2, 8))) == "Hello"


def test_span_offsets_outside_source():
    with pytest.raises(ValueError):
        span_offsets("abc", Span(LineColumn(1, 1), LineColumn(1, 5)))
