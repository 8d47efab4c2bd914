from docspell.comments import (
    extract_block_comments,
    extract_docstrings,
    extract_line_comments,
    syntax_for,
)
from docspell.span import LineColumn, Span


def lc(line, column):
    return LineColumn(line, column)


def test_line_comments_cluster_by_adjacency():
    text = "#!/usr/bin/env python\n# one\n# two\ncode = 1\n    # three"
    clusters = list(extract_line_comments(text, ("#",)))
    assert clusters == [
        [(" one", Span(lc(2, 1), lc(2, 4))), (" two", Span(lc(3, 1), lc(3, 4)))],
        [(" three", Span(lc(5, 5), lc(5, 10)))],
    ]


def test_rust_doc_markers_only():
    text = "/// doc\n// plain\n//! inner\nfn x() {}"
    clusters = list(extract_line_comments(text, syntax_for("lib.rs").line_markers))
    assert clusters == [
        [(" doc", Span(lc(1, 3), lc(1, 6)))],
        [(" inner", Span(lc(3, 3), lc(3, 8)))],
    ]


def test_longest_marker_wins():
    text = "/// a\n// b"
    clusters = list(extract_line_comments(text, ("//", "///")))
    assert [[t for t, _ in c] for c in clusters] == [[" a"], [" b"]]


def test_empty_comment_line():
    text = "# a\n#\n# b"
    (cluster,) = extract_line_comments(text, ("#",))
    assert cluster[1] == ("", Span(lc(2, 1), lc(2, 1)))


def test_block_comment_strips_stars():
    text = "/**\n * Hello world\n */\nint x;"
    (cluster,) = extract_block_comments(text)
    assert cluster[1] == ("Hello world", Span(lc(2, 3), lc(2, 13)))


def test_docstring_positions():
    text = 'def f():\n    """Hello wrld.\n\n    Second line."""\n'
    (cluster,) = extract_docstrings(text)
    assert cluster[0] == ("Hello wrld.", Span(lc(2, 7), lc(2, 17)))
    assert cluster[2] == ("    Second line.", Span(lc(4, 0), lc(4, 15)))


def test_non_docstring_strings_are_ignored():
    text = 'x = "not a doc"\nprint("nor this")\nb"bytes"\n'
    assert list(extract_docstrings(text)) == []


def test_unknown_suffix():
    assert syntax_for("image.png") is None
    assert syntax_for("main.PY") is not None
