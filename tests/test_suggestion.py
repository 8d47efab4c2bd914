from docspell.chunk import ContentOrigin, whole_text_chunk
from docspell.span import LineColumn, Span
from docspell.suggestion import Detector, Suggestion, SuggestionSet


def make(path, line, column, detector=Detector.DICTIONARY, replacements=()):
    origin = ContentOrigin.source_file(path)
    span = Span(LineColumn(line, column), LineColumn(line, column + 3))
    return origin, Suggestion(
        detector, origin, whole_text_chunk("Tezt"), range(0, 4), span, "Tezt",
        list(replacements), "Possible spelling mistake found.",
    )


def test_set_keeps_insertion_order_per_origin():
    s = SuggestionSet()
    o, a = make("b.rs", 3, 0)
    _, b = make("b.rs", 1, 0)
    s.add(o, a)
    s.add(o, b)
    assert s.suggestions(o) == [a, b]
    assert len(s) == 2
    assert s.sorted() == [b, a]


def test_join_and_filter():
    left, right = SuggestionSet(), SuggestionSet()
    o1, a = make("a.rs", 1, 0)
    o2, b = make("b.rs", 1, 0, detector=Detector.LANGUAGETOOL)
    left.add(o1, a)
    right.add(o2, b)
    left.join(right)
    assert left.origins() == [o1, o2]
    only_lt = left.filter(Detector.LANGUAGETOOL)
    assert only_lt.origins() == [o2]
    assert SuggestionSet().is_empty()


def test_text_and_dict_forms():
    _, s = make("src/lib.rs", 2, 4, replacements=["test", "text"])
    assert str(s).endswith("2:5: [dictionary] Possible spelling mistake found. | Tezt | suggest: test, text")
    d = s.to_dict()
    assert d["line"] == 2
    assert d["column"] == 4
    assert d["end_column"] == 7
    assert d["detector"] == "dictionary"
    assert d["origin"] == "source-file"
