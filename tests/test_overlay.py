import pytest

from docspell.chunk import CheckableChunk, whole_text_chunk
from docspell.overlay import PlainOverlay, markdown_mask
from docspell.span import LineColumn, Span


def plain(text):
    return whole_text_chunk(text).erase_markdown()


def test_emphasis_is_erased():
    p = plain("Some **bold** text")
    assert p.as_str() == "Some bold text"
    assert p.find_spans(range(5, 9)) == {range(7, 11): Span(LineColumn(1, 7), LineColumn(1, 10))}


def test_inline_code_is_removed():
    assert plain("Use `foo_bar` here").as_str() == "Use  here"


def test_link_keeps_text_only():
    assert plain("See [the docs](http://x.y/z) now").as_str() == "See the docs now"


def test_heading_and_list_markers():
    assert plain("# Title\n- item one\n> quoted").as_str() == "Title\nitem one\nquoted"


def test_fenced_code_block_is_removed():
    p = plain("Intro\n```rust\nlet x = 1;\n```\nOutro")
    assert p.as_str() == "Intro\n\n\n\nOutro"
    ((_, span),) = p.find_spans(range(len(p) - 5, len(p))).items()
    assert span == Span(LineColumn(5, 0), LineColumn(5, 4))


def test_urls_and_tags_are_removed():
    assert plain("Visit https://example.com <b>now</b>").as_str() == "Visit  now"


def test_word_around_erased_markup_is_split():
    p = plain("ab**cd**")
    assert p.as_str() == "abcd"
    assert list(p.find_spans(range(0, 4))) == [range(0, 2), range(4, 6)]


def test_overlay_maps_through_chunk_fragments():
    chunk = CheckableChunk.from_fragments([
        (" A *new* line", Span(LineColumn(1, 3), LineColumn(1, 15))),
        (" more", Span(LineColumn(2, 3), LineColumn(2, 7))),
    ])
    p = chunk.erase_markdown()
    assert p.as_str() == " A new line\n more"
    assert p.find_spans(range(3, 6)) == {range(4, 7): Span(LineColumn(1, 7), LineColumn(1, 9))}


def test_overlay_of_overlay():
    first = plain("Some **bold** text")
    second = first.erase_markdown()
    assert second.parent is first
    assert second.as_str() == first.as_str()
    assert second.find_spans(range(5, 9)) == first.find_spans(range(5, 9))


def test_translate():
    p = plain("a **b** c")
    assert p.as_str() == "a b c"
    assert p.translate(range(0, 5)) == [range(0, 2), range(4, 5), range(7, 9)]


def test_mask_length_matches_text():
    text = "x `y` z\n```\nq\n"
    assert len(markdown_mask(text)) == len(text)


def test_invalid_mapping_is_rejected():
    chunk = whole_text_chunk("abc")
    with pytest.raises(ValueError):
        PlainOverlay(chunk, "ab", [(range(0, 2), range(0, 3))])
    with pytest.raises(ValueError):
        PlainOverlay.from_mask(chunk, [True, False])


def test_class_and_instance_entry_points_agree():
    chunk = whole_text_chunk("Some **bold** text")
    direct = PlainOverlay.from_markdown(chunk)
    assert direct.as_str() == chunk.erase_markdown().as_str()
    assert direct.erase_markdown().erase_markdown().as_str() == "Some bold text"


def test_inline_triple_backticks_do_not_open_a_fence():
    p = plain("Run ```foo``` first\nthen check this")
    assert p.as_str() == "Run  first\nthen check this"
    p = plain("```foo```\nstill here")
    assert p.as_str() == "\nstill here"


def test_fence_with_info_string_still_opens():
    assert plain("~~~ text\nhidden\n~~~\nshown").as_str() == "\n\n\nshown"
