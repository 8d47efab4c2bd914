import importlib

import pytest

from docspell import lt_checker
from docspell.checker import CheckerError
from docspell.config import LanguageToolConfig
from docspell.documentation import Documentation
from docspell.span import LineColumn, Span
from docspell.suggestion import Detector


class FakeMatch:
    def __init__(self, offset, length, message, replacements):
        self.offset = offset
        self.errorLength = length
        self.message = message
        self.replacements = replacements


class FakeTool:
    def __init__(self, matches=(), fail=False):
        self.matches = list(matches)
        self.fail = fail
        self.texts = []
        self.closed = False

    def check(self, text):
        if self.fail:
            raise OSError("connection refused")
        self.texts.append(text)
        return self.matches

    def close(self):
        self.closed = True


@pytest.fixture
def fake_tool(monkeypatch):
    def install(tool):
        monkeypatch.setattr(lt_checker, "_LT_AVAILABLE", True)
        monkeypatch.setattr(lt_checker, "_open_tool", lambda config: tool)
        return tool
    return install


def test_lt_optional_importable():
    # language_tool_python が無くてもインポートできること
    mod = importlib.import_module("docspell.lt_checker")
    assert isinstance(mod.is_available(), bool)


def test_matches_are_mapped_to_source(fake_tool):
    tool = fake_tool(FakeTool([FakeMatch(6, 3, "Grammar.", ["is", "a"])]))
    docu = Documentation()
    docu.add_source("a.py", "# This are bad\n")
    found = lt_checker.LanguageToolChecker().check(docu, None, LanguageToolConfig())
    (s,) = found.sorted()
    assert s.detector is Detector.LANGUAGETOOL
    assert s.snippet == "are"
    assert s.span == Span(LineColumn(1, 7), LineColumn(1, 9))
    assert s.description == "Grammar."
    assert s.replacements == ["is"]
    assert tool.texts == [" This are bad"]
    assert tool.closed


def test_markdown_is_erased_before_check(fake_tool):
    tool = fake_tool(FakeTool())
    docu = Documentation()
    docu.add_markdown("README.md", "Some **bold** text\n")
    lt_checker.LanguageToolChecker().check(docu, None, LanguageToolConfig())
    assert tool.texts == ["Some bold text\n"]


def test_request_failure_is_checker_error(fake_tool):
    tool = fake_tool(FakeTool(fail=True))
    docu = Documentation()
    docu.add_markdown("README.md", "Some text\n")
    with pytest.raises(CheckerError) as exc:
        lt_checker.LanguageToolChecker().check(docu, None, LanguageToolConfig(url="http://127.0.0.1:9"))
    assert exc.value.backend == "languagetool"
    assert tool.closed


def test_connect_failure_is_checker_error(monkeypatch):
    def refuse(config):
        raise OSError("no server")

    monkeypatch.setattr(lt_checker, "_LT_AVAILABLE", True)
    monkeypatch.setattr(lt_checker, "_open_tool", refuse)
    with pytest.raises(CheckerError, match="Failed to connect"):
        lt_checker.LanguageToolChecker().check(Documentation(), None, LanguageToolConfig())
