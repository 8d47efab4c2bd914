"""LanguageTool 連携: language_tool_python でチャンクごとに校正し、
指摘範囲をソース上の位置に戻して Suggestion として返す。

注意:
- url を設定するとそのサーバ (自前の LanguageTool サーバ等) を使います。
- 未設定なら public API に接続します。ネットワークポリシーに従ってご利用ください。
"""
from __future__ import annotations

import logging
from typing import Any, List

try:  # Optional dependency
    import language_tool_python as ltp
    _LT_AVAILABLE = True
except ImportError:  # pragma: no cover - optional dependency may be missing
    ltp = None  # type: ignore
    _LT_AVAILABLE = False

from .checker import CheckerError
from .config import LanguageToolConfig
from .documentation import Documentation
from .quirks import Quirks
from .suggestion import Detector, Suggestion, SuggestionSet

logger = logging.getLogger(__name__)


def is_available() -> bool:
    return _LT_AVAILABLE


def _open_tool(config: LanguageToolConfig):
    if config.url:
        return ltp.LanguageTool(config.lang, remote_server=config.url)
    return ltp.LanguageToolPublicAPI(config.lang)


def _match_range(m: Any) -> range:
    start = int(getattr(m, "offset", 0))
    length = getattr(m, "errorLength", None)
    if length is None:
        length = getattr(m, "error_length", 0)
    return range(start, start + int(length))


def _match_replacements(m: Any) -> List[str]:
    # 1文字の候補はほぼ役に立たない
    return [str(r) for r in getattr(m, "replacements", None) or [] if len(str(r)) > 1]


class LanguageToolChecker:
    detector = Detector.LANGUAGETOOL

    def check(self, docu: Documentation, quirks: Quirks | None, config: LanguageToolConfig) -> SuggestionSet:
        if not _LT_AVAILABLE:
            raise CheckerError(self.detector, "'language_tool_python' is not installed")
        try:
            tool = _open_tool(config)
        except Exception as e:
            raise CheckerError(self.detector, f"Failed to connect to LanguageTool ({config.url or 'public API'}): {e}") from e
        try:
            return self._check_with(tool, docu, config)
        finally:
            close = getattr(tool, "close", None)
            if close is not None:
                close()

    def _check_with(self, tool: Any, docu: Documentation, config: LanguageToolConfig) -> SuggestionSet:
        suggestions = SuggestionSet()
        for origin, chunks in docu:
            logger.debug("Processing %s", origin)
            for chunk in chunks:
                plain = chunk.erase_markdown()
                txt = plain.as_str()
                if not txt.strip():
                    continue
                try:
                    matches = tool.check(txt)
                except Exception as e:
                    raise CheckerError(
                        self.detector,
                        f"LanguageTool request failed for {origin} ({config.url or 'public API'}): {e}",
                    ) from e
                for m in matches:
                    found = _match_range(m)
                    if not found:
                        continue
                    replacements = _match_replacements(m)
                    description = getattr(m, "message", None)
                    for sub_range, span in plain.find_spans(found).items():
                        suggestions.add(
                            origin,
                            Suggestion(
                                detector=self.detector,
                                origin=origin,
                                chunk=chunk,
                                range=sub_range,
                                span=span,
                                snippet=txt[found.start:found.stop],
                                replacements=list(replacements),
                                description=description,
                            ),
                        )
        return suggestions


__all__ = ["LanguageToolChecker", "is_available"]
