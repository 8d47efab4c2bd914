"""検出結果に基づく自動修正 (非対話)。

- 置換候補がある項目のみ、先頭の候補で置換する。
- ソース上の Span の文字列が検出した語と一致しない項目は触らない
  (マークダウン記法や改行をまたいで分割された語など)。
- 重なる修正は先に現れたものだけを適用する。
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

from .file_scanner import read_text_with_encoding
from .span import LineIndex, span_offsets
from .suggestion import Suggestion, SuggestionSet

logger = logging.getLogger(__name__)


def apply_fixes(content: str, suggestions: Iterable[Suggestion]) -> str:
    index = LineIndex(content)
    edits: List[Tuple[int, int, str]] = []
    for s in suggestions:
        if not s.replacements:
            continue
        try:
            start, end = span_offsets(content, s.span, index)
        except ValueError:
            logger.debug("Span %s is outside of the file, skipping", s.span)
            continue
        if content[start:end] != s.snippet:
            logger.debug("Span %s does not hold >%s<, skipping", s.span, s.snippet)
            continue
        edits.append((start, end, s.replacements[0]))
    edits.sort()

    out: List[str] = []
    pos = 0
    for start, end, replacement in edits:
        if start < pos:
            continue
        out.append(content[pos:start])
        out.append(replacement)
        pos = end
    out.append(content[pos:])
    return "".join(out)


def fix_files(suggestion_set: SuggestionSet) -> List[Path]:
    """ファイル単位で修正を適用し、書き換えたファイルの一覧を返す。"""
    by_file: Dict[Path, List[Suggestion]] = {}
    for origin, suggestions in suggestion_set:
        by_file.setdefault(origin.path, []).extend(suggestions)
    touched: List[Path] = []
    for path, items in by_file.items():
        found = read_text_with_encoding(path)
        if found is None:
            continue
        content, encoding = found
        new_content = apply_fixes(content, items)
        if new_content == content:
            continue
        # 読み込んだときの文字コードと改行をそのまま保つ
        try:
            data = new_content.encode(encoding)
        except UnicodeEncodeError:
            logger.warning("Replacement for %s cannot be encoded as %s, leaving the file untouched", path, encoding)
            continue
        path.write_bytes(data)
        touched.append(path)
    return touched


__all__ = ["apply_fixes", "fix_files"]
