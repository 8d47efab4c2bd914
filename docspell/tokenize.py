"""テキストを単語らしき文字範囲に分割するトークナイザ。

- 文字 (\\p{L}) / 結合文字 (\\p{M}) / 数字 (\\p{N}) の連続を1語とみなす
- 語中のアポストロフィ (don't, it’s) は語の一部
- 対応の取れた引用符 1組 ("word", 'word') は語に含めたまま返す (quirk で外す)
- 文字を1つも含まないトークン (数字のみ等) は返さない

特定の言語のアルファベットには依存しません。
"""
from __future__ import annotations

from typing import Iterator

import regex

_WORD_RE = regex.compile(
    r"""(?P<quote>["'])?[\p{L}\p{M}\p{N}]+(?:['’][\p{L}\p{M}\p{N}]+)*(?(quote)(?P=quote))"""
)
_LETTER_RE = regex.compile(r"\p{L}")


class Tokens:
    """text 上の単語範囲を遅延列挙する。iter() のたびに先頭からやり直す。"""

    def __init__(self, text: str):
        self._text = text

    def __iter__(self) -> Iterator[range]:
        for m in _WORD_RE.finditer(self._text):
            if _LETTER_RE.search(m.group(0)):
                yield range(m.start(), m.end())


def tokenize(text: str) -> Tokens:
    return Tokens(text)


__all__ = ["Tokens", "tokenize"]
