"""マークダウン記法を取り除いた派生ビュー (オーバーレイ)。

オーバーレイは元 (親) のテキストから一部の文字を除いた内容と、
「オーバーレイ上の範囲 -> 親テキスト上の範囲」の対応表を持ちます。
親はチャンクでも別のオーバーレイでも構いません (連鎖可能)。

記法の除去は正規表現による簡易ヒューリスティックです:
- ``` / ~~~ で囲まれたコードブロック、インラインコードは丸ごと除去
- リンク/画像は表示テキストのみ残す
- 見出し、引用、箇条書き、区切り線の記号を除去
- 強調 (*, **, _, __) と打ち消し線 (~~) の記号を除去
- 自動リンク、URL、HTML タグ、参照リンク定義行を除去
改行は残します。
"""
from __future__ import annotations

import re
from typing import Dict, Iterable, List, Protocol, Sequence, Tuple

from .span import Span


class Resolvable(Protocol):
    def as_str(self) -> str:
        ...

    def find_spans(self, query: range) -> Dict[range, Span]:
        ...


_FENCE_RE = re.compile(r"[ \t]{0,3}(`{3,}(?=[^`]*$)|~{3,})")
_THEMATIC_BREAK_RE = re.compile(r"[ \t]{0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$")
_LINK_DEFINITION_RE = re.compile(r"[ \t]{0,3}\[[^\]\n]+\]:[ \t]*\S.*$")
_BLOCK_MARKER_RE = re.compile(r"[ \t]*(?:>[ \t]?|#{1,6}(?=[ \t]|$)[ \t]*|[-*+][ \t]+|\d{1,9}[.)][ \t]+)")
_INLINE_CODE_RE = re.compile(r"(`+)(?!`).*?(?<!`)\1(?!`)")
_AUTOLINK_RE = re.compile(r"<(?:[A-Za-z][A-Za-z0-9+.-]*:[^<>\s]*|[^<>\s@]+@[^<>\s]+)>")
_HTML_TAG_RE = re.compile(r"<!--.*?-->|</?[A-Za-z][A-Za-z0-9-]*(?:\s[^<>]*)?/?>")
_LINK_RE = re.compile(r"!?\[([^\]\n]*)\](?:\([^)\n]*\)|\[[^\]\n]*\])")
_URL_RE = re.compile(r"\b(?:https?|ftp)://\S+|\bwww\.\S+", re.IGNORECASE)
_EMPHASIS_RE = re.compile(r"(\*{1,3}|~~)(?=\S)(.+?)(?<=\S)\1")
_UNDERSCORE_RE = re.compile(r"(?<!\w)(_{1,3})(?=\S)(.+?)(?<=\S)\1(?!\w)")


def _erase_inline(line: str, base: int, keep: List[bool]) -> None:
    chars = list(line)

    def drop(start: int, end: int) -> None:
        for idx in range(start, end):
            keep[base + idx] = False
            # 除去済みの箇所が後段のパターンに引っかからないよう空白で埋める
            chars[idx] = " "

    pos = 0
    while True:
        m = _BLOCK_MARKER_RE.match(line, pos)
        if not m or m.end() == pos:
            break
        drop(m.start(), m.end())
        pos = m.end()

    for pattern in (_INLINE_CODE_RE, _AUTOLINK_RE, _HTML_TAG_RE):
        for m in pattern.finditer("".join(chars)):
            drop(m.start(), m.end())

    for m in _LINK_RE.finditer("".join(chars)):
        text_start, text_end = m.span(1)
        drop(m.start(), text_start)
        drop(text_end, m.end())

    for m in _URL_RE.finditer("".join(chars)):
        drop(m.start(), m.end())

    for pattern in (_EMPHASIS_RE, _UNDERSCORE_RE):
        for m in pattern.finditer("".join(chars)):
            width = len(m.group(1))
            drop(m.start(), m.start() + width)
            drop(m.end() - width, m.end())


def markdown_mask(text: str) -> List[bool]:
    """各文字を残すかどうか (True=残す) のマスクを返す。"""
    keep = [True] * len(text)
    fence: str | None = None
    offset = 0
    for line in text.split("\n"):
        end = offset + len(line)
        fence_match = _FENCE_RE.match(line)
        if fence is not None:
            keep[offset:end] = [False] * len(line)
            if fence_match and fence_match.group(1)[0] == fence[0] and len(fence_match.group(1)) >= len(fence):
                fence = None
        elif fence_match:
            keep[offset:end] = [False] * len(line)
            fence = fence_match.group(1)
        elif _THEMATIC_BREAK_RE.match(line) or _LINK_DEFINITION_RE.match(line):
            keep[offset:end] = [False] * len(line)
        else:
            _erase_inline(line, offset, keep)
        offset = end + 1
    return keep


class PlainOverlay:
    """親テキストから記法を除いたビュー。生成後は変更しない。"""

    __slots__ = ("_parent", "_content", "_mapping")

    def __init__(self, parent: Resolvable, content: str, mapping: Iterable[Tuple[range, range]]):
        frozen = tuple(mapping)
        previous: range | None = None
        for plain_range, parent_range in frozen:
            if len(plain_range) != len(parent_range) or not plain_range:
                raise ValueError(f"overlay entry {plain_range!r} -> {parent_range!r} is not a non-empty 1:1 mapping")
            if previous is not None and plain_range.start < previous.stop:
                raise ValueError(f"overlay entry {plain_range!r} overlaps {previous!r}")
            if plain_range.stop > len(content):
                raise ValueError(f"overlay entry {plain_range!r} exceeds content length {len(content)}")
            previous = plain_range
        self._parent = parent
        self._content = content
        self._mapping = frozen

    @classmethod
    def from_mask(cls, parent: Resolvable, keep: Sequence[bool]) -> "PlainOverlay":
        text = parent.as_str()
        if len(keep) != len(text):
            raise ValueError("mask length must equal the parent text length")
        runs: List[range] = []
        start: int | None = None
        for idx, kept in enumerate(keep):
            if kept:
                if start is None:
                    start = idx
            elif start is not None:
                runs.append(range(start, idx))
                start = None
        if start is not None:
            runs.append(range(start, len(text)))

        pieces: List[str] = []
        mapping: List[Tuple[range, range]] = []
        offset = 0
        for run in runs:
            pieces.append(text[run.start:run.stop])
            mapping.append((range(offset, offset + len(run)), run))
            offset += len(run)
        return cls(parent, "".join(pieces), mapping)

    @classmethod
    def from_markdown(cls, parent: Resolvable) -> "PlainOverlay":
        return cls.from_mask(parent, markdown_mask(parent.as_str()))

    @property
    def parent(self) -> Resolvable:
        return self._parent

    @property
    def mapping(self) -> Tuple[Tuple[range, range], ...]:
        return self._mapping

    def as_str(self) -> str:
        return self._content

    def __len__(self) -> int:
        return len(self._content)

    def __repr__(self) -> str:
        return f"PlainOverlay({self._content!r}, entries={len(self._mapping)})"

    def translate(self, query: range) -> List[range]:
        """オーバーレイ上の範囲を親テキスト上の範囲 (複数に分かれ得る) に戻す。"""
        parts: List[range] = []
        for plain_range, parent_range in self._mapping:
            if plain_range.stop <= query.start:
                continue
            if plain_range.start >= query.stop:
                break
            start = max(plain_range.start, query.start)
            stop = min(plain_range.stop, query.stop)
            delta = parent_range.start - plain_range.start
            parts.append(range(start + delta, stop + delta))
        return parts

    def find_spans(self, query: range) -> Dict[range, Span]:
        found: Dict[range, Span] = {}
        for part in self.translate(query):
            found.update(self._parent.find_spans(part))
        return found

    def erase_markdown(self) -> "PlainOverlay":
        """このビューからさらに記法を除いたビューを返す。"""
        return PlainOverlay.from_markdown(self)


__all__ = ["PlainOverlay", "markdown_mask"]
