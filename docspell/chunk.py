"""チェック対象の単位 (チャンク) と、その出所 (オリジン) の定義。

チャンクは複数のソース断片 (フラグメント) を連結したテキストと、
「テキスト上の文字範囲 -> ソース上の Span」の対応表を持ちます。
例: 2行のコメントは ' First line\\n second line' のように、
コメント記号を除いた各行を改行で連結した内容になります。
連結のために挿入した文字はどのフラグメントにも属しません。
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from itertools import islice
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Tuple

from .overlay import PlainOverlay
from .span import LineColumn, Span, replay

logger = logging.getLogger(__name__)

Fragment = Tuple[range, Span]


class OriginKind(str, Enum):
    MARKDOWN_FILE = "markdown-file"
    SOURCE_FILE = "source-file"
    DOC_TEST = "doc-test"


@dataclass(frozen=True)
class ContentOrigin:
    """チャンクの出所。埋め込み例 (doc-test) は同じファイルから複数出るので Span で区別する。"""

    kind: OriginKind
    path: Path
    span: Span | None = None

    @classmethod
    def markdown_file(cls, path: str | Path) -> "ContentOrigin":
        return cls(OriginKind.MARKDOWN_FILE, Path(path))

    @classmethod
    def source_file(cls, path: str | Path) -> "ContentOrigin":
        return cls(OriginKind.SOURCE_FILE, Path(path))

    @classmethod
    def doc_test(cls, path: str | Path, span: Span) -> "ContentOrigin":
        return cls(OriginKind.DOC_TEST, Path(path), span)

    def __str__(self) -> str:
        return str(self.path)


def _check_fragments(content: str, fragments: Tuple[Fragment, ...]) -> None:
    previous: range | None = None
    for fragment_range, fragment_span in fragments:
        if fragment_range.step != 1 or fragment_range.start > fragment_range.stop:
            raise ValueError(f"invalid fragment range {fragment_range!r}")
        if fragment_range.stop > len(content):
            raise ValueError(f"fragment {fragment_range!r} exceeds content length {len(content)}")
        if previous is not None and (
            fragment_range.start < previous.stop or fragment_range.start <= previous.start
        ):
            raise ValueError(f"fragment {fragment_range!r} overlaps or precedes {previous!r}")
        previous = fragment_range
        if not fragment_range:
            continue
        text = content[fragment_range.start:fragment_range.stop]
        *_, last = replay(text, fragment_span.start)
        if last != fragment_span.end:
            raise ValueError(
                f"fragment {fragment_range!r} with {len(text)} characters does not match span {fragment_span}"
            )


class CheckableChunk:
    """チェッカーへ渡す1単位。生成後は変更しない。"""

    __slots__ = ("_content", "_fragments")

    def __init__(self, content: str, fragments: Iterable[Fragment]):
        frozen = tuple((fragment_range, fragment_span) for fragment_range, fragment_span in fragments)
        _check_fragments(content, frozen)
        self._content = content
        self._fragments = frozen

    @classmethod
    def from_fragments(cls, parts: Iterable[Tuple[str, Span]], join: str = "\n") -> "CheckableChunk":
        """(ソース断片, Span) の列を join で連結してチャンクを作る。"""
        pieces: List[str] = []
        fragments: List[Fragment] = []
        offset = 0
        for idx, (text, span) in enumerate(parts):
            if idx:
                pieces.append(join)
                offset += len(join)
            pieces.append(text)
            fragments.append((range(offset, offset + len(text)), span))
            offset += len(text)
        return cls("".join(pieces), fragments)

    @property
    def fragments(self) -> Tuple[Fragment, ...]:
        return self._fragments

    @property
    def fragment_count(self) -> int:
        return len(self._fragments)

    def as_str(self) -> str:
        return self._content

    def __len__(self) -> int:
        return len(self._content)

    def __iter__(self) -> Iterator[Fragment]:
        return iter(self._fragments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CheckableChunk):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def _key(self) -> tuple:
        # 空の range 同士は位置に関係なく等しいとみなされるので start/stop で比べる
        return self._content, tuple((r.start, r.stop, s) for r, s in self._fragments)

    def __repr__(self) -> str:
        return f"CheckableChunk({self._content!r}, fragments={len(self._fragments)})"

    def find_spans(self, query: range) -> Dict[range, Span]:
        """query のうち出所が分かる部分を、部分範囲ごとに Span へ対応付ける。

        query がフラグメント境界と揃っている必要はありません。複数の
        フラグメントにまたがる場合は、重なる部分ごとに分割して返します。

            0..40 -> {
                0..10  => (1,0)-(3,5),
                10..12 => (3,6)-(3,7),
                13..17 => (4,0)-(4,3),
            }
        """
        found: Dict[range, Span] = {}
        for fragment_range, fragment_span in self._fragments:
            if fragment_range.stop <= query.start:
                continue
            if fragment_range.start >= query.stop:
                break
            # 空のコメント行
            if not fragment_range:
                continue
            sub_range = range(
                max(fragment_range.start, query.start),
                min(fragment_range.stop, query.stop),
            )
            if not sub_range:
                continue
            # 複数行にまたがるフラグメントもあるので、先頭から改行を数え直す
            text = self._content[fragment_range.start:fragment_range.stop]
            shift = sub_range.start - fragment_range.start
            cursors = list(islice(replay(text, fragment_span.start), shift, shift + len(sub_range)))
            sub_span = Span(cursors[0], cursors[-1])
            length = sub_span.one_line_len()
            assert length is None or length == len(sub_range), (sub_range, sub_span)
            logger.debug("resolved %r in fragment %r to %s", sub_range, fragment_range, sub_span)
            found[sub_range] = sub_span
        return found

    def find_range(self, span: Span) -> range:
        """1つのフラグメントに収まる Span を、内容上の範囲に戻す。"""
        for fragment_range, fragment_span in self._fragments:
            if not fragment_range or fragment_span.end < span.start or span.end < fragment_span.start:
                continue
            text = self._content[fragment_range.start:fragment_range.stop]
            start: int | None = None
            for idx, cursor in enumerate(replay(text, fragment_span.start)):
                if cursor == span.start:
                    start = idx
                if cursor == span.end and start is not None:
                    return range(fragment_range.start + start, fragment_range.start + idx + 1)
        raise ValueError(f"span {span} is not covered by a single fragment")

    def erase_markdown(self) -> PlainOverlay:
        """マークダウン記法を取り除いたビューを返す。"""
        return PlainOverlay.from_markdown(self)


def whole_text_chunk(content: str) -> CheckableChunk | None:
    """ファイル全体を1つのフラグメントとするチャンク (マークダウンファイル用)。"""
    if not content:
        return None
    start = LineColumn(1, 0)
    *_, end = replay(content, start)
    return CheckableChunk(content, [(range(0, len(content)), Span(start, end))])


__all__ = [
    "OriginKind",
    "ContentOrigin",
    "CheckableChunk",
    "Fragment",
    "whole_text_chunk",
]
