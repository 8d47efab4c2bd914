"""ソース上の位置を表す値型とユーティリティ。

- LineColumn: 行は 1 始まり、桁は 0 始まり (文字単位)
- Span: start/end ともに LineColumn。end は最後の文字の位置を指す (終端を含む)

バイト単位ではなく文字単位で数えます。マルチバイト文字を含むソースでも
位置がずれないようにするためです。
"""
from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple


@dataclass(frozen=True, order=True)
class LineColumn:
    line: int
    column: int

    def __post_init__(self) -> None:
        if self.line < 1 or self.column < 0:
            raise ValueError(f"invalid position {self.line}:{self.column}")

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True, order=True)
class Span:
    start: LineColumn
    end: LineColumn

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"span end {self.end} precedes start {self.start}")

    def one_line_len(self) -> Optional[int]:
        """1行に収まる場合のみ文字数を返す。複数行なら None。"""
        if self.start.line == self.end.line:
            return self.end.column - self.start.column + 1
        return None

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


def replay(text: str, start: LineColumn) -> Iterator[LineColumn]:
    """text を start から1文字ずつ辿り、各文字の位置を返す。"""
    line, column = start.line, start.column
    for c in text:
        yield LineColumn(line, column)
        if c == "\n":
            line += 1
            column = 0
        else:
            column += 1


def _line_starts(source: str) -> List[int]:
    starts = [0]
    for idx, c in enumerate(source):
        if c == "\n":
            starts.append(idx + 1)
    return starts


class LineIndex:
    """文字オフセット <-> LineColumn の相互変換表。"""

    def __init__(self, source: str):
        self._starts = _line_starts(source)

    def position(self, offset: int) -> LineColumn:
        line = bisect_right(self._starts, offset)
        return LineColumn(line, offset - self._starts[line - 1])

    def offset(self, pos: LineColumn) -> int:
        if pos.line > len(self._starts):
            raise ValueError(f"line {pos.line} is out of range")
        return self._starts[pos.line - 1] + pos.column


def span_offsets(source: str, span: Span, index: LineIndex | None = None) -> Tuple[int, int]:
    """Span が指す source 上の半開区間 (start, end) を返す。"""
    index = index or LineIndex(source)
    start = index.offset(span.start)
    end = index.offset(span.end) + 1
    if end > len(source):
        raise ValueError(f"span {span} exceeds the source length")
    return start, end


def load_span_from(source: str, span: Span) -> str:
    start, end = span_offsets(source, span)
    return source[start:end]


__all__ = [
    "LineColumn",
    "Span",
    "LineIndex",
    "replay",
    "span_offsets",
    "load_span_from",
]
