"""ソースコードからドキュメント文字列 (コメント/docstring) を抽出する。

対応(簡易):
- Rust: /// と //! の行ドキュメントコメント
- C/JS風: // 行コメント, /* ... */ ブロックコメント (行頭の * は除去)
- Python: 行頭の # コメント (shebang は除く) と docstring (tokenize で検出)
- Shell/Ruby/YAML風: 行頭の # コメント

同じ記号で始まる連続した行コメントは1つのまとまり (クラスタ) になり、
各行がコメント記号を除いた1つのフラグメントになります。

注意: これはヒューリスティックです。コード末尾のコメントは対象外です。
"""
from __future__ import annotations

import io
import re
import tokenize as pytokenize
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Tuple

from .span import LineColumn, LineIndex, Span

Cluster = List[Tuple[str, Span]]


@dataclass(frozen=True)
class CommentSyntax:
    line_markers: Tuple[str, ...] = ()
    block: bool = False
    docstrings: bool = False


_C_LIKE = CommentSyntax(line_markers=("///", "//!", "//"), block=True)
_HASH = CommentSyntax(line_markers=("#",))

SYNTAX_BY_SUFFIX = {
    ".rs": CommentSyntax(line_markers=("///", "//!")),
    ".py": CommentSyntax(line_markers=("#",), docstrings=True),
    ".pyi": CommentSyntax(line_markers=("#",), docstrings=True),
    ".c": _C_LIKE,
    ".h": _C_LIKE,
    ".cc": _C_LIKE,
    ".cpp": _C_LIKE,
    ".hpp": _C_LIKE,
    ".java": _C_LIKE,
    ".js": _C_LIKE,
    ".ts": _C_LIKE,
    ".go": _C_LIKE,
    ".kt": _C_LIKE,
    ".swift": _C_LIKE,
    ".sh": _HASH,
    ".rb": _HASH,
    ".pl": _HASH,
    ".yaml": _HASH,
    ".yml": _HASH,
    ".toml": _HASH,
}

_BLOCK = re.compile(r"/\*.*?\*/", re.DOTALL)
_BLOCK_LINE_PREFIX = re.compile(r"[ \t]*\*(?!/)[ \t]?")


def syntax_for(path: str | Path) -> CommentSyntax | None:
    return SYNTAX_BY_SUFFIX.get(Path(path).suffix.lower())


def _fragment(text: str, pos: LineColumn) -> Tuple[str, Span]:
    text = text.rstrip("\r")
    if not text:
        return text, Span(pos, pos)
    return text, Span(pos, LineColumn(pos.line, pos.column + len(text) - 1))


def _line_marker(stripped: str, markers: Tuple[str, ...]) -> str | None:
    for marker in markers:
        if stripped.startswith(marker):
            if marker == "#" and stripped.startswith("#!"):
                return None
            return marker
    return None


def extract_line_comments(text: str, markers: Tuple[str, ...]) -> Iterator[Cluster]:
    # "//" の行が "///" として拾われないよう、長い記号から順に試す
    markers = tuple(sorted(markers, key=len, reverse=True))
    cluster: Cluster = []
    current: str | None = None
    for lineno, line in enumerate(text.split("\n"), start=1):
        indent = len(line) - len(line.lstrip(" \t"))
        marker = _line_marker(line[indent:], markers)
        if marker is None or marker != current:
            if cluster:
                yield cluster
            cluster = []
            current = marker
        if marker is None:
            continue
        column = indent + len(marker)
        cluster.append(_fragment(line[column:], LineColumn(lineno, column)))
    if cluster:
        yield cluster


def extract_block_comments(text: str, index: LineIndex | None = None) -> Iterator[Cluster]:
    index = index or LineIndex(text)
    for m in _BLOCK.finditer(text):
        inner_start = m.start() + 2
        inner = text[inner_start:m.end() - 2]
        # /** や /*! の装飾記号
        if inner[:1] in ("*", "!") and not inner.startswith("*/"):
            inner = inner[1:]
            inner_start += 1
        cluster: Cluster = []
        offset = inner_start
        for idx, piece in enumerate(inner.split("\n")):
            skip = 0
            if idx:
                prefix = _BLOCK_LINE_PREFIX.match(piece)
                if prefix:
                    skip = prefix.end()
            cluster.append(_fragment(piece[skip:], index.position(offset + skip)))
            offset += len(piece) + 1
        yield cluster


_STRING_PREFIX = re.compile(r"[rRuUbBfF]*('''|\"\"\"|'|\")")


def extract_docstrings(text: str) -> Iterator[Cluster]:
    """文として置かれた文字列リテラル (docstring) を行ごとのフラグメントに分ける。"""
    try:
        tokens = list(pytokenize.generate_tokens(io.StringIO(text).readline))
    except (pytokenize.TokenError, SyntaxError, IndentationError):
        return
    significant = [t for t in tokens if t.type not in (pytokenize.NL, pytokenize.COMMENT)]
    for idx, tok in enumerate(significant):
        if tok.type != pytokenize.STRING:
            continue
        prev_type = significant[idx - 1].type if idx else pytokenize.NEWLINE
        next_type = significant[idx + 1].type if idx + 1 < len(significant) else pytokenize.ENDMARKER
        if prev_type not in (pytokenize.NEWLINE, pytokenize.INDENT, pytokenize.DEDENT, pytokenize.ENCODING):
            continue
        if next_type not in (pytokenize.NEWLINE, pytokenize.ENDMARKER):
            continue
        prefix = _STRING_PREFIX.match(tok.string)
        # bytes と f-string は docstring にならない
        if not prefix or set(prefix.group(0).lower()) & {"b", "f"}:
            continue
        quote = prefix.group(1)
        body = tok.string[prefix.end():len(tok.string) - len(quote)]
        line, column = tok.start[0], tok.start[1] + prefix.end()
        cluster: Cluster = []
        for piece_idx, piece in enumerate(body.split("\n")):
            if piece_idx:
                line += 1
                column = 0
            cluster.append(_fragment(piece, LineColumn(line, column)))
        yield cluster


def extract_comment_clusters(text: str, syntax: CommentSyntax) -> Iterator[Cluster]:
    if syntax.line_markers:
        yield from extract_line_comments(text, syntax.line_markers)
    if syntax.block:
        yield from extract_block_comments(text)
    if syntax.docstrings:
        yield from extract_docstrings(text)


__all__ = [
    "CommentSyntax",
    "SYNTAX_BY_SUFFIX",
    "syntax_for",
    "extract_line_comments",
    "extract_block_comments",
    "extract_docstrings",
    "extract_comment_clusters",
]
