"""検査対象ファイルの走査ユーティリティ。

- マークダウン (.md 等) とコメント抽出に対応した拡張子のソースのみを対象にする。
- バイナリらしいものは除外(ヒューリスティック)。
- .git や仮想環境/ビルド成果物のディレクトリには入らない。
"""
from __future__ import annotations

import codecs
import os
from pathlib import Path
from typing import Iterable, Iterator, Tuple

from .comments import syntax_for

BINARY_BYTES = set(range(0, 9)) | {11, 12} | set(range(14, 32))
MARKDOWN_SUFFIXES = {".md", ".markdown", ".mdown", ".mkd"}
SKIP_DIRS = {".git", ".hg", ".svn", ".tox", ".venv", "venv", "__pycache__", "node_modules", "target", "build", "dist"}


def is_probably_text(data: bytes, threshold: float = 0.30) -> bool:
    if not data:
        return True
    non_text = sum(b in BINARY_BYTES for b in data)
    ratio = non_text / len(data)
    return ratio < threshold


def read_text_with_encoding(path: Path, encoding_candidates=("utf-8", "cp1252", "latin-1")) -> Tuple[str, str] | None:
    """(内容, 読み込みに使った文字コード) を返す。書き戻しは同じ文字コードで行う。"""
    try:
        raw = path.read_bytes()
    except OSError:
        return None
    if not is_probably_text(raw):
        return None
    if raw.startswith(codecs.BOM_UTF8):
        encoding_candidates = ("utf-8-sig",)
    for enc in encoding_candidates:
        try:
            return raw.decode(enc), enc
        except UnicodeDecodeError:
            continue
    return None


def read_text(path: Path) -> str | None:
    found = read_text_with_encoding(path)
    return found[0] if found is not None else None


def classify(path: str | os.PathLike[str]) -> str | None:
    """"markdown" / "source" / None (対象外) を返す。"""
    p = Path(path)
    if p.suffix.lower() in MARKDOWN_SUFFIXES:
        return "markdown"
    if syntax_for(p) is not None:
        return "source"
    return None


def iter_files(paths: Iterable[str | os.PathLike[str]], recursive: bool = True) -> Iterator[Path]:
    for p in paths:
        path = Path(p)
        if path.is_file():
            yield path
        elif path.is_dir():
            if not recursive:
                for child in sorted(path.iterdir()):
                    if child.is_file() and classify(child):
                        yield child
                continue
            for root, dirs, files in os.walk(path):
                dirs[:] = sorted(d for d in dirs if d not in SKIP_DIRS and not d.startswith("."))
                for f in sorted(files):
                    candidate = Path(root) / f
                    if classify(candidate):
                        yield candidate


__all__ = ["iter_files", "read_text", "read_text_with_encoding", "is_probably_text", "classify", "MARKDOWN_SUFFIXES"]
