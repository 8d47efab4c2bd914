"""チェック対象のドキュメント集合 (オリジン -> チャンク列)。

チェッカーはこの集合を読み取り専用で受け取ります。
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Tuple

from .chunk import CheckableChunk, ContentOrigin, whole_text_chunk
from .comments import extract_comment_clusters, syntax_for
from .file_scanner import classify, iter_files, read_text

logger = logging.getLogger(__name__)


class Documentation:
    def __init__(self) -> None:
        self._index: Dict[ContentOrigin, List[CheckableChunk]] = {}

    def add_chunk(self, origin: ContentOrigin, chunk: CheckableChunk) -> None:
        self._index.setdefault(origin, []).append(chunk)

    def extend(self, origin: ContentOrigin, chunks: Iterable[CheckableChunk]) -> None:
        self._index.setdefault(origin, []).extend(chunks)

    def add_markdown(self, path: str | Path, content: str) -> None:
        """マークダウンファイルは全体を1つのフラグメントとする。"""
        chunk = whole_text_chunk(content)
        if chunk is not None:
            self.add_chunk(ContentOrigin.markdown_file(path), chunk)

    def add_source(self, path: str | Path, content: str) -> None:
        syntax = syntax_for(path)
        if syntax is None:
            logger.debug("No comment syntax known for %s", path)
            return
        origin = ContentOrigin.source_file(path)
        for cluster in extract_comment_clusters(content, syntax):
            chunk = CheckableChunk.from_fragments(cluster)
            if chunk.as_str().strip():
                self.add_chunk(origin, chunk)

    def load_paths(self, paths: Iterable[str | os.PathLike[str]], recursive: bool = True) -> "Documentation":
        for path in iter_files(paths, recursive=recursive):
            kind = classify(path)
            if kind is None:
                logger.debug("Skipping unsupported file %s", path)
                continue
            content = read_text(path)
            if content is None:
                logger.debug("Skipping unreadable or binary file %s", path)
                continue
            if kind == "markdown":
                self.add_markdown(path, content)
            else:
                self.add_source(path, content)
        return self

    @classmethod
    def from_paths(cls, paths: Iterable[str | os.PathLike[str]], recursive: bool = True) -> "Documentation":
        return cls().load_paths(paths, recursive=recursive)

    def get(self, origin: ContentOrigin) -> List[CheckableChunk]:
        return list(self._index.get(origin, ()))

    def __iter__(self) -> Iterator[Tuple[ContentOrigin, List[CheckableChunk]]]:
        return iter(self._index.items())

    def __len__(self) -> int:
        return len(self._index)

    def is_empty(self) -> bool:
        return not self._index

    def chunk_count(self) -> int:
        return sum(len(chunks) for chunks in self._index.values())


__all__ = ["Documentation"]
