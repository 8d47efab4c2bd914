"""検出結果 (Suggestion) と、その集合 (SuggestionSet)。"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Tuple

from .chunk import CheckableChunk, ContentOrigin
from .span import Span


class Detector(str, Enum):
    DICTIONARY = "dictionary"
    LANGUAGETOOL = "languagetool"

    def __str__(self) -> str:
        return self.value


@dataclass
class Suggestion:
    detector: Detector
    origin: ContentOrigin
    chunk: CheckableChunk
    range: range
    span: Span
    snippet: str
    replacements: List[str] = field(default_factory=list)
    description: str | None = None

    def sort_key(self) -> Tuple[str, int, int]:
        return str(self.origin.path), self.span.start.line, self.span.start.column

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": str(self.origin.path),
            "origin": self.origin.kind.value,
            "line": self.span.start.line,
            "column": self.span.start.column,
            "end_line": self.span.end.line,
            "end_column": self.span.end.column,
            "snippet": self.snippet,
            "replacements": list(self.replacements),
            "description": self.description,
            "detector": self.detector.value,
        }

    def __str__(self) -> str:
        # エディタでクリックできるよう path:line:col (桁は 1 始まり) を先頭に置く
        loc = f"{self.origin.path}:{self.span.start.line}:{self.span.start.column + 1}"
        msg = f"{loc}: [{self.detector}] {self.description or 'Possible mistake found.'}"
        extra = [self.snippet]
        if self.replacements:
            extra.append("suggest: " + ", ".join(self.replacements))
        return msg + " | " + " | ".join(extra)


class SuggestionSet:
    """オリジンごとの Suggestion の集合。追加順を保持する。"""

    def __init__(self) -> None:
        self._per_origin: Dict[ContentOrigin, List[Suggestion]] = {}

    def add(self, origin: ContentOrigin, suggestion: Suggestion) -> None:
        self._per_origin.setdefault(origin, []).append(suggestion)

    def extend(self, origin: ContentOrigin, suggestions: Iterable[Suggestion]) -> None:
        self._per_origin.setdefault(origin, []).extend(suggestions)

    def join(self, other: "SuggestionSet") -> None:
        for origin, suggestions in other:
            self.extend(origin, suggestions)

    def suggestions(self, origin: ContentOrigin) -> List[Suggestion]:
        return list(self._per_origin.get(origin, ()))

    def origins(self) -> List[ContentOrigin]:
        return list(self._per_origin)

    def __iter__(self) -> Iterator[Tuple[ContentOrigin, List[Suggestion]]]:
        return iter(self._per_origin.items())

    def __len__(self) -> int:
        return self.total_count()

    def total_count(self) -> int:
        return sum(len(items) for items in self._per_origin.values())

    def is_empty(self) -> bool:
        return self.total_count() == 0

    def filter(self, detector: Detector) -> "SuggestionSet":
        picked = SuggestionSet()
        for origin, suggestions in self:
            matching = [s for s in suggestions if s.detector == detector]
            if matching:
                picked.extend(origin, matching)
        return picked

    def sorted(self) -> List[Suggestion]:
        """ファイル/行/桁の順に並べた一覧。"""
        every = [s for _origin, suggestions in self for s in suggestions]
        return sorted(every, key=Suggestion.sort_key)


__all__ = ["Detector", "Suggestion", "SuggestionSet"]
