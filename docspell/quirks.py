"""辞書引きの前にトークンへ適用する正規化 (quirk) の連鎖。

設定された順に「最初に当てはまる quirk」を適用し、当てはまるものが
無くなるまで繰り返します。どの quirk も文字列を必ず短くするので停止します。

- quoted:               "word"  -> word
- single-quoted:        'word'  -> word
- multipicity-x-suffix: boxesx  -> boxes (末尾の x を複数形マーカーとして除去)
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Iterator, List, Optional

logger = logging.getLogger(__name__)


class Quirk(str, Enum):
    SINGLE_QUOTED = "single-quoted"
    QUOTED = "quoted"
    MULTIPICITY_X_SUFFIX = "multipicity-x-suffix"

    @classmethod
    def from_name(cls, name: str) -> Optional["Quirk"]:
        name = _ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            return None

    def call(self, text: str) -> Optional[str]:
        if self is Quirk.QUOTED:
            if len(text) > 2 and text[0] == '"' and text[-1] == '"':
                return text[1:-1]
        elif self is Quirk.SINGLE_QUOTED:
            if len(text) > 2 and text[0] == "'" and text[-1] == "'":
                return text[1:-1]
        elif self is Quirk.MULTIPICITY_X_SUFFIX:
            if len(text) > 1 and text[-1] == "x":
                return text[:-1]
        return None


_ALIASES = {"multiplicity-x-suffix": Quirk.MULTIPICITY_X_SUFFIX.value}


class Quirks:
    def __init__(self, names: Iterable[str] = ()):
        quirks: List[Quirk] = []
        for name in names:
            quirk = Quirk.from_name(name)
            if quirk is None:
                logger.debug("Ignoring unknown quirk %r", name)
                continue
            if quirk not in quirks:
                quirks.append(quirk)
        self._quirks = tuple(quirks)

    @classmethod
    def from_config(cls, config) -> "Quirks":
        return cls(config.quirks or ())

    def __iter__(self) -> Iterator[Quirk]:
        return iter(self._quirks)

    def __len__(self) -> int:
        return len(self._quirks)

    def __repr__(self) -> str:
        return f"Quirks({[q.value for q in self._quirks]!r})"

    def check_quirk(self, text: str) -> Optional[str]:
        """正規化後の文字列を返す。どの quirk も当てはまらなければ None。"""
        changed = text
        found_one = False
        while True:
            for quirk in self._quirks:
                reduced = quirk.call(changed)
                if reduced is not None:
                    changed = reduced
                    found_one = True
                    break
            else:
                break
        return changed if found_one else None


__all__ = ["Quirk", "Quirks"]
