"""単語辞書 (Hunspell 形式 .dic/.aff とプレーンな語彙リスト) の読み込みと照合。

- .dic/.aff: spylls (Hunspell の Python 実装) で読み込み、活用形や複合語の判定も任せる
- .txt: 1行1語 (UTF-8)。コメント行は先頭#で無視
- .json: {"words": ["word", ...]}
- .aff を伴わない .dic: フラグを除いた語幹だけを語彙として読む

候補の提示は rapidfuzz による類似度検索です。
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Set

try:
    from rapidfuzz import fuzz, process, utils  # type: ignore
    _RF_AVAILABLE = True
except ImportError:  # pragma: no cover
    fuzz = None  # type: ignore
    process = None  # type: ignore
    utils = None  # type: ignore
    _RF_AVAILABLE = False

try:
    from spylls.hunspell import Dictionary as HunspellDictionary  # type: ignore
    _HUNSPELL_AVAILABLE = True
except ImportError:  # pragma: no cover
    HunspellDictionary = None  # type: ignore
    _HUNSPELL_AVAILABLE = False

logger = logging.getLogger(__name__)


def is_available() -> bool:
    return _RF_AVAILABLE and _HUNSPELL_AVAILABLE


def open_hunspell(dic: str | Path, aff: str | Path) -> Any:
    """<stem>.dic と <stem>.aff を1つの Hunspell 辞書として開く。"""
    dic, aff = Path(dic), Path(aff)
    if dic.with_suffix("") != aff.with_suffix(""):
        raise ValueError(f"{dic} and {aff} do not share a file stem")
    return HunspellDictionary.from_files(str(dic.with_suffix("")))


def _hunspell_stems(hunspell: Any) -> List[str]:
    # 単独では語にならない語幹は候補に出さない
    aff = hunspell.aff
    hidden = {
        flag
        for flag in (
            getattr(aff, "FORBIDDENWORD", None),
            getattr(aff, "NEEDAFFIX", None),
            getattr(aff, "ONLYINCOMPOUND", None),
        )
        if flag
    }
    return [w.stem for w in hunspell.dic.words if not (set(w.flags) & hidden)]


def _read_dic_stems(path: Path) -> List[str]:
    words: List[str] = []
    for idx, line in enumerate(path.read_text(encoding="utf-8", errors="ignore").splitlines()):
        entry = line.strip()
        if not entry or entry.startswith("#"):
            continue
        # 先頭行は語数
        if idx == 0 and entry.isdigit():
            continue
        words.append(entry.split()[0].partition("/")[0])
    return words


def load_dict(paths: Iterable[str | Path]) -> List[str]:
    """プレーン/JSON/.dic の語彙リストを読み込む (.dic のフラグは無視)。"""
    words: List[str] = []
    for p in paths:
        path = Path(p)
        suffix = path.suffix.lower()
        if suffix == ".json":
            data = json.loads(path.read_text(encoding="utf-8"))
            ws = data.get("words", []) if isinstance(data, dict) else []
            words.extend(str(w) for w in ws)
        elif suffix == ".dic":
            words.extend(_read_dic_stems(path))
        else:
            # プレーンテキスト
            for line in path.read_text(encoding="utf-8", errors="ignore").splitlines():
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                words.append(line)
    # 重複除去
    return sorted(set(words))


class Dictionary:
    """Hunspell 辞書 (0個以上) と追加の語彙リストをまとめて引く。"""

    def __init__(self, words: Iterable[str] = (), hunspell: Iterable[Any] = ()):
        self._words: Set[str] = set(words)
        self._hunspell: List[Any] = list(hunspell)
        self._choices: List[str] | None = None

    @classmethod
    def from_files(cls, dic: str | Path, aff: str | Path) -> "Dictionary":
        hunspell = open_hunspell(dic, aff)
        logger.debug("Loaded Hunspell dictionary %s", dic)
        return cls(hunspell=[hunspell])

    def add_words(self, words: Iterable[str]) -> None:
        self._words.update(words)
        self._choices = None

    def add_hunspell(self, hunspell: Any) -> None:
        self._hunspell.append(hunspell)
        self._choices = None

    def __len__(self) -> int:
        return len(self._words) + sum(len(h.dic.words) for h in self._hunspell)

    def __contains__(self, word: str) -> bool:
        return self.check(word)

    def _check_words(self, word: str) -> bool:
        if word in self._words:
            return True
        # 文頭の大文字化や全大文字表記も受け入れる
        if word.istitle() or word.isupper():
            return word.lower() in self._words or word.capitalize() in self._words
        return False

    def check(self, word: str) -> bool:
        word = word.replace("’", "'")
        if self._check_words(word):
            return True
        return any(h.lookup(word) for h in self._hunspell)

    def suggest(self, word: str, limit: int = 5, score_cutoff: float = 70.0) -> List[str]:
        if not _RF_AVAILABLE:
            return []
        if self._choices is None:
            choices = set(self._words)
            for h in self._hunspell:
                choices.update(_hunspell_stems(h))
            self._choices = sorted(choices)
        # 大文字小文字を区別せずに比べる
        found = process.extract(
            word,
            self._choices,
            scorer=fuzz.ratio,
            processor=utils.default_process,
            limit=limit,
            score_cutoff=score_cutoff,
        )
        return [choice for choice, _score, _idx in found]


__all__ = ["Dictionary", "is_available", "load_dict", "open_hunspell"]
