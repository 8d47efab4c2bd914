"""辞書に基づくスペルチェック。

文法は見ません。チャンクからマークダウン記法を除いたテキストを単語に分割し、
quirk で正規化したうえで辞書 (Hunspell 形式の <lang>.dic / <lang>.aff) と照合します。
見つからない単語は、元のトークンの範囲をチャンク経由でソース上の位置に戻して報告します。
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Tuple

from .checker import CheckerError
from .config import DictionaryConfig
from .dictionary import Dictionary, is_available, load_dict, open_hunspell
from .documentation import Documentation
from .quirks import Quirks
from .suggestion import Detector, Suggestion, SuggestionSet
from .tokenize import tokenize

logger = logging.getLogger(__name__)

DESCRIPTION = "Possible spelling mistake found."


def find_dictionary(search_dirs: Iterable[Path], lang: str) -> Tuple[Path, Path]:
    """検索ディレクトリを順に見て、<lang>.dic と <lang>.aff が揃う最初の組を返す。"""
    for search_dir in search_dirs:
        # 既定の検索パスも含むので、存在しないものは黙って飛ばす
        if not search_dir.is_dir():
            logger.debug("Dictionary search path is not a directory %s", search_dir)
            continue
        logger.debug("Found dictionary search path %s", search_dir)
        dic = search_dir / f"{lang}.dic"
        if not dic.is_file():
            logger.debug("Dictionary path derived from search dir is not a file %s", dic)
            continue
        aff = search_dir / f"{lang}.aff"
        if not aff.is_file():
            logger.debug("Affixes path derived from search dir is not a file %s", aff)
            continue
        logger.debug("Using dic %s and aff %s", dic, aff)
        return dic, aff
    raise CheckerError(
        Detector.DICTIONARY,
        f"Failed to find any {lang}.dic / {lang}.aff in any search dir or no search dir provided",
    )


def load_dictionary(config: DictionaryConfig) -> Dictionary:
    dic, aff = find_dictionary(config.all_search_dirs(), config.lang)
    try:
        dictionary = Dictionary.from_files(dic, aff)
    except (OSError, ValueError) as e:
        raise CheckerError(Detector.DICTIONARY, f"Failed to read dictionary {dic}: {e}") from e
    # 追加辞書は明示指定なので、存在しなければエラー
    for extra in config.extra_dictionaries:
        logger.debug("Adding extra dictionary %s", extra)
        if not extra.is_file():
            raise CheckerError(Detector.DICTIONARY, f"Extra dictionary {extra} is not a file")
        try:
            affixes = extra.with_suffix(".aff")
            if extra.suffix.lower() == ".dic" and affixes.is_file():
                dictionary.add_hunspell(open_hunspell(extra, affixes))
            else:
                dictionary.add_words(load_dict([extra]))
        except (OSError, ValueError) as e:
            raise CheckerError(Detector.DICTIONARY, f"Failed to load extra dictionary {extra}: {e}") from e
    return dictionary


class DictionaryChecker:
    detector = Detector.DICTIONARY

    def check(self, docu: Documentation, quirks: Quirks | None, config: DictionaryConfig) -> SuggestionSet:
        if not is_available():
            raise CheckerError(self.detector, "'rapidfuzz' and 'spylls' are required")
        dictionary = load_dictionary(config)
        return self.check_with(dictionary, docu, quirks, config)

    def check_with(
        self,
        dictionary: Dictionary,
        docu: Documentation,
        quirks: Quirks | None,
        config: DictionaryConfig,
    ) -> SuggestionSet:
        suggestions = SuggestionSet()
        for origin, chunks in docu:
            logger.debug("Processing %s", origin)
            for chunk in chunks:
                plain = chunk.erase_markdown()
                txt = plain.as_str()
                for token in tokenize(txt):
                    word = txt[token.start:token.stop]
                    if dictionary.check(word):
                        continue
                    trimmed = quirks.check_quirk(word) if quirks else None
                    if trimmed is not None and dictionary.check(trimmed):
                        continue
                    logger.debug("No match for word (plain range: %r): >%s<", token, word)
                    # 1文字の候補はほぼ役に立たない
                    replacements = [
                        x for x in dictionary.suggest(word, limit=config.limit, score_cutoff=config.score_cutoff)
                        if len(x) > 1
                    ]
                    for sub_range, span in plain.find_spans(token).items():
                        suggestions.add(
                            origin,
                            Suggestion(
                                detector=self.detector,
                                origin=origin,
                                chunk=chunk,
                                range=sub_range,
                                span=span,
                                snippet=word,
                                replacements=list(replacements),
                                description=DESCRIPTION,
                            ),
                        )
        return suggestions


__all__ = ["DictionaryChecker", "find_dictionary", "load_dictionary", "DESCRIPTION"]
