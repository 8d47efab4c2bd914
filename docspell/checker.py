"""チェッカーの共通インターフェースと実行のとりまとめ。

各チェッカーはドキュメント集合全体を読み取り専用で受け取り、
自前の SuggestionSet を返します。外部リソース (辞書, LanguageTool) は
check() の呼び出し中だけチェッカーが専有します。
結果はすべてのチェッカーが完了してから、設定順にオリジンごとに併合します。
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Protocol, Tuple

from .config import Config
from .documentation import Documentation
from .quirks import Quirks
from .suggestion import Detector, SuggestionSet

logger = logging.getLogger(__name__)


class CheckerError(RuntimeError):
    """チェッカーの設定不備やバックエンド不達。そのチェッカーの実行のみ中断する。"""

    def __init__(self, backend: Detector | str, message: str):
        self.backend = str(backend)
        super().__init__(f"{self.backend}: {message}")


class Checker(Protocol):
    detector: Detector

    def check(self, docu: Documentation, quirks: Quirks | None, config: Any) -> SuggestionSet:
        """ドキュメント集合を検査し、検出結果を返す"""
        ...


def enabled_checkers(config: Config) -> List[Tuple[Checker, Any]]:
    """設定で有効なチェッカーと、その専用設定の組を設定順に返す。"""
    from .lt_checker import LanguageToolChecker
    from .spellcheck import DictionaryChecker

    checkers: List[Tuple[Checker, Any]] = []
    if config.dictionary is not None:
        checkers.append((DictionaryChecker(), config.dictionary))
    if config.languagetool is not None:
        checkers.append((LanguageToolChecker(), config.languagetool))
    return checkers


def run_checkers(docu: Documentation, config: Config, jobs: int = 1) -> SuggestionSet:
    quirks = Quirks.from_config(config)
    checkers = enabled_checkers(config)
    if not checkers:
        logger.warning("No checker is enabled")
    results: List[SuggestionSet] = []
    if jobs and jobs > 1 and len(checkers) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as ex:
            futs = [ex.submit(checker.check, docu, quirks, cfg) for checker, cfg in checkers]
            # 最初のエラーをそのまま送出する
            results = [fut.result() for fut in futs]
    else:
        for checker, cfg in checkers:
            logger.debug("Running %s checker", checker.detector)
            results.append(checker.check(docu, quirks, cfg))

    combined = SuggestionSet()
    for result in results:
        combined.join(result)
    return combined


__all__ = ["Checker", "CheckerError", "enabled_checkers", "run_checkers"]
