"""docspell
ソースコード中のドキュメント (コメント/docstring) とマークダウンの綴り誤り検出ライブラリ。

主な提供機能:
- ソースファイルからドキュメントコメントを抽出し、元の行/桁を保ったままチャンク化
- マークダウン記法を除去したビューからの単語分割と辞書照合
- LanguageTool による文法チェック (任意)
- 検出位置 (ファイル/行/桁) を保った報告と自動修正
- CLI インターフェース
"""
from .chunk import CheckableChunk, ContentOrigin, OriginKind
from .checker import Checker, CheckerError, run_checkers
from .config import Config, ConfigError, DictionaryConfig, LanguageToolConfig
from .documentation import Documentation
from .overlay import PlainOverlay
from .quirks import Quirk, Quirks
from .span import LineColumn, Span
from .suggestion import Detector, Suggestion, SuggestionSet
from .tokenize import tokenize

__all__ = [
    "CheckableChunk",
    "Checker",
    "CheckerError",
    "Config",
    "ConfigError",
    "ContentOrigin",
    "Detector",
    "DictionaryConfig",
    "Documentation",
    "LanguageToolConfig",
    "LineColumn",
    "OriginKind",
    "PlainOverlay",
    "Quirk",
    "Quirks",
    "Span",
    "Suggestion",
    "SuggestionSet",
    "run_checkers",
    "tokenize",
]

__version__ = "0.1.0"
