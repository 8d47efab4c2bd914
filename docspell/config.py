"""設定の読み込み/書き出し。

対応形式:
- docspell.toml (TOML)
- pyproject.toml の [tool.docspell] テーブル
- .json / .yaml / .yml (YAML は PyYAML が必要)

例 (docspell.toml):

    quirks = ["quoted", "single-quoted"]

    [dictionary]
    lang = "en_US"
    searchDirs = ["dicts"]
    extraDictionaries = ["project-words.txt"]

    [languagetool]
    url = "http://127.0.0.1:8081"

相対パスは設定ファイルのあるディレクトリを基準に解決します。
"""
from __future__ import annotations

import json
import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List

try:
    import yaml  # type: ignore
except ImportError:  # pragma: no cover
    yaml = None  # YAML未インストール時は TOML/JSON のみ

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "docspell.toml"
CHECKER_NAMES = ("dictionary", "languagetool")

BUILTIN_SEARCH_DIRS = (
    Path("/usr/share/hunspell"),
    Path("/usr/share/myspell"),
    Path("/usr/share/myspell/dicts"),
    Path("/usr/local/share/hunspell"),
    Path("/Library/Spelling"),
    Path.home() / "Library" / "Spelling",
)


class ConfigError(ValueError):
    pass


def _paths(values: Any, base: Path | None, key: str) -> List[Path]:
    if values is None:
        return []
    if not isinstance(values, list):
        raise ConfigError(f"'{key}' must be a list of paths")
    paths = []
    for value in values:
        path = Path(os.path.expanduser(str(value)))
        if base is not None and not path.is_absolute():
            path = base / path
        paths.append(path)
    return paths


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any] | None:
    section = data.get(key)
    if section is None:
        return None
    if not isinstance(section, dict):
        raise ConfigError(f"'{key}' must be a table")
    if not section.get("enabled", True):
        return None
    return section


@dataclass
class DictionaryConfig:
    lang: str = "en_US"
    search_dirs: List[Path] = field(default_factory=list)
    extra_dictionaries: List[Path] = field(default_factory=list)
    use_builtin_search_dirs: bool = True
    score_cutoff: float = 70.0
    limit: int = 5

    def all_search_dirs(self) -> List[Path]:
        dirs = list(self.search_dirs)
        if self.use_builtin_search_dirs:
            dirs.extend(d for d in BUILTIN_SEARCH_DIRS if d not in dirs)
        return dirs

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base: Path | None = None) -> "DictionaryConfig":
        try:
            return cls(
                lang=str(data.get("lang", cls.lang)),
                search_dirs=_paths(data.get("searchDirs"), base, "searchDirs"),
                extra_dictionaries=_paths(data.get("extraDictionaries"), base, "extraDictionaries"),
                use_builtin_search_dirs=bool(data.get("useBuiltinSearchDirs", True)),
                score_cutoff=float(data.get("scoreCutoff", cls.score_cutoff)),
                limit=int(data.get("limit", cls.limit)),
            )
        except ConfigError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigError(f"invalid [dictionary] settings: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lang": self.lang,
            "searchDirs": [str(p) for p in self.search_dirs],
            "extraDictionaries": [str(p) for p in self.extra_dictionaries],
            "useBuiltinSearchDirs": self.use_builtin_search_dirs,
            "scoreCutoff": self.score_cutoff,
            "limit": self.limit,
        }


@dataclass
class LanguageToolConfig:
    url: str | None = None
    lang: str = "en-US"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LanguageToolConfig":
        url = data.get("url")
        return cls(url=str(url) if url else None, lang=str(data.get("lang", cls.lang)))

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"lang": self.lang}
        if self.url:
            out["url"] = self.url
        return out


def _default_quirks() -> List[str]:
    return ["quoted", "single-quoted"]


@dataclass
class Config:
    dictionary: DictionaryConfig | None = field(default_factory=DictionaryConfig)
    languagetool: LanguageToolConfig | None = None
    quirks: List[str] = field(default_factory=_default_quirks)

    @classmethod
    def full(cls) -> "Config":
        """すべてのチェッカーを有効にした設定。"""
        return cls(dictionary=DictionaryConfig(), languagetool=LanguageToolConfig())

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base: Path | None = None) -> "Config":
        if not isinstance(data, dict):
            raise ConfigError("configuration must be a table/mapping")
        config = cls()
        if "dictionary" in data:
            section = _section(data, "dictionary")
            config.dictionary = DictionaryConfig.from_dict(section, base) if section is not None else None
        if "languagetool" in data:
            section = _section(data, "languagetool")
            config.languagetool = LanguageToolConfig.from_dict(section) if section is not None else None
        if "quirks" in data:
            quirks = data["quirks"]
            if not isinstance(quirks, list):
                raise ConfigError("'quirks' must be a list of names")
            config.quirks = [str(q) for q in quirks]
        return config

    @classmethod
    def load_from(cls, path: str | Path) -> "Config":
        p = Path(path)
        if p.is_dir():
            p = p / DEFAULT_CONFIG_NAME
        if not p.is_file():
            raise ConfigError(f"configuration file {p} does not exist")
        try:
            text = p.read_text(encoding="utf-8")
            suffix = p.suffix.lower()
            if suffix in {".yaml", ".yml"}:
                if yaml is None:
                    raise ConfigError("PyYAMLがインストールされていないためYAMLは読み込めません。'pip install PyYAML' を実行してください")
                data = yaml.safe_load(text) or {}
            elif suffix == ".json":
                data = json.loads(text)
            else:
                data = tomllib.loads(text)
        except ConfigError:
            raise
        except Exception as e:  # OSError, TOMLDecodeError, yaml.YAMLError など
            raise ConfigError(f"failed to load config {p}: {e}") from e
        if p.name == "pyproject.toml":
            data = data.get("tool", {}).get("docspell", {})
        logger.debug("Loaded configuration from %s", p)
        return cls.from_dict(data, base=p.parent)

    @staticmethod
    def user_path() -> Path:
        base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
        return Path(base) / "docspell" / DEFAULT_CONFIG_NAME

    @classmethod
    def discover(cls, root: str | Path | None = None) -> "Config":
        """root の docspell.toml → pyproject.toml [tool.docspell] → ユーザー設定 → 既定値 の順に探す。"""
        root = Path(root) if root is not None else Path.cwd()
        candidate = root / DEFAULT_CONFIG_NAME
        if candidate.is_file():
            return cls.load_from(candidate)
        pyproject = root / "pyproject.toml"
        if pyproject.is_file():
            try:
                data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
                raise ConfigError(f"failed to load config {pyproject}: {e}") from e
            section = data.get("tool", {}).get("docspell")
            if section is not None:
                logger.debug("Loaded configuration from %s", pyproject)
                return cls.from_dict(section, base=root)
        user = cls.user_path()
        if user.is_file():
            return cls.load_from(user)
        logger.debug("No configuration file found, using defaults")
        return cls()

    def select_checkers(self, names: Iterable[str]) -> List[str]:
        """コマンドラインで指定されたチェッカーとの積集合を取る。警告文の一覧を返す。"""
        wanted = {name.strip().lower() for name in names if name.strip()}
        warnings = [f"Unknown checker '{name}'" for name in sorted(wanted - set(CHECKER_NAMES))]
        if "dictionary" not in wanted:
            self.dictionary = None
        elif self.dictionary is None:
            warnings.append("Dictionary checker was never configured.")
        if "languagetool" not in wanted:
            self.languagetool = None
        elif self.languagetool is None:
            warnings.append("LanguageTool checker was never configured.")
        return warnings

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"quirks": list(self.quirks)}
        if self.dictionary is not None:
            out["dictionary"] = self.dictionary.to_dict()
        else:
            out["dictionary"] = {"enabled": False}
        if self.languagetool is not None:
            out["languagetool"] = self.languagetool.to_dict()
        return out

    def to_toml(self) -> str:
        lines: List[str] = []
        tables: List[tuple[str, Dict[str, Any]]] = []
        for key, value in self.to_dict().items():
            if isinstance(value, dict):
                tables.append((key, value))
            else:
                lines.append(f"{key} = {_toml_value(value)}")
        for name, table in tables:
            lines.append("")
            lines.append(f"[{name}]")
            for key, value in table.items():
                lines.append(f"{key} = {_toml_value(value)}")
        return "\n".join(lines) + "\n"

    def write_to(self, path: str | Path, force: bool = False) -> Path:
        p = Path(path)
        if p.is_dir():
            p = p / DEFAULT_CONFIG_NAME
        if p.exists() and not force:
            raise ConfigError(f"Attempting to overwrite {p} requires `--force`.")
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(self.to_toml(), encoding="utf-8")
        return p


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, list):
        return "[" + ", ".join(_toml_value(v) for v in value) + "]"
    # JSON の文字列リテラルは TOML の basic string としても有効
    return json.dumps(str(value))


__all__ = [
    "Config",
    "ConfigError",
    "DictionaryConfig",
    "LanguageToolConfig",
    "BUILTIN_SEARCH_DIRS",
    "CHECKER_NAMES",
    "DEFAULT_CONFIG_NAME",
]
