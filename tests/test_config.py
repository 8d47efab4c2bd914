import json
import tomllib

import pytest

from docspell.config import Config, ConfigError, DictionaryConfig


def test_defaults():
    config = Config()
    assert config.dictionary == DictionaryConfig()
    assert config.languagetool is None
    assert config.quirks == ["quoted", "single-quoted"]


def test_from_dict_resolves_relative_paths(tmp_path):
    config = Config.from_dict(
        {
            "quirks": ["multipicity-x-suffix"],
            "dictionary": {"lang": "en_GB", "searchDirs": ["dicts"], "useBuiltinSearchDirs": False},
            "languagetool": {"url": "http://127.0.0.1:8081"},
        },
        base=tmp_path,
    )
    assert config.dictionary.lang == "en_GB"
    assert config.dictionary.all_search_dirs() == [tmp_path / "dicts"]
    assert config.languagetool.url == "http://127.0.0.1:8081"
    assert config.quirks == ["multipicity-x-suffix"]


def test_disabled_section():
    assert Config.from_dict({"dictionary": {"enabled": False}}).dictionary is None


def test_invalid_values():
    with pytest.raises(ConfigError):
        Config.from_dict({"dictionary": {"searchDirs": "not-a-list"}})
    with pytest.raises(ConfigError):
        Config.from_dict({"dictionary": {"limit": "many"}})
    with pytest.raises(ConfigError):
        Config.from_dict({"quirks": "quoted"})


def test_load_formats(tmp_path):
    (tmp_path / "docspell.toml").write_text('[dictionary]\nlang = "de_DE"\n', encoding="utf-8")
    assert Config.load_from(tmp_path).dictionary.lang == "de_DE"

    js = tmp_path / "cfg.json"
    js.write_text(json.dumps({"languagetool": {"lang": "fr"}}), encoding="utf-8")
    assert Config.load_from(js).languagetool.lang == "fr"

    yml = tmp_path / "cfg.yaml"
    yml.write_text("quirks:\n  - quoted\n", encoding="utf-8")
    assert Config.load_from(yml).quirks == ["quoted"]

    py = tmp_path / "pyproject.toml"
    py.write_text('[tool.docspell]\nquirks = []\n', encoding="utf-8")
    assert Config.load_from(py).quirks == []


def test_load_errors(tmp_path):
    with pytest.raises(ConfigError):
        Config.load_from(tmp_path / "missing.toml")
    bad = tmp_path / "bad.toml"
    bad.write_text("[dictionary\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        Config.load_from(bad)


def test_discover_prefers_local_file(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    assert Config.discover(tmp_path) == Config()
    (tmp_path / "pyproject.toml").write_text('[tool.docspell]\nquirks = ["quoted"]\n', encoding="utf-8")
    assert Config.discover(tmp_path).quirks == ["quoted"]
    (tmp_path / "docspell.toml").write_text('quirks = []\n', encoding="utf-8")
    assert Config.discover(tmp_path).quirks == []


def test_select_checkers():
    config = Config()
    warnings = config.select_checkers(["dictionary", "languagetool", "bogus"])
    assert config.dictionary is not None
    assert warnings == ["Unknown checker 'bogus'", "LanguageTool checker was never configured."]
    config.select_checkers(["languagetool"])
    assert config.dictionary is None


def test_toml_round_trip(tmp_path):
    config = Config.full()
    config.dictionary.search_dirs = [tmp_path / "dicts"]
    data = tomllib.loads(config.to_toml())
    assert data["dictionary"]["lang"] == "en_US"
    assert data["languagetool"] == {"lang": "en-US"}
    assert Config.from_dict(data) == config


def test_write_requires_force(tmp_path):
    path = Config.full().write_to(tmp_path)
    assert path == tmp_path / "docspell.toml"
    with pytest.raises(ConfigError, match="--force"):
        Config.full().write_to(path)
    Config().write_to(path, force=True)
    assert Config.load_from(path).languagetool is None
