import pytest

from docspell.config import DictionaryConfig

DIC = """\
12
test/S
text
line/S
first
second
the
and
is
a
word/S
hello
world
"""

AFF = """\
SET UTF-8

SFX S Y 1
SFX S 0 s .
"""


@pytest.fixture
def dict_dir(tmp_path):
    d = tmp_path / "dicts"
    d.mkdir()
    (d / "en_US.dic").write_text(DIC, encoding="utf-8")
    (d / "en_US.aff").write_text(AFF, encoding="utf-8")
    return d


@pytest.fixture
def dict_config(dict_dir):
    return DictionaryConfig(search_dirs=[dict_dir], use_builtin_search_dirs=False)
