import io
import json

import pytest

from checksum import cli as cli_module
from checksum import settings
from checksum.core.logger import LineLogger
from checksum.errors import FatalError


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    cfg = tmp_path / "settings.json"
    monkeypatch.setenv("CHECKSUM_SETTINGS", str(cfg))
    yield cfg
    monkeypatch.delenv("CHECKSUM_SETTINGS")
    settings.load()


def _log():
    return LineLogger(out=io.StringIO(), err=io.StringIO())


def test_defaults_without_file(settings_file):
    settings.load()
    assert settings.get("max_workers") is None
    assert settings.get("buffer_size") == 4 * 1024 * 1024
    assert settings.get("queue_size") == 1
    assert settings.get("outra", 7) == 7


def test_file_overrides_defaults(settings_file):
    settings_file.write_text(json.dumps({"max_workers": 4}), encoding="utf-8")
    settings.load()
    assert settings.get("max_workers") == 4

    # opção da CLI ganha; 0 volta a "sem tecto"
    assert cli_module._resolve_max_workers(cli_module.Options(), _log()) == 4
    assert cli_module._resolve_max_workers(cli_module.Options(max_workers=0), _log()) is None
    assert cli_module._resolve_max_workers(cli_module.Options(max_workers=2), _log()) == 2


@pytest.mark.parametrize("value,expected", [(None, 65536), (0, 65536), (1024, 1024)])
def test_setting_int_fallbacks(settings_file, value, expected):
    settings_file.write_text(json.dumps({"buffer_size": value}), encoding="utf-8")
    settings.load()
    assert cli_module._setting_int(_log(), "buffer_size", 65536) == expected


@pytest.mark.parametrize("value", [-1, "4", 2.5, True])
def test_setting_int_rejects_bad_values(settings_file, value):
    settings_file.write_text(json.dumps({"max_workers": value}), encoding="utf-8")
    settings.load()
    with pytest.raises(FatalError, match="invalid setting max_workers"):
        cli_module._resolve_max_workers(cli_module.Options(), _log())


def test_malformed_file_ignored(settings_file, capsys):
    settings_file.write_text("{isto não é json", encoding="utf-8")
    settings.load()
    assert settings.get("max_workers") is None
    assert "ignoring" in capsys.readouterr().err
