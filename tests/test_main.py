import pytest
import requests

from ccvi_map import main as cli
from ccvi_map.data.provider import DataProvider


@pytest.fixture(autouse=True)
def offline(monkeypatch):
    def refuse(self, path, params=None):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(DataProvider, '_get_json', refuse)
    monkeypatch.setenv('CCVI_LOGGING__FILE', '')
    monkeypatch.setenv('CCVI_LOGGING__CONSOLE', 'false')


def test_renders_map_with_fallback_data(tmp_path, capsys):
    output = tmp_path / 'map.html'

    assert cli.main(['--indicator', 'exposure', '--output', str(output)]) == 0

    assert output.exists()
    assert 'Punjab' in output.read_text(encoding='utf-8')
    out = capsys.readouterr().out
    assert 'Source: built-in fallback data' in out
    assert 'Regions: 6' in out


def test_lists_fallback_options(capsys):
    assert cli.main(['--list-options']) == 0

    out = capsys.readouterr().out
    assert 'union_council' in out
    assert 'adaptive_capacity' in out


def test_missing_config_file_fails(capsys):
    assert cli.main(['--config', 'configs/does-not-exist.yaml']) == 1
    assert 'Configuration file not found' in capsys.readouterr().out
