"""
Tests for configuration management
"""

import json

import pytest

from sentichat.core.config import Config


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "sentichat" / "config.json"


class TestConfigLoading:
    """Test loading, defaults and merging"""

    def test_creates_default_file(self, config_path):
        config = Config(config_path)

        assert config_path.exists()
        assert config.get('server.base_url') == "http://localhost:5000"
        assert config.get('display.score_precision') == 4

    def test_user_values_merge_over_defaults(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text(json.dumps({"server": {"base_url": "http://remote:8000"}}))

        config = Config(config_path)

        assert config.get('server.base_url') == "http://remote:8000"
        assert config.get('server.timeout') == 30

    def test_invalid_json_falls_back_to_defaults(self, config_path, caplog):
        config_path.parent.mkdir(parents=True)
        config_path.write_text("{not json")

        with caplog.at_level("WARNING"):
            config = Config(config_path)

        assert config.get('server.base_url') == "http://localhost:5000"
        assert "Invalid JSON" in caplog.text

    def test_non_object_config(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text("[1, 2]")

        config = Config(config_path)

        assert config.get('display.render_markdown') is True

    def test_defaults_are_not_shared(self, config_path, tmp_path):
        first = Config(config_path)
        first.config['server']['base_url'] = "http://changed"

        second = Config(tmp_path / "other.json")

        assert second.get('server.base_url') == "http://localhost:5000"


class TestConfigAccess:
    """Test dot-notation get/set and env overrides"""

    def test_get_missing_key(self, config_path):
        config = Config(config_path)

        assert config.get('server.nope', 'fallback') == 'fallback'
        assert config.get('nope.deeper') is None

    def test_set_persists(self, config_path):
        config = Config(config_path)
        config.set('server.base_url', 'http://saved:9000')

        reloaded = Config(config_path)

        assert reloaded.get('server.base_url') == 'http://saved:9000'

    def test_set_creates_sections(self, config_path):
        config = Config(config_path)
        config.set('extra.flag', True)

        assert config.get('extra.flag') is True

    def test_env_overrides(self, config_path, monkeypatch):
        monkeypatch.setenv('SENTICHAT_BASE_URL', 'http://env:7000')
        monkeypatch.setenv('SENTICHAT_TIMEOUT', '12.5')

        config = Config(config_path)

        assert config.get_server_config() == {"base_url": "http://env:7000", "timeout": 12.5}

    def test_invalid_env_timeout_ignored(self, config_path, monkeypatch):
        monkeypatch.setenv('SENTICHAT_TIMEOUT', 'soon')

        config = Config(config_path)

        assert config.get('server.timeout') == 30
