"""Unit tests for server configuration settings model.

Tests verify that the Settings model binds environment variables and that the
tool configuration file loader returns the per-capability blobs.
"""

import json
from pathlib import Path

import pytest

from toolmesh.server.core.config import OpenAIConfig, Settings, ToolsConfig, load_tools_config


def _settings() -> Settings:
    return Settings(_env_file=None)


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    def test_defaults(self, monkeypatch):
        for key in ("TOOLMESH_SERVER_PORT", "TOOLMESH_TOOLS_CONFIG", "TOOLMESH_ENABLED_TOOLS", "TOOLMESH_SEARCH_LIMIT"):
            monkeypatch.delenv(key, raising=False)

        s = _settings()

        assert s.server_port == 8080
        assert s.tools_config == "config.json"
        assert s.enabled_tools == []
        assert s.search_limit == 5

    def test_server_binding(self, monkeypatch):
        monkeypatch.setenv("TOOLMESH_SERVER_HOST", "127.0.0.1")
        monkeypatch.setenv("TOOLMESH_SERVER_PORT", "9090")
        monkeypatch.setenv("TOOLMESH_LOG_LEVEL", "DEBUG")

        s = _settings()

        assert s.server_host == "127.0.0.1"
        assert s.server_port == 9090
        assert s.log_level == "DEBUG"

    def test_enabled_tools_parsed_from_json_list(self, monkeypatch):
        monkeypatch.setenv("TOOLMESH_ENABLED_TOOLS", '["web_search", "browseruse"]')

        assert _settings().enabled_tools == ["web_search", "browseruse"]

    def test_openai_group(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("OPENAI_MODEL", "gpt-4o-mini")
        monkeypatch.setenv("OPENAI_BASE_URL", "http://localhost:11434/v1")

        openai = _settings().openai

        assert isinstance(openai, OpenAIConfig)
        assert openai.api_key is not None
        assert openai.api_key.get_secret_value() == "sk-test"
        assert openai.model == "gpt-4o-mini"
        assert openai.base_url == "http://localhost:11434/v1"

    def test_api_key_is_not_rendered(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-secret")

        assert "sk-secret" not in repr(_settings().openai)


class TestLoadToolsConfig:
    """Test the JSON tool configuration loader."""

    def test_loads_tools_section(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps({"server_port": "8080", "tools": {"web_search": {"max_results": 3}, "browseruse": {}}}),
            encoding="utf-8",
        )

        cfg = load_tools_config(path)

        assert cfg.server_port == "8080"
        assert cfg.tools == {"web_search": {"max_results": 3}, "browseruse": {}}

    def test_missing_file_yields_empty_config(self, tmp_path: Path):
        assert load_tools_config(tmp_path / "absent.json") == ToolsConfig()

    def test_invalid_json_raises_value_error(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid tool configuration file"):
            load_tools_config(path)
