"""
Tests for settings resolution.
"""

import json

import pytest
from unittest.mock import patch

from storyloom import config
from storyloom.config import Settings, get_settings

ENV_VARS = [
    "SUPABASE_URL", "SUPABASE_ANON_KEY", "SUPABASE_KEY", "SUPABASE_SERVICE_ROLE_KEY",
    "STORYLOOM_STORAGE", "STORYLOOM_KV_TABLE", "STORYLOOM_API_PREFIX", "STORYLOOM_API_URL",
    "STORYLOOM_PORT", "STORYLOOM_STORAGE_SECRET", "STORYLOOM_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestGetSettings:

    def test_defaults(self):
        settings = get_settings({})
        assert settings.port == 8081
        assert settings.api_prefix == "/api"
        assert settings.api_base_url == "http://127.0.0.1:8081/api"
        assert settings.storage_backend == "file"
        assert settings.kv_table == "kv_store"
        assert settings.log_level == "INFO"
        assert settings.has_supabase is False

    def test_env_overrides_config_file(self, monkeypatch):
        monkeypatch.setenv("STORYLOOM_PORT", "9000")
        settings = get_settings({"port": 7000, "storage_backend": "supabase"})
        assert settings.port == 9000
        assert settings.storage_backend == "supabase"
        assert settings.api_base_url == "http://127.0.0.1:9000/api"

    def test_legacy_supabase_key(self, monkeypatch):
        monkeypatch.setenv("SUPABASE_URL", "https://x.supabase.co")
        monkeypatch.setenv("SUPABASE_KEY", "anon")
        settings = get_settings({})
        assert settings.supabase_anon_key == "anon"
        assert settings.has_supabase is True

    def test_prefix_normalised(self, monkeypatch):
        monkeypatch.setenv("STORYLOOM_API_PREFIX", "v1/")
        assert get_settings({}).api_prefix == "/v1"

    def test_explicit_api_url(self, monkeypatch):
        monkeypatch.setenv("STORYLOOM_API_URL", "https://stories.example.com/api/")
        assert get_settings({}).api_base_url == "https://stories.example.com/api"

    def test_settings_dataclass_defaults(self):
        assert Settings().storage_backend == "file"


class TestConfigFile:

    def test_file_values_apply(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"storage_backend": "supabase"}), encoding="utf-8")
        with patch.object(config, "get_config_path", return_value=path):
            assert config.load_config() == {"storage_backend": "supabase"}
            assert get_settings().storage_backend == "supabase"

    def test_missing_or_broken_file(self, tmp_path):
        path = tmp_path / "config.json"
        with patch.object(config, "get_config_path", return_value=path):
            assert config.load_config() == {}
            path.write_text("{not json", encoding="utf-8")
            assert config.load_config() == {}
