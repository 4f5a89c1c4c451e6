"""
Tests for Config.
"""

import pytest

from nichescout.core.config import Config


class TestResolveApiKey:
    def test_explicit_key_wins(self, monkeypatch):
        monkeypatch.setattr(Config, "YT_API_KEY", "env-key")
        assert Config.resolve_api_key("cli-key") == "cli-key"

    def test_explicit_key_stripped(self):
        assert Config.resolve_api_key("  cli-key \n") == "cli-key"

    def test_falls_back_to_env(self, monkeypatch):
        monkeypatch.setattr(Config, "YT_API_KEY", "env-key")
        assert Config.resolve_api_key() == "env-key"
        assert Config.resolve_api_key("   ") == "env-key"

    def test_missing(self, monkeypatch):
        monkeypatch.setattr(Config, "YT_API_KEY", "")
        with pytest.raises(ValueError, match="API key is required"):
            Config.resolve_api_key()


class TestValidate:
    def test_valid(self, monkeypatch):
        monkeypatch.setattr(Config, "YT_API_KEY", "env-key")
        assert Config.validate() is True

    def test_missing_key(self, monkeypatch):
        monkeypatch.setattr(Config, "YT_API_KEY", "")
        with pytest.raises(ValueError, match="YT_API_KEY"):
            Config.validate()


class TestDefaults:
    def test_get(self):
        assert Config.get("CHANNEL_SPY_DAYS") == 365
        assert Config.get("OUTPUT_DIR") is None
        assert Config.get("NOT_A_SETTING", "fallback") == "fallback"

    def test_analysis_defaults_are_positive(self):
        assert Config.DEFAULT_MAX_PAGES > 0
        assert Config.DEFAULT_TOP_N > 0
        assert Config.DEFAULT_MAX_IDEAS > 0
