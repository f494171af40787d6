"""
Unit tests for Config loading, validation and environment parsing.
"""

import logging

import pytest

from switchboard.core.config import Config, Environment
from switchboard.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def restore_config():
    """Config is class-level state; reload it from the real environment afterwards."""
    yield
    Config.load()


class TestEnvironment:
    def test_parse_is_case_insensitive(self):
        assert Environment.from_string(" PRODUCTION ") is Environment.PRODUCTION

    def test_unknown_falls_back_to_development(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert Environment.from_string("moon") is Environment.DEVELOPMENT
        assert "moon" in caplog.text


class TestLoad:
    def test_defaults(self, monkeypatch):
        for key in ("DATABASE_URL", "DEFAULT_GUILD_IDS", "SYNC_COMMANDS", "DATABASE_POOL_SIZE", "LOG_JSON"):
            monkeypatch.delenv(key, raising=False)

        Config.load()

        assert Config.DATABASE_URL is None
        assert Config.DEFAULT_GUILD_IDS == []
        assert Config.SYNC_COMMANDS is True
        assert Config.DATABASE_POOL_SIZE == 5
        assert Config.LOG_JSON is None

    def test_guild_ids_skip_bad_entries(self, monkeypatch, caplog):
        monkeypatch.setenv("DEFAULT_GUILD_IDS", "1, 2,abc,,3")

        with caplog.at_level(logging.WARNING):
            Config.load()

        assert Config.DEFAULT_GUILD_IDS == [1, 2, 3]
        assert "abc" in caplog.text

    @pytest.mark.parametrize("raw, expected", [("off", False), ("YES", True), ("maybe", True)])
    def test_boolean_parsing(self, monkeypatch, raw, expected):
        monkeypatch.setenv("SYNC_COMMANDS", raw)

        Config.load()

        assert Config.SYNC_COMMANDS is expected

    @pytest.mark.parametrize("raw", ["zero", "0", "999"])
    def test_pool_size_out_of_range_uses_default(self, monkeypatch, raw):
        monkeypatch.setenv("DATABASE_POOL_SIZE", raw)

        Config.load()

        assert Config.DATABASE_POOL_SIZE == 5

    def test_environment_checks(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")

        Config.load()

        assert Config.is_production()
        assert not Config.is_testing()


class TestValidate:
    def test_missing_token_raises(self, monkeypatch):
        monkeypatch.setenv("DISCORD_TOKEN", "")

        with pytest.raises(ConfigurationError) as exc_info:
            Config.validate()

        assert exc_info.value.config_key == "DISCORD_TOKEN"

    def test_invalid_log_level_is_reset(self, monkeypatch):
        monkeypatch.setenv("DISCORD_TOKEN", "abc")
        monkeypatch.setenv("LOG_LEVEL", "chatty")

        Config.validate()

        assert Config.LOG_LEVEL == "INFO"

    def test_summary_hides_secrets(self, monkeypatch):
        monkeypatch.setenv("DISCORD_TOKEN", "super-secret")
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///bot.db")

        Config.validate()
        summary = Config.get_config_summary()

        assert summary["discord_token_set"] is True
        assert summary["database_url_set"] is True
        assert "super-secret" not in str(summary)
