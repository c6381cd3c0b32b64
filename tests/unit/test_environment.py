"""Tests for environment configuration."""

import logging

import pytest

from modelkit.core.environment import (
    LogFormat,
    ModelkitEnv,
    get_environment_info,
    get_log_format,
    get_log_level,
    get_modelkit_env,
    is_production,
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Start every test without modelkit variables set."""
    for name in ("MODELKIT_ENV", "MODELKIT_LOG_LEVEL", "MODELKIT_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)


class TestModelkitEnv:
    """Test MODELKIT_ENV parsing."""

    def test_default_is_development(self):
        assert get_modelkit_env() == ModelkitEnv.DEVELOPMENT

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("production", ModelkitEnv.PRODUCTION),
            ("PROD", ModelkitEnv.PRODUCTION),
            ("test", ModelkitEnv.TEST),
            ("testing", ModelkitEnv.TEST),
            ("dev", ModelkitEnv.DEVELOPMENT),
        ],
    )
    def test_values_and_aliases(self, monkeypatch, value, expected):
        monkeypatch.setenv("MODELKIT_ENV", value)
        assert get_modelkit_env() == expected

    def test_unknown_value_warns(self, monkeypatch, caplog):
        monkeypatch.setenv("MODELKIT_ENV", "staging")
        with caplog.at_level(logging.WARNING, logger="modelkit.core.environment"):
            assert get_modelkit_env() == ModelkitEnv.DEVELOPMENT
        assert "Unknown MODELKIT_ENV value 'staging'" in caplog.text

    def test_is_production(self, monkeypatch):
        assert is_production() is False
        monkeypatch.setenv("MODELKIT_ENV", "production")
        assert is_production() is True


class TestLogSettings:
    """Test log level and format resolution."""

    def test_development_defaults_to_debug(self):
        assert get_log_level() == logging.DEBUG

    def test_other_environments_default_to_warning(self, monkeypatch):
        monkeypatch.setenv("MODELKIT_ENV", "production")
        assert get_log_level() == logging.WARNING

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("MODELKIT_LOG_LEVEL", "error")
        assert get_log_level() == logging.ERROR

    def test_override_wins(self, monkeypatch):
        monkeypatch.setenv("MODELKIT_LOG_LEVEL", "error")
        assert get_log_level("info") == logging.INFO
        assert get_log_level(logging.CRITICAL) == logging.CRITICAL

    def test_unknown_level_falls_back_to_warning(self):
        assert get_log_level("chatty") == logging.WARNING

    def test_format(self, monkeypatch):
        assert get_log_format() == LogFormat.CONSOLE
        monkeypatch.setenv("MODELKIT_LOG_FORMAT", "JSONL")
        assert get_log_format() == LogFormat.JSONL
        assert get_log_format("console") == LogFormat.CONSOLE

    def test_environment_info(self, monkeypatch):
        monkeypatch.setenv("MODELKIT_ENV", "test")
        assert get_environment_info() == {
            "env": "test",
            "log_level": "WARNING",
            "log_format": "console",
        }
