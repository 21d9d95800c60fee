"""
Tests for configuration module.
"""

import pytest

from nightjar.config import Settings, get_settings


class TestSettings:
    """Test the Settings configuration class."""

    def test_default_settings(self, monkeypatch):
        """Test default settings initialization."""
        for name in ("NIGHTJAR_LOG_LEVEL", "NIGHTJAR_STRATEGY", "NIGHTJAR_HTTP_TIMEOUT", "NIGHTJAR_DEBUG"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings()

        assert settings.log_level == "INFO"
        assert settings.extraction_strategy == "anchor"
        assert settings.rule_window_chars == 2000
        assert settings.rule_window_lead == 20
        assert settings.http_timeout is None
        assert settings.debug is False

    def test_settings_from_env(self, monkeypatch):
        """Test loading settings from environment variables."""
        monkeypatch.setenv("NIGHTJAR_LOG_LEVEL", "debug")
        monkeypatch.setenv("NIGHTJAR_STRATEGY", "delimiter")
        monkeypatch.setenv("NIGHTJAR_HTTP_TIMEOUT", "12.5")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")

        settings = Settings()

        assert settings.log_level == "DEBUG"
        assert settings.extraction_strategy == "delimiter"
        assert settings.http_timeout == 12.5
        assert settings.ai_enabled

    def test_env_values_are_validated(self, monkeypatch):
        """Test that values read from the environment go through the validators."""
        monkeypatch.setenv("NIGHTJAR_RULE_WINDOW_CHARS", "0")
        with pytest.raises(ValueError, match="rule_window_chars must be positive"):
            Settings()

        monkeypatch.delenv("NIGHTJAR_RULE_WINDOW_CHARS")
        monkeypatch.setenv("NIGHTJAR_STRATEGY", "bogus")
        with pytest.raises(ValueError, match="extraction_strategy must be one of"):
            Settings()

        monkeypatch.delenv("NIGHTJAR_STRATEGY")
        monkeypatch.setenv("NIGHTJAR_LOG_LEVEL", "loud")
        with pytest.raises(ValueError, match="Unknown log level"):
            Settings()

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            Settings(log_level="LOUD")

    def test_invalid_strategy(self):
        with pytest.raises(ValueError, match="extraction_strategy must be one of anchor, delimiter"):
            Settings(extraction_strategy="regex")

    def test_window_validation(self):
        with pytest.raises(ValueError, match="rule_window_chars must be positive"):
            Settings(rule_window_chars=0)
        with pytest.raises(ValueError, match="rule_window_lead must not be negative"):
            Settings(rule_window_lead=-1)

    def test_effective_log_level(self):
        assert Settings(log_level="WARNING", debug=True).effective_log_level == "DEBUG"
        assert Settings(log_level="WARNING", debug=False).effective_log_level == "WARNING"

    def test_ai_disabled_without_key(self):
        assert not Settings(openai_api_key=None).ai_enabled
        assert not Settings(openai_api_key="").ai_enabled

    def test_log_file_path_creation(self, tmp_path):
        """Test log file path directory creation."""
        log_path = tmp_path / "logs" / "nightjar.log"
        settings = Settings(log_file_path=log_path)

        assert not log_path.parent.exists()

        result = settings.get_log_file_path()

        assert result == log_path
        assert log_path.parent.exists()

    def test_get_settings_singleton(self):
        """Test that get_settings returns the same instance."""
        assert get_settings() is get_settings()
