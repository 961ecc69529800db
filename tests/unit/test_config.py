"""Unit tests for configuration module."""

from __future__ import annotations

import pytest

from tablestakes.infrastructure.config import Config, IOConfig, ObservabilityConfig, get_config


@pytest.mark.unit
class TestConfig:
    """Tests for Config class."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = Config()

        assert config.io.encoding == "utf-8"
        assert config.io.delimiter == "\t"
        assert config.observability.log_level == "INFO"
        assert config.observability.log_format == "console"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Nested settings are read from prefixed environment variables."""
        monkeypatch.setenv("TABLESTAKES_IO__ENCODING", "latin-1")
        monkeypatch.setenv("TABLESTAKES_OBSERVABILITY__LOG_LEVEL", "DEBUG")

        config = Config()

        assert config.io.encoding == "latin-1"
        assert config.observability.log_level == "DEBUG"

    def test_invalid_delimiter(self) -> None:
        """Delimiters are single, non-newline characters."""
        with pytest.raises(ValueError):
            IOConfig(delimiter="")
        with pytest.raises(ValueError):
            IOConfig(delimiter="||")
        with pytest.raises(ValueError):
            IOConfig(delimiter="\n")

    def test_invalid_log_level(self) -> None:
        """Unknown log levels are rejected."""
        with pytest.raises(ValueError):
            ObservabilityConfig(log_level="LOUD")  # type: ignore[arg-type]


@pytest.mark.unit
class TestConfigSingleton:
    """Tests for get_config singleton."""

    def test_get_config_returns_same_instance(self) -> None:
        """Test that get_config returns the same instance."""
        config1 = get_config()
        config2 = get_config()
        assert config1 is config2
