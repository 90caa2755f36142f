"""
Unit tests for scanner configuration.

Tests defaults, environment variables and YAML loading.
"""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from src.fontscan.core.config import ScannerConfig, load_config_from_yaml
from src.fontscan.core.exceptions import (
    ConfigFileNotFoundError,
    ConfigLoadError,
    ConfigurationError,
    EmptyConfigFileError,
    InvalidYamlError,
)
from src.fontscan.core.models import ScanOptions


class TestScannerConfig:
    """Test ScannerConfig defaults and validation."""

    def test_defaults(self, isolated_env):
        """Test default configuration values."""
        config = ScannerConfig()

        assert config.use_cache is True
        assert config.cache_ttl_ms == 300_000
        assert config.max_depth == 3
        assert config.batch_size == 50
        assert config.max_workers == 8
        assert config.include_system_fonts is True
        assert config.include_user_fonts is True
        assert config.custom_dirs == []
        assert config.log_level == "INFO"

    def test_environment_variables(self, isolated_env, monkeypatch):
        """Test FONTSCAN_ environment variables override defaults."""
        monkeypatch.setenv("FONTSCAN_CACHE_TTL_MS", "1000")
        monkeypatch.setenv("FONTSCAN_MAX_DEPTH", "5")
        monkeypatch.setenv("FONTSCAN_USE_CACHE", "false")
        monkeypatch.setenv("FONTSCAN_CUSTOM_DIRS", '["/opt/fonts"]')
        monkeypatch.setenv("FONTSCAN_LOG_LEVEL", "debug")

        config = ScannerConfig()

        assert config.cache_ttl_ms == 1000
        assert config.max_depth == 5
        assert config.use_cache is False
        assert config.custom_dirs == [Path("/opt/fonts")]
        assert config.log_level == "DEBUG"

    def test_env_file(self, isolated_env):
        """Test values are read from a .env file in the working directory."""
        (isolated_env / ".env").write_text("FONTSCAN_BATCH_SIZE=7\n")

        assert ScannerConfig().batch_size == 7

    @pytest.mark.parametrize(
        ("field", "value"),
        [("cache_ttl_ms", 0), ("max_depth", 0), ("batch_size", 0), ("max_workers", 0)],
    )
    def test_invalid_values(self, isolated_env, field, value):
        """Test non-positive sizes are rejected."""
        with pytest.raises(ValidationError):
            ScannerConfig(**{field: value})

    def test_invalid_log_level(self, isolated_env):
        """Test unknown log levels are rejected."""
        with pytest.raises(ValidationError, match="Unknown log level"):
            ScannerConfig(log_level="chatty")

    def test_custom_dirs_expand_user(self, isolated_env):
        """Test ~ is expanded in custom directories."""
        config = ScannerConfig(custom_dirs=["~/fonts"])

        assert config.custom_dirs == [Path("~/fonts").expanduser()]


class TestYamlLoading:
    """Test loading configuration from YAML files."""

    def test_from_yaml(self, isolated_env):
        """Test values are read from YAML."""
        config_path = isolated_env / "fontscan.yaml"
        config_path.write_text(yaml.dump({"max_depth": 2, "use_cache": False}))

        config = ScannerConfig.from_yaml(config_path)

        assert config.max_depth == 2
        assert config.use_cache is False
        assert config.batch_size == 50

    def test_missing_file(self, isolated_env):
        """Test a missing file raises ConfigFileNotFoundError."""
        with pytest.raises(ConfigFileNotFoundError):
            ScannerConfig.from_yaml(isolated_env / "missing.yaml")

    def test_empty_file(self, isolated_env):
        """Test an empty file raises EmptyConfigFileError."""
        config_path = isolated_env / "empty.yaml"
        config_path.write_text("")

        with pytest.raises(EmptyConfigFileError):
            ScannerConfig.from_yaml(config_path)

    def test_invalid_yaml(self, isolated_env):
        """Test malformed YAML raises InvalidYamlError."""
        config_path = isolated_env / "broken.yaml"
        config_path.write_text("max_depth: [1, 2\n")

        with pytest.raises(InvalidYamlError):
            ScannerConfig.from_yaml(config_path)

    def test_invalid_values_in_yaml(self, isolated_env):
        """Test validation failures are wrapped in ConfigLoadError."""
        config_path = isolated_env / "bad.yaml"
        config_path.write_text(yaml.dump({"max_depth": 0}))

        with pytest.raises(ConfigLoadError) as exc_info:
            load_config_from_yaml(config_path, ScannerConfig)

        assert isinstance(exc_info.value, ConfigurationError)

    def test_env_and_yaml_prefers_yaml(self, isolated_env, monkeypatch):
        """Test an existing YAML file wins over the environment."""
        monkeypatch.setenv("FONTSCAN_MAX_DEPTH", "9")
        config_path = isolated_env / "fontscan.yaml"
        config_path.write_text(yaml.dump({"max_depth": 2}))

        assert ScannerConfig.from_env_and_yaml(yaml_path=config_path).max_depth == 2

    def test_env_and_yaml_without_yaml(self, isolated_env, monkeypatch):
        """Test the environment is used when no YAML file exists."""
        monkeypatch.setenv("FONTSCAN_MAX_DEPTH", "9")

        config = ScannerConfig.from_env_and_yaml(yaml_path=isolated_env / "missing.yaml")

        assert config.max_depth == 9


class TestScanOptionsFromConfig:
    """Test seeding scan options from configuration."""

    def test_from_config(self, isolated_env, tmp_path):
        """Test configuration values become option defaults."""
        config = ScannerConfig(max_depth=2, use_cache=False, custom_dirs=[tmp_path])

        options = ScanOptions.from_config(config)

        assert options.max_depth == 2
        assert options.use_cache is False
        assert options.custom_dirs == [tmp_path]

    def test_overrides(self, isolated_env):
        """Test keyword overrides win over configuration."""
        options = ScanOptions.from_config(ScannerConfig(), include_user_fonts=False)

        assert options.include_user_fonts is False
        assert options.include_system_fonts is True
