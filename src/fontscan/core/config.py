"""Configuration management for the font scanning system."""

import logging
from pathlib import Path

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import (
    ConfigFileNotFoundError,
    ConfigLoadError,
    ConfigurationError,
    EmptyConfigFileError,
    InvalidLogLevelError,
    InvalidYamlError,
)

DEFAULT_CACHE_TTL_MS = 300_000
DEFAULT_BATCH_SIZE = 50
DEFAULT_MAX_DEPTH = 3


class ScannerConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FONTSCAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    """Font scanner configuration."""

    # Cache
    use_cache: bool = Field(True, description="Serve repeated scans from the result cache")
    cache_ttl_ms: int = Field(DEFAULT_CACHE_TTL_MS, gt=0, description="Cache time-to-live")

    # Traversal
    max_depth: int = Field(DEFAULT_MAX_DEPTH, ge=1, description="Directory recursion depth")
    include_system_fonts: bool = Field(True, description="Scan system font directories")
    include_user_fonts: bool = Field(True, description="Scan per-user font directories")
    custom_dirs: list[Path] = Field(default_factory=list, description="Extra font directories")

    # Async extraction
    batch_size: int = Field(DEFAULT_BATCH_SIZE, ge=1, description="Files per async batch")
    max_workers: int = Field(8, ge=1, description="Worker threads for async reads")

    log_level: str = Field("INFO", description="Application log level")

    @field_validator("custom_dirs")
    @classmethod
    def expand_custom_dirs(cls, v):
        return [Path(d).expanduser() for d in v]

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = str(v).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise InvalidLogLevelError(v)
        return level

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "ScannerConfig":
        """Load configuration from YAML file."""
        return load_config_from_yaml(config_path, cls)

    @classmethod
    def from_env_and_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str = ".env"
    ) -> "ScannerConfig":
        """Load configuration from environment variables and optionally override with YAML."""
        if yaml_path and Path(yaml_path).exists():
            return cls.from_yaml(yaml_path)
        # Load from environment variables/.env file
        return cls(_env_file=env_file if Path(env_file).exists() else None)


def load_config_from_yaml(config_path: str | Path, config_class: type) -> BaseSettings:
    """Load configuration from YAML file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigFileNotFoundError(str(config_path))

    try:
        with config_path.open() as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidYamlError(str(config_path), str(e)) from e

    if config_data is None:
        raise EmptyConfigFileError(str(config_path))

    try:
        if issubclass(config_class, BaseSettings):
            # YAML values win; skip the .env file for this instance
            return config_class(_env_file=None, **config_data)
        return config_class(**config_data)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigLoadError(str(e)) from e
