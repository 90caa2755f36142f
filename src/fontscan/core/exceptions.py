"""Custom exceptions for the font scanning system."""

from typing import Any


class FontScanError(Exception):
    """Base exception for all fontscan errors."""

    def __init__(self, message: str, details: Any | None = None):
        super().__init__(message)
        self.details = details


class FontParseError(FontScanError):
    """Exception raised while decoding a font container."""


class ConfigurationError(FontScanError):
    """Exception raised for configuration errors."""


class ByteRangeError(FontParseError):
    """Exception raised when a read falls outside the byte buffer."""

    def __init__(self, offset: int, width: int, length: int):
        super().__init__(
            f"Read of {width} bytes at offset {offset} exceeds buffer of {length} bytes",
            details={"offset": offset, "width": width, "length": length},
        )
        self.offset = offset
        self.width = width
        self.length = length


class InvalidContainerError(FontParseError):
    """Exception raised when a buffer is too short to hold an sfnt header."""

    def __init__(self, length: int):
        super().__init__(f"Buffer of {length} bytes is too short for a table directory")
        self.length = length


class ConfigFileNotFoundError(ConfigurationError):
    """Exception raised when configuration file is not found."""

    def __init__(self, config_path: str):
        super().__init__(f"Configuration file not found: {config_path}")


class EmptyConfigFileError(ConfigurationError):
    """Exception raised when configuration file is empty."""

    def __init__(self, config_path: str):
        super().__init__(f"Empty configuration file: {config_path}")


class InvalidYamlError(ConfigurationError):
    """Exception raised for invalid YAML content."""

    def __init__(self, config_path: str, error: str):
        super().__init__(f"Invalid YAML in {config_path}: {error}")


class ConfigLoadError(ConfigurationError):
    """Exception raised when configuration loading fails."""

    def __init__(self, error: str):
        super().__init__(f"Failed to load configuration: {error}")


class InvalidLogLevelError(ValueError):
    """Exception raised for unknown logging level names."""

    def __init__(self, level: str):
        super().__init__(f"Unknown log level: {level}")


class NonPositiveTTLError(ValueError):
    """Exception raised when a cache TTL is not positive."""

    def __init__(self):
        super().__init__("Cache TTL must be positive")
