"""Core components for font scanning."""

from .config import ScannerConfig
from .exceptions import (
    ByteRangeError,
    ConfigurationError,
    FontParseError,
    FontScanError,
    InvalidContainerError,
)
from .models import (
    FontEntry,
    FontError,
    FontErrorCode,
    ScanOptions,
    ScanResult,
    ScanStats,
)

__all__ = [
    "ByteRangeError",
    "ConfigurationError",
    "FontEntry",
    "FontError",
    "FontErrorCode",
    "FontParseError",
    "FontScanError",
    "InvalidContainerError",
    "ScanOptions",
    "ScanResult",
    "ScanStats",
    "ScannerConfig",
]
