"""Font Scanner
============

Discovers the fonts installed on the local machine and extracts their
descriptive metadata directly from the sfnt binary tables:
- Platform-aware directory discovery with bounded recursion
- Name, OS/2 and post table decoding without a font library
- Per-file error records instead of aborted scans
- A time-bounded result cache and a chainable query interface
"""

__version__ = "1.0.0"
__author__ = "Font Scanner Team"

from .core.config import ScannerConfig
from .core.exceptions import ConfigurationError, FontParseError, FontScanError
from .core.models import (
    FontEntry,
    FontError,
    FontErrorCode,
    ScanOptions,
    ScanResult,
    ScanStats,
)
from .fonts.scanner import (
    FontScanner,
    find_font_by_name,
    get_all_fonts,
    get_all_fonts_async,
    get_all_fonts_with_result,
    get_all_fonts_with_result_async,
)
from .scan import (
    FontCache,
    ScanProcessor,
    clear_font_cache,
    get_cached_font_count,
    is_cache_valid,
)

__all__ = [
    "ConfigurationError",
    "FontCache",
    "FontEntry",
    "FontError",
    "FontErrorCode",
    "FontParseError",
    "FontScanError",
    "FontScanner",
    "ScanOptions",
    "ScanProcessor",
    "ScanResult",
    "ScanStats",
    "ScannerConfig",
    "clear_font_cache",
    "find_font_by_name",
    "get_all_fonts",
    "get_all_fonts_async",
    "get_all_fonts_with_result",
    "get_all_fonts_with_result_async",
    "get_cached_font_count",
    "is_cache_valid",
]
