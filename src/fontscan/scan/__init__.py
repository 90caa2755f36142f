"""Scan Processing Module
======================

Result aggregation and caching for font scans.
"""

from .cache import FontCache, clear_font_cache, get_cached_font_count, is_cache_valid
from .processor import (
    ConsoleProgressCallback,
    ScanProcessor,
    ScanProgressCallback,
    scan,
    scan_async,
)

__all__ = [
    "ConsoleProgressCallback",
    "FontCache",
    "ScanProcessor",
    "ScanProgressCallback",
    "clear_font_cache",
    "get_cached_font_count",
    "is_cache_valid",
    "scan",
    "scan_async",
]
