"""
Font Scanner
============

Chainable query interface over system font scans. Each chain call returns
a new scanner carrying one more filter; the filters are applied as a
conjunction when fonts are requested.

Example:
    >>> bold_ttf = FontScanner.scan(use_cache=False).filter_by_format("ttf").filter_by_weight(700)
    >>> fonts = bold_ttf.get_fonts()
"""

import logging
from dataclasses import dataclass
from typing import Any

from ..core.config import ScannerConfig
from ..core.models import FontEntry, ScanOptions, ScanResult
from ..scan.cache import FontCache
from ..scan.processor import ScanProcessor
from .system import SystemFontProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormatFilter:
    """Match fonts of one format, case-insensitively."""

    format: str

    def __call__(self, font: FontEntry) -> bool:
        return font.format.lower() == self.format.lower()


@dataclass(frozen=True)
class WeightFilter:
    """Match fonts of one weight class."""

    weight: int

    def __call__(self, font: FontEntry) -> bool:
        return font.weight == self.weight


@dataclass(frozen=True)
class MonospaceFilter:
    """Match fonts known to be monospaced."""

    def __call__(self, font: FontEntry) -> bool:
        return font.is_monospace is True


@dataclass(frozen=True)
class NameFilter:
    """Match a query against name or family, by substring or exactly."""

    query: str
    exact: bool = False

    def __call__(self, font: FontEntry) -> bool:
        return font.matches_name(self.query, exact=self.exact)


FontFilter = FormatFilter | WeightFilter | MonospaceFilter | NameFilter


def _resolve_options(options: ScanOptions | None, overrides: dict[str, Any]) -> ScanOptions:
    if options is None:
        options = ScanOptions.from_config(ScannerConfig())
    if overrides:
        options = ScanOptions(**{**options.model_dump(), **overrides})
    return options


def _create_processor(cache: FontCache | None) -> ScanProcessor:
    config = ScannerConfig()
    return ScanProcessor(cache=cache, batch_size=config.batch_size, max_workers=config.max_workers)


def get_all_fonts_with_result(
    options: ScanOptions | None = None, cache: FontCache | None = None
) -> ScanResult:
    """
    Scan the platform font directories.

    Args:
        options: Scan options; defaults come from ``ScannerConfig``
        cache: Result cache; the process-wide cache when omitted

    Returns:
        Scan result with fonts, errors and statistics
    """
    options = _resolve_options(options, {})
    provider = SystemFontProvider(options)
    return _create_processor(cache).scan_provider(provider, options.use_cache)


async def get_all_fonts_with_result_async(
    options: ScanOptions | None = None, cache: FontCache | None = None
) -> ScanResult:
    """Asynchronous counterpart of :func:`get_all_fonts_with_result`."""
    options = _resolve_options(options, {})
    provider = SystemFontProvider(options)
    return await _create_processor(cache).scan_provider_async(provider, options.use_cache)


def get_all_fonts(
    options: ScanOptions | None = None, cache: FontCache | None = None
) -> list[FontEntry]:
    """Get all fonts available on the system."""
    return get_all_fonts_with_result(options, cache).fonts


async def get_all_fonts_async(
    options: ScanOptions | None = None, cache: FontCache | None = None
) -> list[FontEntry]:
    """Asynchronously get all fonts available on the system."""
    result = await get_all_fonts_with_result_async(options, cache)
    return result.fonts


def find_font_by_name(
    name: str, options: ScanOptions | None = None, cache: FontCache | None = None
) -> FontEntry | None:
    """
    Find a font by name.

    Args:
        name: Font or family name
        options: Scan options
        cache: Result cache

    Returns:
        The first exact name-or-family match, else the first substring
        match, else None
    """
    font = best_match(get_all_fonts(options, cache), name)
    if font is None:
        logger.debug(f"Font not found: {name}")
    return font


def best_match(fonts: list[FontEntry], name: str) -> FontEntry | None:
    """Pick the first exact name-or-family match, else the first substring match."""
    for font in fonts:
        if font.matches_name(name, exact=True):
            return font

    for font in fonts:
        if font.matches_name(name):
            return font

    return None


class FontScanner:
    """
    Immutable, chainable font query.

    Filters accumulate in call order and are combined with AND semantics;
    a scanner without filters returns every scanned font.
    """

    def __init__(
        self,
        options: ScanOptions | None = None,
        cache: FontCache | None = None,
        filters: tuple[FontFilter, ...] = (),
    ):
        """
        Initialize font scanner.

        Args:
            options: Scan options; defaults come from ``ScannerConfig``
            cache: Result cache; the process-wide cache when omitted
            filters: Filters already accumulated
        """
        self.options = _resolve_options(options, {})
        self.cache = cache
        self.filters = tuple(filters)

    @classmethod
    def scan(
        cls, options: ScanOptions | None = None, cache: FontCache | None = None, **overrides: Any
    ) -> "FontScanner":
        """
        Start a chainable scan.

        Keyword overrides (``use_cache``, ``custom_dirs``, ...) are applied
        on top of ``options``.
        """
        return cls(_resolve_options(options, overrides), cache)

    def _with_filter(self, font_filter: FontFilter) -> "FontScanner":
        return FontScanner(self.options, self.cache, (*self.filters, font_filter))

    def filter_by_format(self, format: str) -> "FontScanner":
        """Keep fonts of the given format (``ttf``, ``otf``, ...)."""
        return self._with_filter(FormatFilter(format.lower()))

    def filter_by_weight(self, weight: int) -> "FontScanner":
        """Keep fonts of the given weight class (100-900)."""
        return self._with_filter(WeightFilter(weight))

    def only_monospace(self) -> "FontScanner":
        """Keep fonts known to be monospaced."""
        return self._with_filter(MonospaceFilter())

    def search_by_name(self, query: str) -> "FontScanner":
        """Keep fonts whose name or family contains ``query``."""
        return self._with_filter(NameFilter(query))

    def match_name_exactly(self, name: str) -> "FontScanner":
        """Keep fonts whose name or family equals ``name``."""
        return self._with_filter(NameFilter(name, exact=True))

    def apply(self, fonts: list[FontEntry]) -> list[FontEntry]:
        """Apply the accumulated filters to a font list."""
        filtered = list(fonts)
        for font_filter in self.filters:
            filtered = [font for font in filtered if font_filter(font)]
        return filtered

    def get_fonts(self) -> list[FontEntry]:
        """Scan and return the matching fonts."""
        return self.apply(get_all_fonts(self.options, self.cache))

    async def get_fonts_async(self) -> list[FontEntry]:
        """Asynchronously scan and return the matching fonts."""
        return self.apply(await get_all_fonts_async(self.options, self.cache))

    def get_result(self) -> ScanResult:
        """Scan and return the full result with filtered fonts."""
        result = get_all_fonts_with_result(self.options, self.cache)
        return result.model_copy(update={"fonts": self.apply(result.fonts)})

    async def get_result_async(self) -> ScanResult:
        """Asynchronously scan and return the full result with filtered fonts."""
        result = await get_all_fonts_with_result_async(self.options, self.cache)
        return result.model_copy(update={"fonts": self.apply(result.fonts)})

    def __repr__(self) -> str:
        return f"FontScanner(options={self.options!r}, filters={list(self.filters)!r})"
