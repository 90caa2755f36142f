"""Scan Result Caching
===================

Time-bounded cache for the font list of the last full scan:
- Expiry after a configurable TTL (five minutes by default)
- Thread-safe reads and writes; entries are immutable snapshots
- Hit/miss statistics
- An injectable clock for deterministic expiry
"""

import logging
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..core.config import DEFAULT_CACHE_TTL_MS
from ..core.exceptions import NonPositiveTTLError
from ..core.models import FontEntry

if TYPE_CHECKING:
    from ..core.config import ScannerConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Fonts stored by one scan and when they were stored."""

    fonts: tuple[FontEntry, ...]
    timestamp: float


@dataclass
class CacheStats:
    """Statistics for cache performance."""

    hits: int = 0
    misses: int = 0
    puts: int = 0
    clears: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return (self.hits / total * 100.0) if total > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert stats to dictionary."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "puts": self.puts,
            "clears": self.clears,
            "hit_rate_percent": self.hit_rate,
        }


class FontCache:
    """Thread-safe, time-bounded store of the last scanned font list."""

    def __init__(
        self,
        ttl_ms: float = DEFAULT_CACHE_TTL_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_ms <= 0:
            raise NonPositiveTTLError()

        self.ttl_ms = ttl_ms
        self._clock = clock
        self._entry: CacheEntry | None = None
        self._lock = threading.RLock()
        self._stats = CacheStats()

    @classmethod
    def from_config(cls, config: "ScannerConfig") -> "FontCache":
        """Create a cache using the configured TTL."""
        return cls(ttl_ms=config.cache_ttl_ms)

    def _age_ms(self, entry: CacheEntry) -> float:
        return (self._clock() - entry.timestamp) * 1000.0

    def _is_fresh(self, entry: CacheEntry | None) -> bool:
        return entry is not None and self._age_ms(entry) < self.ttl_ms

    def get(self) -> list[FontEntry] | None:
        """
        Get the cached font list.

        Returns:
            A copy of the stored list, or None when absent or expired
        """
        with self._lock:
            entry = self._entry
            if self._is_fresh(entry):
                self._stats.hits += 1
                logger.debug(f"Font cache hit: {len(entry.fonts)} fonts")
                return list(entry.fonts)

            self._stats.misses += 1
            logger.debug("Font cache miss")
            return None

    def put(self, fonts: Iterable[FontEntry]) -> None:
        """Store a font list and restart the TTL."""
        entry = CacheEntry(fonts=tuple(fonts), timestamp=self._clock())
        with self._lock:
            self._entry = entry
            self._stats.puts += 1
        logger.debug(f"Font cache stored {len(entry.fonts)} fonts")

    def clear(self) -> None:
        """Drop the cached font list."""
        with self._lock:
            count = len(self._entry.fonts) if self._entry else 0
            self._entry = None
            self._stats.clears += 1
        logger.info(f"Font cache cleared: {count} fonts")

    def count(self) -> int:
        """Number of fonts stored, expired or not."""
        with self._lock:
            return len(self._entry.fonts) if self._entry else 0

    def is_valid(self) -> bool:
        """Whether a non-expired entry is present."""
        with self._lock:
            return self._is_fresh(self._entry)

    def get_stats(self) -> CacheStats:
        """Get a snapshot of cache statistics."""
        with self._lock:
            return CacheStats(
                hits=self._stats.hits,
                misses=self._stats.misses,
                puts=self._stats.puts,
                clears=self._stats.clears,
            )

    def get_cache_info(self) -> dict[str, Any]:
        """Get detailed cache information."""
        with self._lock:
            entry = self._entry
            return {
                "font_count": len(entry.fonts) if entry else 0,
                "age_ms": self._age_ms(entry) if entry else None,
                "ttl_ms": self.ttl_ms,
                "valid": self._is_fresh(entry),
                "stats": self._stats.to_dict(),
            }

    def __len__(self) -> int:
        return self.count()


_default_cache = FontCache()


def get_default_cache() -> FontCache:
    """The process-wide cache used when no cache is passed explicitly."""
    return _default_cache


def clear_font_cache() -> None:
    """Clear the process-wide font cache to force a fresh scan."""
    _default_cache.clear()


def get_cached_font_count() -> int:
    """Number of fonts in the process-wide cache."""
    return _default_cache.count()


def is_cache_valid() -> bool:
    """Whether the process-wide cache holds a non-expired scan."""
    return _default_cache.is_valid()
