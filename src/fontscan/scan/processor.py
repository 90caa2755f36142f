"""
Scan Processor
==============

Drives metadata extraction over a list of candidate font files, turning
every file into exactly one font entry or one error record, with optional
result caching, progress callbacks and a batched asynchronous mode.
"""

import asyncio
import logging
import sys
import time
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from pydantic import ValidationError

from ..core.config import DEFAULT_BATCH_SIZE, DEFAULT_MAX_DEPTH
from ..core.models import FontEntry, FontError, FontErrorCode, ScanResult, ScanStats
from ..fonts.metadata import read_font_metadata
from ..fonts.system import SystemFontProvider, collect_font_files
from .cache import FontCache, get_default_cache

logger = logging.getLogger(__name__)

CandidateSource = Callable[[], tuple[Sequence[str | Path], int]]


class ScanProgressCallback:
    """Base class for scan progress callbacks."""

    def on_start(self, total_files: int) -> None:
        """Called when extraction starts."""

    def on_file_complete(self, path: str, success: bool) -> None:
        """Called when a file has produced an entry or an error."""

    def on_batch_complete(self, completed: int, total: int) -> None:
        """Called after each batch of files."""

    def on_complete(self, result: ScanResult) -> None:
        """Called when the scan completes."""


class ConsoleProgressCallback(ScanProgressCallback):
    """Progress callback printing to stderr."""

    def __init__(self, update_interval: float = 1.0, clock: Callable[[], float] = time.time):
        self.update_interval = update_interval
        self.clock = clock
        self.start_time = None
        self.last_update = 0.0

    def on_start(self, total_files: int) -> None:
        self.start_time = self.clock()
        print(f"Scanning {total_files} font files...", file=sys.stderr)

    def on_batch_complete(self, completed: int, total: int) -> None:
        current_time = self.clock()
        if current_time - self.last_update >= self.update_interval or completed == total:
            percentage = (completed / total * 100.0) if total else 100.0
            print(f"Progress: {completed}/{total} ({percentage:.1f}%)", file=sys.stderr)
            self.last_update = current_time

    def on_complete(self, result: ScanResult) -> None:
        elapsed = self.clock() - self.start_time if self.start_time is not None else 0.0
        stats = result.stats
        print(
            f"Scan complete: {stats.fonts_found} fonts, {stats.files_failed} failed",
            file=sys.stderr,
        )
        print(f"Total time: {elapsed:.1f}s", file=sys.stderr)


def classify_error(path: str, error: Exception) -> FontError:
    """Map an extraction failure to an error record."""
    if isinstance(error, FileNotFoundError):
        code = FontErrorCode.FILE_NOT_FOUND
    elif isinstance(error, PermissionError):
        code = FontErrorCode.PERMISSION_DENIED
    elif isinstance(error, OSError):
        code = FontErrorCode.UNKNOWN
    else:
        code = FontErrorCode.PARSE_ERROR

    return FontError(path=path, message=str(error) or type(error).__name__, code=code)


def extract_font(path: str | Path) -> FontEntry | FontError:
    """Extract one font file into an entry, or an error record on failure."""
    path = str(path)
    try:
        metadata = read_font_metadata(path)
    except Exception as e:
        logger.debug(f"Failed to process font {path}: {e}")
        return classify_error(path, e)

    if not metadata.get("name"):
        return FontError(
            path=path,
            message="Failed to extract font metadata",
            code=FontErrorCode.PARSE_ERROR,
        )

    try:
        return FontEntry(**metadata)
    except ValidationError as e:
        logger.debug(f"Invalid metadata for {path}: {e}")
        return FontError(path=path, message=str(e), code=FontErrorCode.PARSE_ERROR)


class ScanProcessor:
    """
    Aggregates per-file extraction into a scan result.

    Features:
    - Every candidate path accounted for as an entry or an error
    - Optional time-bounded result cache
    - Sequential and batched asynchronous extraction
    - Progress callbacks
    """

    def __init__(
        self,
        cache: FontCache | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_workers: int = 8,
        progress_callback: ScanProgressCallback | None = None,
    ):
        """
        Initialize scan processor.

        Args:
            cache: Result cache; the process-wide cache when omitted
            batch_size: Files extracted concurrently per async batch
            max_workers: Worker threads used by the async mode
            progress_callback: Optional progress callback
        """
        self.cache = cache if cache is not None else get_default_cache()
        self.batch_size = batch_size
        self.max_workers = max_workers
        self.progress_callback = progress_callback or ScanProgressCallback()

    # Synchronous API

    def scan(
        self,
        candidate_paths: Iterable[str | Path],
        use_cache: bool = True,
        directories_scanned: int = 0,
    ) -> ScanResult:
        """
        Scan a list of candidate font files.

        Args:
            candidate_paths: Font file paths in traversal order
            use_cache: Serve from and store into the cache
            directories_scanned: Root directories visited by the caller

        Returns:
            Scan result; never raises for per-file failures
        """
        paths = list(candidate_paths)
        return self._run(lambda: (paths, directories_scanned), use_cache)

    def scan_directories(
        self,
        directories: Iterable[Path],
        max_depth: int = DEFAULT_MAX_DEPTH,
        use_cache: bool = True,
    ) -> ScanResult:
        """Walk ``directories`` for font files and scan them."""
        directories = list(directories)
        return self._run(lambda: collect_font_files(directories, max_depth), use_cache)

    def scan_provider(self, provider: SystemFontProvider, use_cache: bool = True) -> ScanResult:
        """Scan the font files listed by a system font provider."""
        return self._run(provider.list_font_files, use_cache)

    def _run(self, source: CandidateSource, use_cache: bool) -> ScanResult:
        start_time = time.perf_counter()

        if use_cache:
            cached = self._cached_result(start_time)
            if cached is not None:
                return cached

        paths, directories_scanned = source()
        self.progress_callback.on_start(len(paths))

        outcomes = []
        for batch_start in range(0, len(paths), self.batch_size):
            batch = paths[batch_start : batch_start + self.batch_size]
            for path in batch:
                outcome = extract_font(path)
                self.progress_callback.on_file_complete(str(path), isinstance(outcome, FontEntry))
                outcomes.append(outcome)
            self.progress_callback.on_batch_complete(len(outcomes), len(paths))

        return self._finish(outcomes, directories_scanned, start_time, use_cache)

    # Asynchronous API

    async def scan_async(
        self,
        candidate_paths: Iterable[str | Path],
        use_cache: bool = True,
        directories_scanned: int = 0,
    ) -> ScanResult:
        """Asynchronous counterpart of :meth:`scan`, extracting files in concurrent batches."""
        paths = list(candidate_paths)
        return await self._run_async(lambda: (paths, directories_scanned), use_cache)

    async def scan_directories_async(
        self,
        directories: Iterable[Path],
        max_depth: int = DEFAULT_MAX_DEPTH,
        use_cache: bool = True,
    ) -> ScanResult:
        """Asynchronous counterpart of :meth:`scan_directories`."""
        directories = list(directories)
        return await self._run_async(lambda: collect_font_files(directories, max_depth), use_cache)

    async def scan_provider_async(
        self, provider: SystemFontProvider, use_cache: bool = True
    ) -> ScanResult:
        """Asynchronous counterpart of :meth:`scan_provider`."""
        return await self._run_async(provider.list_font_files, use_cache)

    async def _run_async(self, source: CandidateSource, use_cache: bool) -> ScanResult:
        start_time = time.perf_counter()

        if use_cache:
            cached = self._cached_result(start_time)
            if cached is not None:
                return cached

        loop = asyncio.get_running_loop()
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            paths, directories_scanned = await loop.run_in_executor(executor, source)
            self.progress_callback.on_start(len(paths))

            outcomes = []
            for batch_start in range(0, len(paths), self.batch_size):
                batch = paths[batch_start : batch_start + self.batch_size]
                batch_outcomes = await asyncio.gather(
                    *(loop.run_in_executor(executor, extract_font, path) for path in batch)
                )
                for path, outcome in zip(batch, batch_outcomes):
                    self.progress_callback.on_file_complete(
                        str(path), isinstance(outcome, FontEntry)
                    )
                outcomes.extend(batch_outcomes)
                self.progress_callback.on_batch_complete(len(outcomes), len(paths))

        return self._finish(outcomes, directories_scanned, start_time, use_cache)

    # Shared helpers

    def _cached_result(self, start_time: float) -> ScanResult | None:
        fonts = self.cache.get()
        if fonts is None:
            return None

        logger.debug(f"Serving {len(fonts)} fonts from cache")
        return ScanResult(
            fonts=fonts,
            errors=[],
            stats=ScanStats(
                directories_scanned=0,
                files_processed=len(fonts),
                fonts_found=len(fonts),
                files_failed=0,
                scan_time_ms=_elapsed_ms(start_time),
            ),
            from_cache=True,
        )

    def _finish(
        self,
        outcomes: list[FontEntry | FontError],
        directories_scanned: int,
        start_time: float,
        use_cache: bool,
    ) -> ScanResult:
        fonts = [outcome for outcome in outcomes if isinstance(outcome, FontEntry)]
        errors = [outcome for outcome in outcomes if isinstance(outcome, FontError)]

        if use_cache:
            self.cache.put(fonts)

        result = ScanResult(
            fonts=fonts,
            errors=errors,
            stats=ScanStats(
                directories_scanned=directories_scanned,
                files_processed=len(outcomes),
                fonts_found=len(fonts),
                files_failed=len(errors),
                scan_time_ms=_elapsed_ms(start_time),
            ),
        )

        logger.info(
            f"Scan complete: {len(fonts)} fonts, {len(errors)} failures "
            f"in {result.stats.scan_time_ms:.1f}ms"
        )
        self.progress_callback.on_complete(result)
        return result


def _elapsed_ms(start_time: float) -> float:
    return (time.perf_counter() - start_time) * 1000.0


def scan(
    candidate_paths: Iterable[str | Path],
    use_cache: bool = True,
    cache: FontCache | None = None,
    directories_scanned: int = 0,
) -> ScanResult:
    """Scan candidate font files with a default-configured processor."""
    return ScanProcessor(cache=cache).scan(candidate_paths, use_cache, directories_scanned)


async def scan_async(
    candidate_paths: Iterable[str | Path],
    use_cache: bool = True,
    cache: FontCache | None = None,
    directories_scanned: int = 0,
) -> ScanResult:
    """Asynchronously scan candidate font files with a default-configured processor."""
    processor = ScanProcessor(cache=cache)
    return await processor.scan_async(candidate_paths, use_cache, directories_scanned)
