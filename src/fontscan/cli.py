"""
Font Scanner CLI
================

Command line interface for listing, finding and summarising installed fonts.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from .core.config import ScannerConfig
from .core.exceptions import ConfigurationError
from .core.models import ScanOptions, ScanResult
from .fonts.scanner import FontScanner, best_match
from .fonts.system import SystemFontProvider
from .scan.cache import FontCache
from .scan.processor import ConsoleProgressCallback, ScanProcessor

logger = logging.getLogger(__name__)


def scan_options(command):
    """Attach the options shared by every scanning command."""
    options = [
        click.option("--no-cache", is_flag=True, help="Ignore and do not update the result cache"),
        click.option(
            "--dir",
            "custom_dirs",
            multiple=True,
            type=click.Path(file_okay=False, path_type=Path),
            help="Additional font directory (repeatable)",
        ),
        click.option("--no-system", is_flag=True, help="Skip system font directories"),
        click.option("--no-user", is_flag=True, help="Skip per-user font directories"),
        click.option("--progress", is_flag=True, help="Print scan progress to stderr"),
        click.option("--async", "use_async", is_flag=True, help="Extract files in async batches"),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def run_scan(
    config: ScannerConfig,
    no_cache: bool = False,
    custom_dirs: tuple[Path, ...] = (),
    no_system: bool = False,
    no_user: bool = False,
    progress: bool = False,
    use_async: bool = False,
) -> tuple[ScanOptions, ScanResult]:
    """Scan the configured font directories with the command line overrides applied."""
    overrides = {}
    if no_cache:
        overrides["use_cache"] = False
    if custom_dirs:
        overrides["custom_dirs"] = [*config.custom_dirs, *custom_dirs]
    if no_system:
        overrides["include_system_fonts"] = False
    if no_user:
        overrides["include_user_fonts"] = False
    options = ScanOptions.from_config(config, **overrides)

    processor = ScanProcessor(
        cache=FontCache.from_config(config),
        batch_size=config.batch_size,
        max_workers=config.max_workers,
        progress_callback=ConsoleProgressCallback() if progress else None,
    )
    provider = SystemFontProvider(options)
    logger.debug(f"Scanning directories: {[str(d) for d in provider.font_directories]}")

    if use_async:
        result = asyncio.run(processor.scan_provider_async(provider, options.use_cache))
    else:
        result = processor.scan_provider(provider, options.use_cache)
    return options, result


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    "-c",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to scanner configuration YAML file",
)
@click.pass_context
def cli(ctx, verbose, config):
    """Font Scanner CLI."""
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        scanner_config = ScannerConfig.from_yaml(config) if config else ScannerConfig()
    except (ConfigurationError, ValidationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    logging.getLogger().setLevel(logging.DEBUG if verbose else scanner_config.log_level)
    ctx.obj = scanner_config


@cli.command(name="list")
@click.option("--format", "font_format", type=str, help="Only fonts of this format (ttf, otf, ...)")
@click.option("--weight", type=int, help="Only fonts of this weight class")
@click.option("--monospace", is_flag=True, help="Only monospaced fonts")
@click.option("--search", type=str, help="Only fonts whose name or family contains this text")
@click.option("--exact", type=str, help="Only fonts whose name or family equals this text")
@click.option("--json", "as_json", is_flag=True, help="Print fonts as a JSON array")
@scan_options
@click.pass_obj
def list_fonts(config, font_format, weight, monospace, search, exact, as_json, **scan_kwargs):
    """List installed fonts."""
    options, result = run_scan(config, **scan_kwargs)

    scanner = FontScanner(options)
    if font_format:
        scanner = scanner.filter_by_format(font_format)
    if weight is not None:
        scanner = scanner.filter_by_weight(weight)
    if monospace:
        scanner = scanner.only_monospace()
    if search:
        scanner = scanner.search_by_name(search)
    if exact:
        scanner = scanner.match_name_exactly(exact)

    fonts = scanner.apply(result.fonts)

    if as_json:
        payload = [font.model_dump(mode="python") for font in fonts]
        print(json.dumps(payload, indent=2, default=str))
        return

    for font in fonts:
        print(font)
    logger.info(f"Listed {len(fonts)} of {len(result.fonts)} fonts")


@cli.command(name="find")
@click.argument("name")
@scan_options
@click.pass_obj
def find_font(config, name, **scan_kwargs):
    """Find the best matching font by NAME and print its path."""
    _, result = run_scan(config, **scan_kwargs)

    font = best_match(result.fonts, name)
    if font is None:
        print(f"Font not found: {name}", file=sys.stderr)
        sys.exit(1)

    print(font.path)


@cli.command(name="stats")
@scan_options
@click.pass_obj
def scan_stats(config, **scan_kwargs):
    """Run a scan and print its statistics."""
    _, result = run_scan(config, **scan_kwargs)
    stats = result.stats

    print("Font Scan Statistics")
    print("=" * 40)
    print(f"Directories scanned: {stats.directories_scanned}")
    print(f"Files processed: {stats.files_processed}")
    print(f"Fonts found: {stats.fonts_found}")
    print(f"Files failed: {stats.files_failed}")
    print(f"Success rate: {stats.success_rate:.1f}%")
    print(f"Scan time: {stats.scan_time_ms:.1f}ms")
    print(f"From cache: {result.from_cache}")

    error_counts = result.error_counts()
    if error_counts:
        print("Errors by code:")
        for code, count in sorted(error_counts.items(), key=lambda item: item[0].value):
            print(f"  {code.value}: {count}")


if __name__ == "__main__":
    cli()
