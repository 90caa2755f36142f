"""
Scan Integration Tests
======================

End-to-end scans through the public package interface, covering the shared
cache, larger trees spanning several async batches, damaged files and the
real system font directories.
"""

import asyncio
import os
import shutil

import pytest

from src.fontscan import (
    FontErrorCode,
    FontScanner,
    ScanOptions,
    clear_font_cache,
    get_all_fonts,
    get_all_fonts_with_result,
    get_all_fonts_with_result_async,
    get_cached_font_count,
    is_cache_valid,
)


@pytest.fixture
def large_font_tree(tmp_path, sfnt):
    """Create 120 fonts spread over nested family directories."""
    root = tmp_path / "library"
    for family_index in range(12):
        family_dir = root / f"family{family_index:02d}"
        family_dir.mkdir(parents=True)
        for weight_index in range(10):
            weight = (weight_index % 9 + 1) * 100
            font_path = family_dir / f"Family{family_index:02d}-{weight_index}.ttf"
            font_path.write_bytes(
                sfnt.font(
                    name=f"Family {family_index:02d} W{weight_index}",
                    family=f"Family {family_index:02d}",
                    weight=weight,
                    monospace_panose=family_index == 0,
                )
            )
    return root


def tree_only(directory, use_cache=False):
    return ScanOptions(
        custom_dirs=[directory],
        include_system_fonts=False,
        include_user_fonts=False,
        use_cache=use_cache,
    )


class TestScanIntegration:
    """End-to-end scanning tests."""

    def test_shared_cache_lifecycle(self, isolated_env, font_tree):
        """Test the process-wide cache is filled, served and cleared."""
        options = tree_only(font_tree, use_cache=True)

        first = get_all_fonts_with_result(options)
        assert first.from_cache is False
        assert is_cache_valid()
        assert get_cached_font_count() == 6

        second = get_all_fonts_with_result(options)
        assert second.from_cache is True
        assert second.fonts == first.fonts

        clear_font_cache()
        assert not is_cache_valid()
        assert get_cached_font_count() == 0
        assert get_all_fonts_with_result(options).from_cache is False

    def test_large_tree_sync_and_async_agree(self, isolated_env, large_font_tree):
        """Test scans spanning several async batches."""
        options = tree_only(large_font_tree)

        sync_result = get_all_fonts_with_result(options)
        async_result = asyncio.run(get_all_fonts_with_result_async(options))

        assert sync_result.stats.fonts_found == 120
        assert async_result.fonts == sync_result.fonts

    def test_large_tree_queries(self, isolated_env, large_font_tree):
        """Test chained queries over a larger inventory."""
        scanner = FontScanner.scan(tree_only(large_font_tree))

        assert len(scanner.only_monospace().get_fonts()) == 10
        assert len(scanner.filter_by_weight(100).get_fonts()) == 24
        assert len(scanner.match_name_exactly("Family 03").get_fonts()) == 10
        assert len(scanner.only_monospace().filter_by_weight(900).get_fonts()) == 1

    def test_damaged_files_degrade_to_filename(self, isolated_env, tmp_path, sfnt):
        """Test truncated fonts still produce entries."""
        damaged_dir = tmp_path / "damaged"
        damaged_dir.mkdir()
        data = sfnt.font(name="Whole Sans", weight=700)
        for cut in range(0, len(data), max(1, len(data) // 25)):
            (damaged_dir / f"cut{cut:04d}.ttf").write_bytes(data[:cut])

        result = get_all_fonts_with_result(tree_only(damaged_dir))

        assert result.errors == []
        assert result.stats.fonts_found == result.stats.files_processed
        for font in result.fonts:
            assert font.name in {font.filename[:-4], "Whole Sans"}

    @pytest.mark.skipif(os.name == "nt", reason="POSIX file permissions")
    def test_unreadable_file(self, isolated_env, font_tree):
        """Test unreadable files become PERMISSION_DENIED errors."""
        locked = font_tree / "Regular.ttf"
        locked.chmod(0)
        try:
            if os.access(locked, os.R_OK):
                pytest.skip("running with permission override")
            result = get_all_fonts_with_result(tree_only(font_tree))
        finally:
            locked.chmod(0o644)

        assert [error.code for error in result.errors] == [FontErrorCode.PERMISSION_DENIED]
        assert result.stats.fonts_found == 5

    @pytest.mark.skipif(shutil.which("fc-list") is None, reason="no fontconfig")
    @pytest.mark.slow
    def test_system_fonts(self, isolated_env):
        """Test scanning the real font directories of this machine."""
        fonts = get_all_fonts(ScanOptions(use_cache=False))

        for font in fonts:
            assert font.name
            assert os.path.isabs(font.path)
