"""
Pytest configuration and fixtures for font scanner tests.
"""

import os
import struct

import pytest

from src.fontscan.scan.cache import FontCache, clear_font_cache


class SfntBuilder:
    """Builds synthetic sfnt buffers table by table."""

    @staticmethod
    def table_directory(tables: dict[str, bytes]) -> bytes:
        """Assemble an sfnt file from tag -> table bytes, in the given order."""
        header = struct.pack(">IHHHH", 0x00010000, len(tables), 0, 0, 0)
        offset = 12 + 16 * len(tables)

        records = b""
        body = b""
        for tag, data in tables.items():
            records += struct.pack(
                ">4sIII", tag.encode("latin-1"), 0, offset + len(body), len(data)
            )
            body += data

        return header + records + body

    @staticmethod
    def name_table(records: list[tuple]) -> bytes:
        """
        Build a name table from ``(name_id, text)`` or
        ``(name_id, text, platform_id)`` tuples, kept in the given order.
        """
        header = struct.pack(">HHH", 0, len(records), 6 + 12 * len(records))

        entries = b""
        storage = b""
        for record in records:
            name_id, text = record[0], record[1]
            platform_id = record[2] if len(record) > 2 else 3
            encoded = text.encode("utf-16-be")
            entries += struct.pack(
                ">HHHHHH", platform_id, 1, 0x409, name_id, len(encoded), len(storage)
            )
            storage += encoded

        return header + entries + storage

    @staticmethod
    def os2_table(
        weight: int = 400, italic: bool = False, panose_proportion: int = 0, size: int = 78
    ) -> bytes:
        """Build an OS/2 table, truncated to ``size`` bytes."""
        data = bytearray(max(size, 78))
        struct.pack_into(">H", data, 4, weight)
        data[35] = panose_proportion
        struct.pack_into(">H", data, 62, 0x01 if italic else 0x40)
        return bytes(data[:size])

    @staticmethod
    def post_table(is_fixed_pitch: int = 0, size: int = 32) -> bytes:
        """Build a post table, truncated to ``size`` bytes."""
        data = bytearray(max(size, 32))
        struct.pack_into(">I", data, 0, 0x00030000)
        struct.pack_into(">I", data, 12, is_fixed_pitch)
        return bytes(data[:size])

    @classmethod
    def font(
        cls,
        name: str | None = "Test Sans",
        family: str | None = None,
        version: str | None = "Version 1.000",
        copyright: str | None = None,
        weight: int | None = 400,
        italic: bool = False,
        monospace_panose: bool = False,
        fixed_pitch: bool = False,
    ) -> bytes:
        """Build a complete font with name, OS/2 and post tables."""
        records = []
        if copyright is not None:
            records.append((0, copyright))
        family = family if family is not None else name
        if family is not None:
            records.append((1, family))
        if name is not None:
            records.append((4, name))
        if version is not None:
            records.append((5, version))

        tables = {"name": cls.name_table(records)}
        if weight is not None:
            tables["OS/2"] = cls.os2_table(
                weight=weight, italic=italic, panose_proportion=9 if monospace_panose else 2
            )
        tables["post"] = cls.post_table(is_fixed_pitch=1 if fixed_pitch else 0)
        return cls.table_directory(tables)


class FakeClock:
    """Manually advanced monotonic clock, in seconds."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def sfnt():
    """Synthetic sfnt buffer builder."""
    return SfntBuilder


@pytest.fixture
def clock():
    """Fake clock for cache expiry tests."""
    return FakeClock()


@pytest.fixture
def font_cache(clock):
    """Isolated one-second cache driven by the fake clock."""
    return FontCache(ttl_ms=1000, clock=clock)


@pytest.fixture
def font_tree(tmp_path, sfnt):
    """
    Create a temporary font directory.

    Layout (six candidates, four parseable fonts):
        Custom-Bold.ttf      garbage bytes, filename fallback
        Regular.ttf          "Test Sans", weight 400
        a/b/Shallow.ttf      "Shallow Serif", at the depth limit
        a/b/c/Deep.ttf       below the depth limit, never collected
        bold/Bold.ttf        "Test Sans Bold", weight 700
        mono/Mono.otf        "Test Mono", fixed pitch
        web.woff             opaque container, filename fallback
        .hidden/, cache/     excluded directories
        readme.txt           not a font
    """
    root = tmp_path / "fonts"
    for directory in ["a/b/c", "bold", "mono", ".hidden", "cache"]:
        (root / directory).mkdir(parents=True)

    (root / "Custom-Bold.ttf").write_bytes(b"not really a font")
    (root / "Regular.ttf").write_bytes(sfnt.font(name="Test Sans", weight=400))
    (root / "a" / "b" / "Shallow.ttf").write_bytes(sfnt.font(name="Shallow Serif", weight=300))
    (root / "a" / "b" / "c" / "Deep.ttf").write_bytes(sfnt.font(name="Deep Sans"))
    (root / "bold" / "Bold.ttf").write_bytes(
        sfnt.font(name="Test Sans Bold", family="Test Sans", weight=700)
    )
    (root / "mono" / "Mono.otf").write_bytes(sfnt.font(name="Test Mono", fixed_pitch=True))
    (root / "web.woff").write_bytes(b"wOFF" + bytes(40))
    (root / ".hidden" / "Hidden.ttf").write_bytes(sfnt.font(name="Hidden Sans"))
    (root / "cache" / "Cached.ttf").write_bytes(sfnt.font(name="Cached Sans"))
    (root / "readme.txt").write_text("fonts live here")

    return root


@pytest.fixture(autouse=True)
def reset_default_cache():
    """Keep the process-wide cache from leaking between tests."""
    yield
    clear_font_cache()


@pytest.fixture
def isolated_env(monkeypatch, tmp_path):
    """Run with no FONTSCAN_* variables and no .env file in the working directory."""
    for key in list(os.environ):
        if key.startswith("FONTSCAN_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers."""
    for item in items:
        # Mark slow tests
        if "slow" in item.nodeid or item.get_closest_marker("slow"):
            item.add_marker(pytest.mark.slow)

        # Mark integration tests
        if "integration" in item.nodeid:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
