"""Font Parsing Module
===================

Byte-level sfnt decoding, metadata synthesis and discovery of font files
on the local machine.
"""

from .metadata import FONT_EXTENSIONS, read_font_metadata, synthesize_metadata
from .reader import ByteReader
from .sfnt import parse_sfnt_metadata, read_table_directory
from .system import SystemFontProvider, collect_font_files, get_platform_font_dirs

__all__ = [
    "FONT_EXTENSIONS",
    "ByteReader",
    "SystemFontProvider",
    "collect_font_files",
    "get_platform_font_dirs",
    "parse_sfnt_metadata",
    "read_font_metadata",
    "read_table_directory",
    "synthesize_metadata",
]
