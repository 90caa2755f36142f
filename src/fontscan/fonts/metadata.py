"""
Font Metadata Synthesis
=======================

Combines filesystem attributes of a font file with whatever its sfnt
tables reveal, falling back to the filename when the tables do not yield
a usable name.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..core.exceptions import FontParseError
from .sfnt import parse_sfnt_metadata

logger = logging.getLogger(__name__)

# Formats sharing the sfnt table-directory container
SFNT_EXTENSIONS = {".ttf", ".otf", ".ttc"}

FONT_EXTENSIONS = {".ttf", ".otf", ".woff", ".woff2", ".ttc", ".fon", ".fnt"}


def get_base_metadata(font_path: Path, size: int, mtime: float) -> dict[str, Any]:
    """Metadata derivable from the filesystem alone."""
    return {
        "path": str(font_path),
        "format": font_path.suffix.lower()[1:],
        "file_size": size,
        "last_modified": datetime.fromtimestamp(mtime, tz=timezone.utc),
    }


def get_fallback_metadata(font_path: Path) -> dict[str, Any]:
    """Name and family taken from the filename without extension."""
    name = font_path.stem
    return {"name": name, "family": name}


def synthesize_metadata(font_path: Path, data: bytes, size: int, mtime: float) -> dict[str, Any]:
    """
    Build the metadata record for already-read font bytes.

    Args:
        font_path: Path of the font file
        data: Entire file contents
        size: File size in bytes
        mtime: Modification time as a POSIX timestamp

    Returns:
        Dictionary of FontEntry fields, always including a name
    """
    base = get_base_metadata(font_path, size, mtime)

    if font_path.suffix.lower() in SFNT_EXTENSIONS:
        try:
            parsed = parse_sfnt_metadata(data)
        except FontParseError as e:
            logger.debug(f"sfnt decoding failed for {font_path}: {e}")
            parsed = {}

        if parsed.get("name"):
            return {**base, **parsed}

        logger.debug(f"No name record in {font_path}, using filename")

    return {**base, **get_fallback_metadata(font_path)}


def read_font_metadata(font_path: str | Path) -> dict[str, Any]:
    """
    Read a font file and extract its metadata.

    Malformed or missing tables degrade to the filename fallback; only I/O
    failures propagate.

    Raises:
        OSError: If the file cannot be stat'ed or read
    """
    font_path = Path(font_path)
    stat = font_path.stat()
    data = font_path.read_bytes()
    return synthesize_metadata(font_path, data, stat.st_size, stat.st_mtime)
