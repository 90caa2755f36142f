"""
sfnt Table Decoding
===================

Reads the table directory shared by TrueType, OpenType and TrueType
Collection files and decodes the handful of tables needed for font
inventory metadata:

- ``name``: copyright, family, full name and version strings
- ``OS/2``: weight class, italic bit and the PANOSE proportion hint
- ``post``: the fixed-pitch flag

Decoding is best-effort. Each decoder returns a partial dictionary holding
only the fields it could read; truncated or out-of-range data shrinks the
result instead of raising.

References:
    https://learn.microsoft.com/en-us/typography/opentype/spec/otff
    https://learn.microsoft.com/en-us/typography/opentype/spec/name
"""

import logging
import re
from typing import Any, NamedTuple

from ..core.exceptions import ByteRangeError, InvalidContainerError
from .reader import ByteReader

logger = logging.getLogger(__name__)

# Whitespace and byte-order marks around name strings
NAME_TRIM_PATTERN = re.compile(r"\A[\s\ufeff]+|[\s\ufeff]+\Z")

SFNT_HEADER_SIZE = 12
TABLE_RECORD_SIZE = 16
NAME_HEADER_SIZE = 6
NAME_RECORD_SIZE = 12

TTC_TAG = b"ttcf"

# nameID -> FontEntry field
NAME_ID_FIELDS = {
    0: "copyright",
    1: "family",
    4: "name",
    5: "version",
}

PANOSE_OFFSET = 32
PANOSE_LENGTH = 10
PANOSE_PROPORTION_INDEX = 3
PANOSE_MONOSPACED = 9

OS2_WEIGHT_OFFSET = 4
OS2_FS_SELECTION_OFFSET = 62
OS2_MIN_SIZE = 8
OS2_FS_SELECTION_MIN_SIZE = 64
FS_SELECTION_ITALIC = 0x01

POST_IS_FIXED_PITCH_OFFSET = 12
POST_MIN_SIZE = 32


class TableRecord(NamedTuple):
    """Location of one table inside the font buffer."""

    offset: int
    length: int


def _as_reader(data: bytes | ByteReader) -> ByteReader:
    return data if isinstance(data, ByteReader) else ByteReader(data)


def read_table_directory(
    data: bytes | ByteReader, base: int = 0, strict: bool = False
) -> dict[str, TableRecord]:
    """
    Read the sfnt table directory.

    Args:
        data: Whole-file buffer
        base: Offset of the sfnt header (non-zero inside collections)
        strict: Raise ``InvalidContainerError`` instead of returning an
            empty directory when the buffer cannot hold a header

    Returns:
        Mapping of table tag to its location. Duplicate tags keep the first
        record; a directory cut short by the end of the buffer yields the
        records read so far.
    """
    reader = _as_reader(data)
    tables: dict[str, TableRecord] = {}

    if not reader.fits(base, SFNT_HEADER_SIZE):
        if strict:
            raise InvalidContainerError(len(reader))
        return tables

    num_tables = reader.read_u16(base + 4)

    for i in range(num_tables):
        entry = base + SFNT_HEADER_SIZE + i * TABLE_RECORD_SIZE
        if not reader.fits(entry, TABLE_RECORD_SIZE):
            logger.debug(f"Table directory truncated after {i} of {num_tables} records")
            break

        tag = bytes(reader.slice(entry, entry + 4)).decode("latin-1")
        if tag in tables:
            continue
        tables[tag] = TableRecord(reader.read_u32(entry + 8), reader.read_u32(entry + 12))

    return tables


def collection_font_offset(data: bytes | ByteReader) -> int:
    """Offset of the first font in a TrueType Collection, 0 for plain sfnt files."""
    reader = _as_reader(data)
    try:
        if bytes(reader.slice(0, 4)) == TTC_TAG:
            # ttcf header: tag, version, numFonts, then the offset table
            if reader.read_u32(8) > 0:
                return reader.read_u32(12)
    except ByteRangeError:
        pass
    return 0


def decode_utf16be(raw: bytes | memoryview) -> str:
    """
    Decode a UTF-16BE name string.

    A trailing odd byte is dropped and NUL code units are removed. Unpaired
    surrogates become U+FFFD so the result is always valid text.
    """
    raw = bytes(raw)
    if len(raw) % 2:
        raw = raw[:-1]
    return raw.decode("utf-16-be", errors="replace").replace("\x00", "")


def decode_name_table(data: bytes | ByteReader, offset: int, length: int = 0) -> dict[str, Any]:
    """
    Decode copyright, family, full name and version from a ``name`` table.

    Every record is read regardless of platform or encoding and decoded as
    UTF-16BE; when several records share a nameID the last one on disk wins.
    ``length`` is advisory only.
    """
    reader = _as_reader(data)
    result: dict[str, Any] = {}

    if not reader.fits(offset, NAME_HEADER_SIZE):
        return result

    try:
        count = reader.read_u16(offset + 2)
        storage_offset = offset + reader.read_u16(offset + 4)

        for j in range(count):
            record = offset + NAME_HEADER_SIZE + j * NAME_RECORD_SIZE
            if not reader.fits(record, NAME_RECORD_SIZE):
                break

            field = NAME_ID_FIELDS.get(reader.read_u16(record + 6))
            if field is None:
                continue

            string_length = reader.read_u16(record + 8)
            start = storage_offset + reader.read_u16(record + 10)
            if not reader.fits(start, string_length):
                continue

            raw = reader.slice(start, start + string_length)
            text = NAME_TRIM_PATTERN.sub("", decode_utf16be(raw))
            if text:
                result[field] = text

    except ByteRangeError as e:
        logger.debug(f"name table decoding stopped early: {e}")

    return result


def decode_os2_table(data: bytes | ByteReader, offset: int, length: int = 0) -> dict[str, Any]:
    """Decode weight class, italic style and the PANOSE monospace hint."""
    reader = _as_reader(data)
    result: dict[str, Any] = {}

    if not reader.fits(offset, OS2_MIN_SIZE):
        return result

    try:
        result["weight"] = reader.read_u16(offset + OS2_WEIGHT_OFFSET)

        if reader.fits(offset, OS2_FS_SELECTION_MIN_SIZE):
            fs_selection = reader.read_u16(offset + OS2_FS_SELECTION_OFFSET)
            result["style"] = "italic" if fs_selection & FS_SELECTION_ITALIC else "normal"

        if reader.fits(offset, PANOSE_OFFSET + PANOSE_LENGTH):
            panose = reader.slice(offset + PANOSE_OFFSET, offset + PANOSE_OFFSET + PANOSE_LENGTH)
            if panose[PANOSE_PROPORTION_INDEX] == PANOSE_MONOSPACED:
                result["is_monospace"] = True

    except ByteRangeError as e:
        logger.debug(f"OS/2 table decoding stopped early: {e}")

    return result


def decode_post_table(data: bytes | ByteReader, offset: int, length: int = 0) -> dict[str, Any]:
    """Decode the fixed-pitch flag. Only a true signal is ever reported."""
    reader = _as_reader(data)
    result: dict[str, Any] = {}

    if not reader.fits(offset, POST_MIN_SIZE):
        return result

    if reader.read_u32(offset + POST_IS_FIXED_PITCH_OFFSET) != 0:
        result["is_monospace"] = True

    return result


TABLE_DECODERS = {
    "name": decode_name_table,
    "OS/2": decode_os2_table,
    "post": decode_post_table,
}


def parse_sfnt_metadata(data: bytes | ByteReader) -> dict[str, Any]:
    """
    Decode all supported tables of an sfnt buffer into one partial record.

    Tables are decoded in directory order. Monospace signals from OS/2 and
    post are merged so either one is sufficient.

    A TrueType Collection (``ttcf``) is decoded as its first member font.
    Reading the table directory at byte 0 would find the collection header
    instead and leave only the filename fallback.
    """
    reader = _as_reader(data)
    metadata: dict[str, Any] = {}

    directory = read_table_directory(reader, base=collection_font_offset(reader))
    for tag, record in directory.items():
        decoder = TABLE_DECODERS.get(tag)
        if decoder is None:
            continue

        metadata.update(decoder(reader, record.offset, record.length))

    return metadata
