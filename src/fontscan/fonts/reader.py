"""
Byte Reader
===========

Range-checked big-endian accessors over an immutable byte buffer. Every
read is validated against the buffer length before it happens, so callers
doing offset arithmetic on untrusted font data can never read past the end.
"""

import struct

from ..core.exceptions import ByteRangeError

_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")


class ByteReader:
    """Safe accessor over a fixed byte buffer."""

    __slots__ = ("_data",)

    def __init__(self, data: bytes | bytearray | memoryview):
        self._data = memoryview(bytes(data))

    def __len__(self) -> int:
        return len(self._data)

    def _check(self, offset: int, width: int) -> None:
        if offset < 0 or width < 0 or offset + width > len(self._data):
            raise ByteRangeError(offset, width, len(self._data))

    def read_u8(self, offset: int) -> int:
        self._check(offset, 1)
        return self._data[offset]

    def read_u16(self, offset: int) -> int:
        self._check(offset, 2)
        return _U16.unpack_from(self._data, offset)[0]

    def read_u32(self, offset: int) -> int:
        self._check(offset, 4)
        return _U32.unpack_from(self._data, offset)[0]

    def slice(self, start: int, end: int) -> memoryview:
        """Return a read-only view of ``[start, end)``."""
        self._check(start, end - start)
        return self._data[start:end]

    def fits(self, offset: int, width: int) -> bool:
        """Whether ``width`` bytes at ``offset`` lie inside the buffer."""
        return offset >= 0 and width >= 0 and offset + width <= len(self._data)
