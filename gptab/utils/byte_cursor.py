"""
Position-tracking reader over an immutable byte buffer.

All multi-byte integers in Guitar Pro files are little-endian. Reads are
all-or-nothing: a read that would run past the end of the buffer raises
OutOfBoundsError and leaves the position where it was.
"""

import struct

from gptab.utils.validation import OutOfBoundsError


class ByteCursor:
    """
    Sequential reader over a bytes buffer.

    Example:
        cursor = ByteCursor(data)
        count = cursor.read_int()
        flags = cursor.read_byte()
    """

    def __init__(self, data: bytes, position: int = 0):
        if isinstance(data, (bytearray, memoryview)):
            data = bytes(data)
        self.data = data
        self.position = position

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def remaining(self) -> int:
        """Bytes left before the end of the buffer (negative after an over-skip)."""
        return len(self.data) - self.position

    @property
    def exhausted(self) -> bool:
        return self.position >= len(self.data)

    def _take(self, count: int) -> bytes:
        if count < 0 or self.position < 0 or self.position + count > len(self.data):
            raise OutOfBoundsError(self.position, count, len(self.data))
        chunk = self.data[self.position : self.position + count]
        self.position += count
        return chunk

    def read_byte(self) -> int:
        """Read an unsigned 8-bit value."""
        return self._take(1)[0]

    def read_signed_byte(self) -> int:
        """Read a signed 8-bit value."""
        return struct.unpack("<b", self._take(1))[0]

    def read_int(self) -> int:
        """Read a signed 32-bit little-endian value."""
        return struct.unpack("<i", self._take(4))[0]

    def read_bytes(self, count: int) -> bytes:
        """Read exactly ``count`` raw bytes."""
        return self._take(count)

    def read_fixed_string(self, count: int) -> bytes:
        """Read a fixed-size field of ``count`` bytes."""
        return self._take(count)

    def skip(self, count: int) -> None:
        """
        Advance the position without bounds checking.

        The position may end up past the end of the buffer; any later read
        then fails with OutOfBoundsError.
        """
        self.position += count

    def seek(self, position: int) -> None:
        """Move to an absolute offset."""
        self.position = position

    def __repr__(self) -> str:
        return f"ByteCursor(position={self.position}, size={len(self.data)})"
