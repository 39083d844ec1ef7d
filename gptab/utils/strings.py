"""
String encodings used by Guitar Pro files.

Four layouts occur in the format:

- FixedByteString(max_size): a length byte, then a slot of ``max_size``
  bytes of which only the first ``length`` are text. With ``max_size <= 0``
  the slot is exactly ``length`` bytes.
- ByteSizePrefixedString: a byte holding the slot size including the inner
  length byte, followed by a FixedByteString of that size minus one.
- IntSizePrefixedString: a 32-bit length followed by that many bytes.
- LongString: a 32-bit size and a length byte. When the size is zero the
  length byte is used as the size instead. The byte is always consumed.

Text is decoded as latin-1, which maps every byte to one character.
"""

from gptab.utils.byte_cursor import ByteCursor

ENCODING = "latin-1"


def decode_text(raw: bytes) -> str:
    """Decode raw string bytes from the file."""
    return raw.decode(ENCODING)


def read_byte_string(cursor: ByteCursor, size: int, length: int) -> str:
    """
    Read a string slot and return its meaningful prefix.

    Args:
        cursor: Cursor positioned at the slot
        size: Slot size in bytes; if <= 0, ``length`` bytes are read
        length: Number of meaningful characters in the slot

    Returns:
        The first ``min(length, bytes read)`` characters
    """
    count = size if size > 0 else length
    raw = cursor.read_fixed_string(count)
    if 0 <= length <= count:
        raw = raw[:length]
    return decode_text(raw)


def read_fixed_byte_string(cursor: ByteCursor, max_size: int) -> str:
    """Read a length byte followed by a slot of ``max_size`` bytes."""
    length = cursor.read_byte()
    return read_byte_string(cursor, max_size, length)


def read_byte_size_string(cursor: ByteCursor) -> str:
    """Read a string whose slot size (including its length byte) is a byte."""
    size = cursor.read_byte()
    return read_fixed_byte_string(cursor, size - 1)


def read_int_size_string(cursor: ByteCursor) -> str:
    """Read a 32-bit length followed by that many bytes of text."""
    length = cursor.read_int()
    return decode_text(cursor.read_fixed_string(length))


def read_long_string(cursor: ByteCursor) -> str:
    """
    Read a string used by the metadata-only header reader.

    A zero size means "take the size from the following byte". A size that
    works out below one yields an empty string.
    """
    size = cursor.read_int()
    fallback = cursor.read_byte()
    if size == 0:
        size = fallback
    if size <= 1:
        return ""
    return decode_text(cursor.read_fixed_string(size - 1))
