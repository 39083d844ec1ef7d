"""
Metadata-only reader for Guitar Pro 3, 4 and 5 files.

Reads the signature, a short version tag and the header text fields, and
stops there. Unlike the full decoder, every failure here is fatal.

Layout:
    0x00        length of the version string
    0x01        "FICHIER GUITAR PRO vX.YY" (or "FICHIER GUITARE PRO ...")
    0x14/0x15   short version tag, 4 bytes ("v5.0", "1.04", ...)
    len + 6     text fields, after 3 (legacy tags) or 1 (modern) byte(s)
"""

import logging
from typing import Tuple, Union

from gptab.models.score import ScoreInfo
from gptab.utils.byte_cursor import ByteCursor
from gptab.utils.strings import decode_text, read_long_string
from gptab.utils.validation import (
    InvalidContainerError,
    UnsupportedVersionError,
    detect_signature,
    is_compressed_container,
)

logger = logging.getLogger(__name__)

LEGACY_VERSIONS = ("1T\x03\x04", "1.04", "1.02", "1.03")
MODERN_VERSIONS = ("v3.0", "v4.0", "v5.0", "v5.1")
INSTRUCTION_VERSIONS = ("v5.0", "v5.1")

VERSION_TAG_SIZE = 4

TEXT_FIELDS = (
    "title",
    "artist",
    "subtitle",
    "album",
    "lyricist",
    "composer",
    "copyright",
    "transcriber",
)


def sniff_container(data: bytes) -> Tuple[str, int]:
    """
    Identify the container kind of a Guitar Pro buffer.

    Args:
        data: File contents (at least the first 20 bytes)

    Returns:
        ("compressed", 0) for a BCFZ container, or ("plain", offset) with
        the offset of the short version tag

    Raises:
        InvalidContainerError: If no known magic header is present
    """
    if not data:
        raise InvalidContainerError("Empty buffer")
    if is_compressed_container(data):
        return "compressed", 0

    offset = detect_signature(data)
    if offset is None:
        raise InvalidContainerError("Invalid Guitar Pro file")
    return "plain", offset


def read_score_info(data: Union[bytes, bytearray]) -> ScoreInfo:
    """
    Read the header text fields of a Guitar Pro file.

    Args:
        data: Complete (or at least header-complete) file contents

    Returns:
        ScoreInfo with the version tag and text fields

    Raises:
        InvalidContainerError: No known magic header
        UnsupportedVersionError: Compressed container or unknown version tag
        OutOfBoundsError: Buffer ends inside the header
    """
    kind, offset = sniff_container(bytes(data))
    if kind == "compressed":
        raise UnsupportedVersionError("BCFZ compressed containers are not supported")

    cursor = ByteCursor(data, offset)
    version = decode_text(cursor.read_fixed_string(VERSION_TAG_SIZE))

    cursor.seek(data[0] + 6)
    if version in LEGACY_VERSIONS:
        cursor.skip(3)
    elif version in MODERN_VERSIONS:
        cursor.skip(1)
    else:
        raise UnsupportedVersionError(f"Unsupported version: {version!r}")
    logger.debug(f"Header version tag {version!r}, text at offset {cursor.position}")

    info = ScoreInfo(version=version)
    for name in TEXT_FIELDS:
        setattr(info, name, read_long_string(cursor))
    if version in INSTRUCTION_VERSIONS:
        info.instructions = read_long_string(cursor)
    return info
