"""
Errors and validation helpers for Guitar Pro tablature data.

Decoding uses a two-tier failure policy:

- Fatal errors (bad container, unknown or malformed version, truncated
  header) propagate to the caller and no Score is produced.
- Field-level read failures deep inside the file are logged and the field
  is left zero-valued, so a slightly damaged file still yields a Score.
"""

import re
from typing import Optional, Tuple


class TabFormatError(Exception):
    """Base class for all tablature decoding errors."""

    pass


class OutOfBoundsError(TabFormatError):
    """Raised when a read runs past the end of the buffer."""

    def __init__(self, position: int, requested: int, size: int):
        self.position = position
        self.requested = requested
        self.size = size
        super().__init__(
            f"Cannot read {requested} byte(s) at offset {position} (buffer size {size})"
        )


class UnsupportedVersionError(TabFormatError):
    """Raised when the version signature is not one we can decode."""

    pass


class MalformedVersionError(TabFormatError):
    """Raised when a recognised version lacks a major.minor number."""

    pass


class InvalidContainerError(TabFormatError):
    """Raised when the buffer does not start with a Guitar Pro magic header."""

    pass


VERSION_NUMBER_PATTERN = re.compile(r"(\d+)\.(\d+)")

COMPRESSED_MAGIC = b"BCFZ"
SIGNATURE = b"FICHIER GUITAR PRO"
LEGACY_SIGNATURE = b"FICHIER GUITARE PRO"


def parse_version_number(version: str) -> Tuple[int, int]:
    """
    Extract major and minor version numbers from a version string.

    Args:
        version: Version string, e.g. "FICHIER GUITAR PRO v5.10"

    Returns:
        Tuple of (major, minor)

    Raises:
        MalformedVersionError: If no "digits.digits" pattern is present
    """
    match = VERSION_NUMBER_PATTERN.search(version)
    if match is None:
        raise MalformedVersionError(f"No version number in {version!r}")
    return int(match.group(1)), int(match.group(2))


def match_version(version: str, versions: Tuple[str, ...]) -> int:
    """
    Find the index of a version string in a table of supported versions.

    Matching is literal; no normalisation or prefix matching is done.

    Args:
        version: Version string read from the file
        versions: Supported version strings, ordered

    Returns:
        Index of the version within ``versions``

    Raises:
        UnsupportedVersionError: If the version is not in the table
    """
    try:
        return versions.index(version)
    except ValueError:
        raise UnsupportedVersionError(f"Unsupported version: {version!r}") from None


def detect_signature(data: bytes) -> Optional[int]:
    """
    Locate the version field of an uncompressed Guitar Pro file.

    The first byte is the length of the version string, followed by
    "FICHIER GUITAR PRO vX.YY" (or the older "FICHIER GUITARE PRO").

    Args:
        data: File contents (at least the first 19 bytes)

    Returns:
        Offset of the short version tag, or None if no signature matches
    """
    if len(data) < 19:
        return None

    head = data[1:19]
    if data[1 : 1 + len(LEGACY_SIGNATURE)] == LEGACY_SIGNATURE:
        return 21
    if head.startswith(SIGNATURE):
        return 20
    return None


def is_compressed_container(data: bytes) -> bool:
    """Check for the BCFZ compressed container tag."""
    return data[:4] == COMPRESSED_MAGIC
