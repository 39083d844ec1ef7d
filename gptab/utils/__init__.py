"""Utility modules for byte-level decoding."""

from gptab.utils.byte_cursor import ByteCursor
from gptab.utils.validation import (
    InvalidContainerError,
    MalformedVersionError,
    OutOfBoundsError,
    TabFormatError,
    UnsupportedVersionError,
)

__all__ = [
    "ByteCursor",
    "TabFormatError",
    "OutOfBoundsError",
    "UnsupportedVersionError",
    "MalformedVersionError",
    "InvalidContainerError",
]
