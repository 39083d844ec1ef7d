"""
gptab - Decoder for Guitar Pro 3-5 tablature files.

This library provides tools to:
- Read the header metadata of Guitar Pro 3, 4 and 5 files
- Decode Guitar Pro 5 files into a Score of tracks, measures, beats and notes

Example usage:
    from gptab import GP5Reader, read_score_info

    # Full decode
    score = GP5Reader.read("song.gp5")
    for track in score.tracks:
        print(track.name, track.tuning)

    # Metadata only
    with open("song.gp4", "rb") as f:
        info = read_score_info(f.read())
    print(info.title, info.artist)
"""

__version__ = "0.1.0"
__author__ = "gptab Contributors"

from gptab.formats.gp5.decoder import GP5Decoder
from gptab.formats.gp5.reader import GP5Reader
from gptab.formats.header.reader import read_score_info
from gptab.models.score import Score, ScoreInfo
from gptab.models.track import Channel, Track
from gptab.utils.validation import (
    InvalidContainerError,
    MalformedVersionError,
    OutOfBoundsError,
    TabFormatError,
    UnsupportedVersionError,
)

__all__ = [
    "GP5Decoder",
    "GP5Reader",
    "read_score_info",
    "Score",
    "ScoreInfo",
    "Channel",
    "Track",
    "TabFormatError",
    "OutOfBoundsError",
    "UnsupportedVersionError",
    "MalformedVersionError",
    "InvalidContainerError",
]
