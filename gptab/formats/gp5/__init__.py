"""Guitar Pro 5 format support."""

from gptab.formats.gp5.beat_parser import BeatParser
from gptab.formats.gp5.decoder import GP5Decoder, decode
from gptab.formats.gp5.reader import GP5Reader

__all__ = ["BeatParser", "GP5Decoder", "GP5Reader", "decode"]
