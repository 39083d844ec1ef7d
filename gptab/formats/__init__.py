"""Format handlers for Guitar Pro files."""

from gptab.formats.header import read_score_info, sniff_container
from gptab.formats.gp5 import GP5Decoder, GP5Reader

__all__ = ["GP5Decoder", "GP5Reader", "read_score_info", "sniff_container"]
