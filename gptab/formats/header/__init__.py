"""Metadata-only header reading for Guitar Pro 3-5 files."""

from gptab.formats.header.reader import read_score_info, sniff_container

__all__ = ["read_score_info", "sniff_container"]
