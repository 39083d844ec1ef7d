"""
CLI display modules.
"""

from cli.display.tables import (
    display_channels_table,
    display_measure_headers,
    display_score_info,
    display_score_summary,
    display_tracks_table,
)

__all__ = [
    "display_channels_table",
    "display_measure_headers",
    "display_score_info",
    "display_score_summary",
    "display_tracks_table",
]
