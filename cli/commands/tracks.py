"""
Tracks command - decode a GP5 file and show its tracks.
"""

from pathlib import Path

import typer
from rich.console import Console

from cli.display.tables import (
    display_channels_table,
    display_measure_headers,
    display_score_summary,
    display_tracks_table,
)
from gptab.formats.gp5.reader import GP5Reader
from gptab.utils.validation import TabFormatError

console = Console()


def tracks(
    file: Path = typer.Argument(..., help="GP5 file to decode"),
    channels: bool = typer.Option(
        True, "--channels/--no-channels", "-c", help="Show bound channels"
    ),
    measures: int = typer.Option(
        0, "--measures", "-m", help="Show the first N measure headers (0 = none)"
    ),
) -> None:
    """
    Display tracks of a decoded GP5 file.

    Shows for each track:
    - Name and tuning
    - Bound channel with program and bank
    - Clef and capo
    - Number of decoded notes

    Examples:

        gptab tracks song.gp5

        gptab tracks song.gp5 --no-channels

        gptab tracks song.gp5 --measures 16
    """
    if not file.exists():
        console.print(f"[red]Error: File not found: {file}[/red]")
        raise typer.Exit(1)

    try:
        score = GP5Reader.read(file)
    except TabFormatError as e:
        console.print(f"[red]Error: {file}: {e}[/red]")
        raise typer.Exit(1)

    display_score_summary(score, str(file))
    console.print()
    display_tracks_table(score)

    if channels and score.channels:
        console.print()
        display_channels_table(score)

    if measures > 0:
        console.print()
        display_measure_headers(score, limit=measures)
