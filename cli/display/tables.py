"""
Rich table displays for tablature information.

Provides formatted output for header metadata and decoded scores.
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cli.display.formatters import (
    format_channel,
    format_repeat,
    format_time_signature,
    format_tuning,
    key_signature_name,
    pan_bar,
    value_bar,
)
from gptab.models.score import Score, ScoreInfo

console = Console()


def display_score_info(info: ScoreInfo, filepath: Optional[str] = None) -> None:
    """Display the header metadata of one file."""
    lines = []
    if filepath:
        lines.append(f"[bold]File:[/bold] {filepath}")
    lines.append(f"[bold]Version:[/bold] {info.version!r}")

    for label, value in (
        ("Title", info.title),
        ("Subtitle", info.subtitle),
        ("Artist", info.artist),
        ("Album", info.album),
        ("Lyricist", info.lyricist),
        ("Composer", info.composer),
        ("Copyright", info.copyright),
        ("Tab", info.transcriber),
        ("Instructions", info.instructions),
    ):
        if value:
            lines.append(f"[bold]{label}:[/bold] {value}")

    console.print(
        Panel(
            "\n".join(lines),
            title=f"[bold blue]{info.title or 'Untitled'}[/bold blue]",
            border_style="blue",
            expand=False,
        )
    )


def display_score_summary(score: Score, filepath: Optional[str] = None) -> None:
    """Display a panel with the score header and global settings."""
    content = f"""[bold]File:[/bold] {filepath or "-"}
[bold]Title:[/bold] {score.title or "N/A"}
[bold]Artist:[/bold] {score.artist or "N/A"}
[bold]Version:[/bold] {score.version} ({score.major}.{score.minor})
[bold]Tempo:[/bold] {score.tempo} BPM {score.tempo_name}
[bold]Key:[/bold] {key_signature_name(score.key_signature)}
[bold]Measures:[/bold] {score.measure_count}
[bold]Tracks:[/bold] {score.track_count}"""

    console.print(
        Panel(
            content,
            title="[bold blue]Score[/bold blue]",
            border_style="blue",
            expand=False,
        )
    )


def display_tracks_table(score: Score) -> None:
    """Display one row per track: tuning, channel and content counts."""
    table = Table(title="Tracks", box=box.ROUNDED, show_header=True, header_style="bold")
    table.add_column("#", width=3, justify="right")
    table.add_column("Name", width=20)
    table.add_column("Tuning", width=24)
    table.add_column("Channel", width=30)
    table.add_column("Clef", width=7)
    table.add_column("Capo", width=5, justify="right")
    table.add_column("Notes", width=7, justify="right")

    for track in score.tracks:
        channel = score.get_track_channel(track)
        clef = track.measures[0].clef.value if track.measures else "-"
        table.add_row(
            str(track.number),
            track.name,
            format_tuning(track.strings),
            format_channel(channel) if channel else "[dim]unbound[/dim]",
            clef,
            str(track.offset) if track.offset else "-",
            str(track.note_count),
        )

    console.print(table)


def display_channels_table(score: Score) -> None:
    """Display the channels bound by tracks with their mix values."""
    table = Table(title="Channels", box=box.SIMPLE, show_header=True, header_style="dim")
    table.add_column("ID", width=4, justify="right")
    table.add_column("Name", width=20)
    table.add_column("Prog", width=5, justify="right")
    table.add_column("Volume", width=18)
    table.add_column("Pan", width=20)
    table.add_column("Rev", width=4, justify="right")
    table.add_column("Cho", width=4, justify="right")
    table.add_column("GM", width=7)

    for channel in score.channels:
        gm = "/".join(
            value
            for value in (
                channel.get_parameter("gm channel 1"),
                channel.get_parameter("gm channel 2"),
            )
            if value is not None
        )
        table.add_row(
            str(channel.id),
            channel.name,
            str(channel.program),
            value_bar(channel.volume),
            pan_bar(channel.pan),
            str(channel.reverb),
            str(channel.chorus),
            gm,
        )

    console.print(table)


def display_measure_headers(score: Score, limit: int = 0) -> None:
    """Display measure headers: time signature, tempo, key, repeats, markers."""
    table = Table(title="Measures", box=box.SIMPLE, show_header=True, header_style="dim")
    table.add_column("#", width=4, justify="right")
    table.add_column("Start", width=8, justify="right")
    table.add_column("Time", width=10)
    table.add_column("Tempo", width=6, justify="right")
    table.add_column("Key", width=4)
    table.add_column("Repeat", width=14)
    table.add_column("Marker", width=20)

    headers = score.measure_headers
    if limit > 0:
        headers = headers[:limit]

    for header in headers:
        table.add_row(
            str(header.number),
            str(header.start),
            format_time_signature(header.time_signature),
            str(header.tempo),
            key_signature_name(header.key_signature),
            format_repeat(header),
            header.marker.title if header.marker else "",
        )

    console.print(table)
    if limit > 0 and score.measure_count > limit:
        console.print(f"[dim]... {score.measure_count - limit} more measure(s)[/dim]")
