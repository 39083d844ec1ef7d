"""
Info command - display header metadata of tablature files.
"""

from pathlib import Path
from typing import List

import typer
from rich.console import Console

from cli.display.tables import display_score_info
from gptab.formats.gp5.reader import GP5Reader
from gptab.formats.header.reader import read_score_info
from gptab.utils.validation import TabFormatError

console = Console()


def collect_files(path: Path, recursive: bool = True) -> List[Path]:
    """
    List the supported tablature files at ``path``.

    Args:
        path: A file or a directory
        recursive: Descend into subdirectories

    Returns:
        Sorted list of files with a supported extension
    """
    if path.is_file():
        return [path]

    pattern = "**/*" if recursive else "*"
    return sorted(
        p
        for p in path.glob(pattern)
        if p.is_file() and p.suffix.lower() in GP5Reader.EXTENSIONS
    )


def info(
    path: Path = typer.Argument(..., help="Tablature file or directory (.gp3, .gp4, .gp5)"),
    recursive: bool = typer.Option(
        True, "--recursive/--no-recursive", "-r", help="Walk subdirectories"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """
    Display tablature file metadata.

    Reads only the file header, so it works for Guitar Pro 3, 4 and 5:

    - Version tag
    - Title, subtitle, artist, album
    - Lyricist, composer, copyright, tab author
    - Instructions (version 5)

    Examples:

        gptab info song.gp5             # One file
        gptab info ~/tabs               # Every file below a directory
        gptab info ~/tabs --json        # JSON output
    """
    if not path.exists():
        console.print(f"[red]Error: File not found: {path}[/red]")
        raise typer.Exit(1)

    files = collect_files(path, recursive)
    if not files:
        console.print(f"[yellow]No Guitar Pro files found in {path}[/yellow]")
        return

    results = []
    failed = 0
    for filepath in files:
        try:
            score_info = read_score_info(filepath.read_bytes())
        except (TabFormatError, OSError) as e:
            failed += 1
            if json_output:
                results.append({"path": str(filepath), "error": str(e)})
            else:
                console.print(f"[red]{filepath}: {e}[/red]")
            continue

        if json_output:
            results.append({"path": str(filepath), **score_info.to_dict()})
        else:
            display_score_info(score_info, str(filepath))

    if json_output:
        console.print_json(data=results)

    if failed:
        raise typer.Exit(1)
