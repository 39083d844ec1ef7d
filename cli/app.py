"""
gptab - Guitar Pro tablature decoder.

A CLI tool for inspecting Guitar Pro 3-5 tablature files.
"""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from cli.commands.info import info
from cli.commands.tracks import tracks
from gptab import __version__

console = Console()

# Main app
app = typer.Typer(
    name="gptab",
    help="Decode and inspect Guitar Pro tablature files.",
    add_completion=False,
    rich_markup_mode="rich",
)

# Add commands directly
app.command(name="info")(info)
app.command(name="tracks")(tracks)


def setup_logging(verbose: bool = False) -> None:
    """Send library log records through rich; DEBUG with --verbose, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]gptab[/bold] version {__version__}")
    console.print("[dim]Decoder for Guitar Pro 3-5 tablature files[/dim]")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version_flag: bool = typer.Option(False, "--version", "-V", help="Show version"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show decoder debug logging"),
) -> None:
    """
    gptab - Decode and inspect Guitar Pro tablature files.

    Supports:

    - [cyan]Guitar Pro 3, 4, 5[/cyan] header metadata (.gp3, .gp4, .gp5)
    - [cyan]Guitar Pro 5.00 / 5.10[/cyan] full decode (.gp5)

    [bold]Commands:[/bold]

        gptab info song.gp5          # Header metadata
        gptab info ~/tabs            # Metadata for every file in a directory
        gptab tracks song.gp5        # Tracks, tunings and channels

    Use --help with any command for more details.
    """
    setup_logging(verbose)

    if version_flag:
        version()
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
