import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .models import OutputFormat
from .reader import TrackReader
from .walker import ConsoleReporter

app = typer.Typer(help="exiftrack - Build a GPX or GeoJSON track from photo geotags")
console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"exiftrack {__version__}")
        raise typer.Exit()


@app.command()
def main(
    input_dir: Path = typer.Argument(..., help="Path to the image files directory"),
    fmt: OutputFormat = typer.Option(
        OutputFormat.GPX, "--format", "-f",
        envvar="EXIFTRACK_FORMAT",
        case_sensitive=False,
        help="Output format",
    ),
    recursive: bool = typer.Option(
        False, "--recursive", "-r",
        envvar="EXIFTRACK_RECURSIVE",
        help="Also read photos in subdirectories",
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o",
        help="Write the track to this file instead of stdout",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    version: bool = typer.Option(
        False, "--version",
        callback=_version_callback, is_eager=True,
        help="Show the version and exit",
    ),
):
    """Read the EXIF GPS tags of all photos in INPUT_DIR and print them as one track."""
    _setup_logging(verbose)

    try:
        reader = TrackReader(
            input_dir, fmt,
            recursive=recursive,
            reporter=ConsoleReporter(console),
        )
    except NotADirectoryError:
        console.print(f"[red]Directory not found: {escape(str(input_dir))}[/red]")
        raise typer.Exit(1)

    try:
        reader.read()
    except OSError as e:
        console.print(f"[red]Could not read directory: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    try:
        reader.write(output)
    except OSError as e:
        console.print(f"[red]Could not write output: {escape(str(e))}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
