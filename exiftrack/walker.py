"""Directory traversal that collects complete geotag records."""
import logging
from pathlib import Path
from typing import Protocol

from rich.console import Console
from rich.markup import escape

from .exif import ExtractionError, Extractor
from .models import GeoTagRecord, ProgressCounters

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 100


class Reporter(Protocol):
    def progress(self, processed: int, total: int) -> None: ...

    def skipped(self, path: Path, error: ExtractionError) -> None: ...


class ConsoleReporter:
    """Writes progress and skip notices to stderr, one line each."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(stderr=True)

    def progress(self, processed: int, total: int) -> None:
        self.console.print(f"[dim]{processed}/{total}[/dim]", soft_wrap=True)

    def skipped(self, path: Path, error: ExtractionError) -> None:
        self.console.print(
            f"[yellow]Skipped {escape(str(path))}[/yellow]"
            f" [dim]({escape(error.reason)})[/dim]",
            soft_wrap=True,
        )


def walk(
    root: Path,
    *,
    extractor: Extractor,
    reporter: Reporter,
    counters: ProgressCounters,
    recursive: bool = False,
) -> list[GeoTagRecord]:
    """Collect complete records from files under root, depth-first.

    Entries are visited in filesystem listing order. Subdirectories are only
    entered when recursive is set. Files that cannot be decoded are reported
    and skipped; incomplete records are dropped silently.
    """
    records: list[GeoTagRecord] = []
    _walk_into(root, records, extractor, reporter, counters, recursive)
    return records


def _walk_into(
    directory: Path,
    records: list[GeoTagRecord],
    extractor: Extractor,
    reporter: Reporter,
    counters: ProgressCounters,
    recursive: bool,
) -> None:
    entries = list(directory.iterdir())
    counters.total += len(entries)

    for entry in entries:
        if entry.is_dir():
            if recursive:
                _walk_into(entry, records, extractor, reporter, counters, recursive)
        else:
            try:
                record = extractor.extract(entry)
            except ExtractionError as e:
                logger.info(f"Could not read metadata from {entry}: {e.reason}")
                reporter.skipped(entry, e)
            else:
                if record.is_complete:
                    records.append(record)
                else:
                    logger.debug(f"Incomplete geotag in {entry}, dropped")

        counters.processed += 1
        if counters.processed % PROGRESS_INTERVAL == 0:
            reporter.progress(counters.processed, counters.total)
