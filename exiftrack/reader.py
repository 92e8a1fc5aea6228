import logging
from pathlib import Path

from .exif import Extractor, PiexifExtractor
from .models import GeoTagRecord, OutputFormat, ProgressCounters, Track
from .serializer import render, write_output
from .track import finalize
from .walker import ConsoleReporter, Reporter, walk

logger = logging.getLogger(__name__)


class TrackReader:
    """Reads the geotagged photos under one directory into a track.

    The format is validated up front so a bad value fails before any file
    is touched.
    """

    def __init__(
        self,
        input_dir: Path,
        fmt: OutputFormat | str = OutputFormat.GPX,
        recursive: bool = False,
        extractor: Extractor | None = None,
        reporter: Reporter | None = None,
    ):
        self.format = OutputFormat(fmt)
        self.input_dir = Path(input_dir)
        if not self.input_dir.is_dir():
            raise NotADirectoryError(f"Directory not found: {self.input_dir}")
        self.recursive = recursive
        self.extractor = extractor or PiexifExtractor()
        self.reporter = reporter or ConsoleReporter()
        self.counters = ProgressCounters()
        self.track = Track()

    def read(self) -> Track:
        self.counters.reset()
        records: list[GeoTagRecord] = walk(
            self.input_dir,
            extractor=self.extractor,
            reporter=self.reporter,
            counters=self.counters,
            recursive=self.recursive,
        )
        self.track = finalize(records)
        logger.info(
            f"{len(self.track)} geotagged photos out of "
            f"{self.counters.processed} entries in {self.input_dir}"
        )
        return self.track

    def render(self) -> str:
        return render(self.track, self.format)

    def write(self, destination: Path | None = None) -> None:
        write_output(self.render(), destination)
