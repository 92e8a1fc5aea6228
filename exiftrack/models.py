from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path


class OutputFormat(str, Enum):
    GPX = "gpx"
    GEOJSON = "geojson"


@dataclass(frozen=True)
class GeoTagRecord:
    captured_at: datetime | None = None
    latitude: float | None = None  # decimal degrees, south negative
    longitude: float | None = None  # decimal degrees, west negative
    altitude: float | None = None  # metres
    path: Path | None = field(default=None, compare=False)

    @property
    def is_complete(self) -> bool:
        return (
            self.captured_at is not None
            and self.latitude is not None
            and self.longitude is not None
        )


@dataclass(frozen=True)
class Track:
    """Complete records ordered by capture time."""
    points: tuple[GeoTagRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)


@dataclass
class ProgressCounters:
    total: int = 0  # entries discovered so far
    processed: int = 0  # entries handled so far

    def reset(self) -> None:
        self.total = 0
        self.processed = 0
