"""Read capture time and GPS position from image EXIF data."""
import logging
import re
import struct
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Protocol

import piexif
from PIL import Image

from .models import GeoTagRecord

logger = logging.getLogger(__name__)

# Exif 2.31 tag, not named by every piexif release
OFFSET_TIME_ORIGINAL = 0x9011

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):(\d{2})$")


class ExtractionError(Exception):
    """The metadata of a file could not be decoded at all."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class Extractor(Protocol):
    def extract(self, path: Path) -> GeoTagRecord:
        """Return the (possibly partial) geotag of a file or raise ExtractionError."""
        ...


def _text(value) -> str | None:
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    if isinstance(value, str):
        value = value.strip("\x00").strip()
        return value or None
    return None


def _rational(value) -> float | None:
    if isinstance(value, (tuple, list)) and len(value) == 2:
        num, den = value
        if not isinstance(num, (int, float)) or not isinstance(den, (int, float)):
            return None
        if not den:
            return None
        return num / den
    return None


def _parse_offset(offset: str | None) -> timezone | None:
    match = _OFFSET_RE.match(offset or "")
    if not match:
        return None
    sign, hours, minutes = match.groups()
    delta = timedelta(hours=int(hours), minutes=int(minutes))
    return timezone(-delta if sign == "-" else delta)


def parse_capture_time(
    date_str: str | None,
    subsec: str | None = None,
    offset: str | None = None,
) -> datetime | None:
    """Parse an EXIF date string (YYYY:MM:DD HH:MM:SS) to an aware datetime.

    Without an offset the time is taken as local time of this machine.
    """
    try:
        dt = datetime.strptime(date_str, "%Y:%m:%d %H:%M:%S")
    except (ValueError, TypeError):
        return None
    if subsec and subsec.isdigit():
        dt = dt.replace(microsecond=int(subsec[:6].ljust(6, "0")))
    tz = _parse_offset(offset)
    if tz is None:
        return dt.astimezone()
    return dt.replace(tzinfo=tz)


def dms_to_degrees(value, ref: str | None) -> float | None:
    """Convert an EXIF degrees/minutes/seconds triple to signed decimal degrees."""
    if not isinstance(value, (tuple, list)) or len(value) != 3:
        return None
    parts = [_rational(v) for v in value]
    if any(p is None for p in parts):
        return None
    degrees, minutes, seconds = parts
    result = degrees + minutes / 60 + seconds / 3600
    if ref in ("S", "W"):
        result = -result
    # A zero coordinate means the camera had no fix
    return result or None


def read_capture(exif_data: dict) -> tuple[datetime | None, float | None]:
    """Capture time and altitude (metres, below sea level negative)."""
    exif_ifd = exif_data.get("Exif", {})
    gps_ifd = exif_data.get("GPS", {})

    captured_at = parse_capture_time(
        _text(exif_ifd.get(piexif.ExifIFD.DateTimeOriginal)),
        _text(exif_ifd.get(piexif.ExifIFD.SubSecTimeOriginal)),
        _text(exif_ifd.get(OFFSET_TIME_ORIGINAL)),
    )

    altitude = _rational(gps_ifd.get(piexif.GPSIFD.GPSAltitude))
    if altitude and gps_ifd.get(piexif.GPSIFD.GPSAltitudeRef) == 1:
        altitude = -altitude
    return captured_at, altitude or None


def read_position(exif_data: dict) -> tuple[float | None, float | None]:
    """Latitude and longitude in decimal degrees."""
    gps_ifd = exif_data.get("GPS", {})
    latitude = dms_to_degrees(
        gps_ifd.get(piexif.GPSIFD.GPSLatitude),
        _text(gps_ifd.get(piexif.GPSIFD.GPSLatitudeRef)),
    )
    longitude = dms_to_degrees(
        gps_ifd.get(piexif.GPSIFD.GPSLongitude),
        _text(gps_ifd.get(piexif.GPSIFD.GPSLongitudeRef)),
    )
    return latitude, longitude


def _load_exif(path: Path) -> dict:
    try:
        return piexif.load(str(path))
    except piexif.InvalidImageDataError:
        pass
    except (OSError, ValueError, IndexError, KeyError, struct.error) as e:
        raise ExtractionError(path, str(e)) from e

    # Not a JPEG, TIFF or WebP file; let Pillow find the EXIF block
    try:
        with Image.open(path) as img:
            raw = img.info.get("exif")
    except (OSError, ValueError) as e:
        raise ExtractionError(path, str(e)) from e
    if not raw:
        logger.debug(f"No EXIF block in {path}")
        return {}
    try:
        return piexif.load(raw)
    except (OSError, ValueError, IndexError, KeyError, struct.error) as e:
        raise ExtractionError(path, str(e)) from e


class PiexifExtractor:
    """Extractor backed by piexif, with Pillow for other image containers."""

    def extract(self, path: Path) -> GeoTagRecord:
        exif_data = _load_exif(path)
        try:
            captured_at, altitude = read_capture(exif_data)
            latitude, longitude = read_position(exif_data)
        except (TypeError, ValueError, ArithmeticError, AttributeError) as e:
            raise ExtractionError(path, str(e)) from e
        return GeoTagRecord(
            captured_at=captured_at,
            latitude=latitude,
            longitude=longitude,
            altitude=altitude,
            path=path,
        )
