"""Shared fixtures: real JPEG files with EXIF written by piexif."""
from pathlib import Path

import piexif
import pytest
from PIL import Image


def _dms(value: float) -> tuple:
    value = abs(value)
    degrees = int(value)
    minutes = int((value - degrees) * 60)
    seconds = round(((value - degrees) * 60 - minutes) * 60 * 100)
    return ((degrees, 1), (minutes, 1), (seconds, 100))


def write_photo(
    path: Path,
    date: str | None = None,
    lat: float | None = None,
    lng: float | None = None,
    alt: float | None = None,
    alt_ref: int = 0,
    subsec: str | None = None,
    raw_gps: dict | None = None,
) -> Path:
    """Write a tiny JPEG with the given capture time and GPS tags."""
    exif: dict = {}
    gps: dict = {}
    if date is not None:
        exif[piexif.ExifIFD.DateTimeOriginal] = date
    if subsec is not None:
        exif[piexif.ExifIFD.SubSecTimeOriginal] = subsec
    if lat is not None:
        gps[piexif.GPSIFD.GPSLatitude] = _dms(lat)
        gps[piexif.GPSIFD.GPSLatitudeRef] = "N" if lat >= 0 else "S"
    if lng is not None:
        gps[piexif.GPSIFD.GPSLongitude] = _dms(lng)
        gps[piexif.GPSIFD.GPSLongitudeRef] = "E" if lng >= 0 else "W"
    if alt is not None:
        gps[piexif.GPSIFD.GPSAltitude] = (int(round(alt * 100)), 100)
        gps[piexif.GPSIFD.GPSAltitudeRef] = alt_ref
    if raw_gps:
        gps.update(raw_gps)

    exif_bytes = piexif.dump({"0th": {}, "Exif": exif, "GPS": gps, "1st": {}, "thumbnail": None})
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", (8, 8), "white").save(path, "JPEG", exif=exif_bytes)
    return path


@pytest.fixture
def make_photo():
    return write_photo
