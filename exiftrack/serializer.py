"""Render a track as GPX or GeoJSON."""
import json
import sys
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from pathlib import Path

from .models import OutputFormat, Track

GPX_NAMESPACE = "http://www.topografix.com/GPX/1/1"
GPX_CREATOR = "exiftrack"
GPX_LINK_HREF = "https://github.com/kamataryo/exif-trackr"
GPX_LINK_TEXT = "Exif Track"
JSON_INDENT = 2


def format_time(dt: datetime) -> str:
    """UTC instant with millisecond precision, e.g. 2023-05-01T10:00:00.000Z."""
    utc = dt.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def render_gpx(track: Track) -> str:
    gpx = ET.Element("gpx", {
        "xmlns": GPX_NAMESPACE,
        "version": "1.1",
        "creator": GPX_CREATOR,
    })
    metadata = ET.SubElement(gpx, "metadata")
    link = ET.SubElement(metadata, "link", {"href": GPX_LINK_HREF})
    ET.SubElement(link, "text").text = GPX_LINK_TEXT

    trk = ET.SubElement(gpx, "trk")
    trkseg = ET.SubElement(trk, "trkseg")
    for point in track:
        trkpt = ET.SubElement(trkseg, "trkpt", {
            "lat": repr(point.latitude),
            "lon": repr(point.longitude),
        })
        if point.altitude is not None:
            ET.SubElement(trkpt, "ele").text = repr(point.altitude)
        ET.SubElement(trkpt, "time").text = format_time(point.captured_at)

    ET.indent(gpx, space="  ")
    body = ET.tostring(gpx, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body


def render_geojson(track: Track) -> str:
    geojson = {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {
                    "times": [format_time(p.captured_at) for p in track],
                    "altitudes": [p.altitude for p in track],
                },
                "geometry": {
                    "type": "LineString",
                    # GeoJSON positions are [longitude, latitude]
                    "coordinates": [[p.longitude, p.latitude] for p in track],
                },
            }
        ],
    }
    return json.dumps(geojson, indent=JSON_INDENT, ensure_ascii=False)


_RENDERERS = {
    OutputFormat.GPX: render_gpx,
    OutputFormat.GEOJSON: render_geojson,
}


def render(track: Track, fmt: OutputFormat | str) -> str:
    """Render track in the given format, terminated by exactly one newline."""
    text = _RENDERERS[OutputFormat(fmt)](track)
    return text.rstrip("\n") + "\n"


def write_output(text: str, destination: Path | None = None) -> None:
    """Write the whole document in one call to a file or stdout."""
    if destination is None:
        sys.stdout.write(text)
        sys.stdout.flush()
    else:
        destination.write_text(text, encoding="utf-8")
