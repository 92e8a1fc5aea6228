"""Build a GPX or GeoJSON track from the GPS tags of a folder of photos."""

__version__ = "0.1.0"
