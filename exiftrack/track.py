from collections.abc import Iterable

from .models import GeoTagRecord, Track


def finalize(records: Iterable[GeoTagRecord]) -> Track:
    """Order collected records by capture time.

    sorted() is stable, so records with the same timestamp keep the order in
    which the walker found them.
    """
    return Track(points=tuple(sorted(records, key=lambda r: r.captured_at)))
