"""Route polylines split at the antimeridian."""

import logging
from collections.abc import Iterable

from seatray.geodesy import interpolate_path
from seatray.models import GeoPoint, PathSegment

logger = logging.getLogger(__name__)


def segment_path(points: Iterable[GeoPoint]) -> tuple[PathSegment, ...]:
    """Split a point sequence wherever consecutive longitudes jump by more than 180°.

    Concatenating the returned segments reproduces the input in order.
    """
    segments: list[PathSegment] = []
    current: list[GeoPoint] = []
    for point in points:
        if current and abs(point.lon - current[-1].lon) > 180:
            segments.append(PathSegment(tuple(current)))
            current = []
        current.append(point)
    if current:
        segments.append(PathSegment(tuple(current)))
    return tuple(segments)


def build_flight_path(
    origin: GeoPoint, destination: GeoPoint, steps: int = 20
) -> tuple[PathSegment, ...]:
    """Great-circle route line for drawing on an equirectangular map."""
    segments = segment_path(interpolate_path(origin, destination, steps))
    logger.debug("Route split into %d segment(s)", len(segments))
    return segments
