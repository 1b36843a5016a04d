"""Great-circle geometry on a spherical Earth."""

import logging
import math

from seatray.models import GeoPoint, InvalidInputError, normalize_longitude

logger = logging.getLogger(__name__)


def central_angle(p1: GeoPoint, p2: GeoPoint) -> float:
    """Haversine central angle between two points, in radians."""
    phi1, lam1 = math.radians(p1.lat), math.radians(p1.lon)
    phi2, lam2 = math.radians(p2.lat), math.radians(p2.lon)
    h = (
        math.sin((phi2 - phi1) / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin((lam2 - lam1) / 2) ** 2
    )
    return 2 * math.asin(math.sqrt(min(1.0, h)))


def great_circle_interpolate(p1: GeoPoint, p2: GeoPoint, fraction: float) -> GeoPoint:
    """Point at ``fraction`` of the way along the shorter great-circle arc p1 → p2.

    Spherical linear interpolation on unit vectors. Coincident points have no
    defined arc, so p1 is returned unchanged.

    Args:
        p1: Start of the arc.
        p2: End of the arc.
        fraction: 0 returns p1, 1 returns p2.

    Returns:
        Interpolated GeoPoint with longitude in (-180, 180].

    Raises:
        InvalidInputError: If fraction is outside [0, 1].
    """
    if not 0.0 <= fraction <= 1.0:
        raise InvalidInputError(f"Fraction must be within [0, 1]: {fraction}")
    delta = central_angle(p1, p2)
    if delta == 0:
        return p1
    if fraction == 0:
        return p1
    if fraction == 1:
        return p2

    phi1, lam1 = math.radians(p1.lat), math.radians(p1.lon)
    phi2, lam2 = math.radians(p2.lat), math.radians(p2.lon)
    a = math.sin((1 - fraction) * delta) / math.sin(delta)
    b = math.sin(fraction * delta) / math.sin(delta)
    x = a * math.cos(phi1) * math.cos(lam1) + b * math.cos(phi2) * math.cos(lam2)
    y = a * math.cos(phi1) * math.sin(lam1) + b * math.cos(phi2) * math.sin(lam2)
    z = a * math.sin(phi1) + b * math.sin(phi2)
    phi = math.atan2(z, math.sqrt(x * x + y * y))
    lam = math.atan2(y, x)
    return GeoPoint(math.degrees(phi), normalize_longitude(math.degrees(lam)))


def initial_bearing(p1: GeoPoint, p2: GeoPoint) -> float:
    """Forward azimuth from p1 toward p2 in degrees, [0, 360)."""
    phi1, phi2 = math.radians(p1.lat), math.radians(p2.lat)
    dlon = math.radians(p2.lon - p1.lon)
    y = math.sin(dlon) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(
        dlon
    )
    bearing = math.degrees(math.atan2(y, x)) % 360.0
    # -0.0 % 360 is 0.0 but a tiny negative angle can round up to 360.0
    return 0.0 if bearing >= 360.0 else bearing


def interpolate_path(p1: GeoPoint, p2: GeoPoint, steps: int) -> tuple[GeoPoint, ...]:
    """``steps + 1`` evenly spaced points along the great circle, endpoints included."""
    if steps < 1:
        raise InvalidInputError(f"Path steps must be at least 1: {steps}")
    points = tuple(great_circle_interpolate(p1, p2, i / steps) for i in range(steps + 1))
    logger.debug("Interpolated %d path points", len(points))
    return points
