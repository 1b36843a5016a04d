"""Subsolar point and day/night terminator for a given instant, independent of any flight."""

import logging
import math
from datetime import datetime, timezone

from seatray.ephemeris import EphemerisUnavailableError, SolarEphemeris, default_ephemeris
from seatray.models import GeoPoint, InvalidInputError, normalize_longitude

logger = logging.getLogger(__name__)

_OBLIQUITY_DEG = 23.44


def _utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        raise InvalidInputError(f"Instant must be timezone-aware: {instant.isoformat()}")
    return instant.astimezone(timezone.utc)


def day_of_year(instant: datetime) -> int:
    """Ordinal day of the UTC date (1 = Jan 1), by the almanac integer formula."""
    d = _utc(instant)
    n1 = 275 * d.month // 9
    n2 = (d.month + 9) // 12
    n3 = 1 + (d.year - 4 * (d.year // 4) + 2) // 3
    return n1 - n2 * n3 + d.day - 30


def subsolar_point(instant: datetime) -> GeoPoint:
    """Approximate point where the sun is directly overhead.

    Declination from a day-of-year harmonic, longitude from UTC minutes of day
    (the sun moves 1° west every 4 minutes, overhead at 180° at 00:00 UTC).
    """
    d = _utc(instant)
    decl = _OBLIQUITY_DEG * math.sin(math.radians(360.0 / 365.0 * (day_of_year(d) - 81)))
    minutes = d.hour * 60 + d.minute
    return GeoPoint(decl, normalize_longitude(180.0 - minutes / 4.0))


def terminator_curve(
    instant: datetime,
    step_degrees: float = 2.0,
    ephemeris: SolarEphemeris | None = None,
) -> tuple[GeoPoint, ...]:
    """Day/night boundary polyline, one point per longitude step from -180 to 180.

    The latitude at each longitude is the ephemeris declination seen from the
    equator. Points whose ephemeris call fails are skipped. Longitude -180
    normalizes onto 180, so the curve runs from ``-180 + step`` to 180.
    """
    if step_degrees <= 0:
        raise InvalidInputError(f"Terminator step must be positive: {step_degrees}")
    eph = ephemeris or default_ephemeris()
    d = _utc(instant)
    count = int(math.floor(360.0 / step_degrees + 1e-9))
    points: list[GeoPoint] = []
    seen: set[float] = set()
    for i in range(count + 1):
        lon = normalize_longitude(-180.0 + i * step_degrees)
        if lon in seen:
            continue
        seen.add(lon)
        try:
            decl = eph.position(d, GeoPoint(0.0, lon)).declination
        except EphemerisUnavailableError as e:
            logger.warning("Skipping terminator point at lon=%.1f: %s", lon, e)
            continue
        if not math.isfinite(decl):
            continue
        points.append(GeoPoint(decl, lon))
    return tuple(sorted(points, key=lambda p: p.lon))
