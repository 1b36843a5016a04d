"""Sun geometry sampled along a flight at fixed time steps."""

import logging
import math
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from seatray.ephemeris import SolarEphemeris, default_ephemeris
from seatray.geodesy import great_circle_interpolate
from seatray.models import GeoPoint, InvalidInputError, RouteSample, SolarPosition

logger = logging.getLogger(__name__)


def solar_position(
    instant: datetime, point: GeoPoint, ephemeris: SolarEphemeris | None = None
) -> SolarPosition:
    """Sun azimuth (0=N, clockwise), altitude and declination at a place and instant.

    Raises:
        InvalidInputError: If ``instant`` is naive.
        EphemerisUnavailableError: If the ephemeris fails or returns non-finite values.
    """
    eph = ephemeris or default_ephemeris()
    return eph.position(instant, point)


def sample_route(
    origin: GeoPoint,
    destination: GeoPoint,
    departure_utc: datetime,
    duration_minutes: float,
    interval_minutes: float,
    ephemeris: SolarEphemeris | None = None,
) -> tuple[RouteSample, ...]:
    """Sample plane position and sun geometry along the great-circle route.

    Samples are taken at ``fraction = i / steps`` for ``i`` in ``0..steps`` where
    ``steps = ceil(duration_minutes / interval_minutes)``. The last step may be
    shorter than the interval so the final sample lands exactly on arrival.

    Args:
        origin: Departure airport position.
        destination: Arrival airport position.
        departure_utc: Timezone-aware departure instant.
        duration_minutes: Flight duration, must be > 0.
        interval_minutes: Sampling interval, must be > 0.
        ephemeris: Solar backend; astral when None.

    Returns:
        Samples in increasing time order, ``steps + 1`` long.
    """
    if not (math.isfinite(duration_minutes) and duration_minutes > 0):
        raise InvalidInputError(f"Duration must be positive: {duration_minutes} min")
    if not (math.isfinite(interval_minutes) and interval_minutes > 0):
        raise InvalidInputError(f"Interval must be positive: {interval_minutes} min")
    if departure_utc.tzinfo is None:
        raise InvalidInputError("Departure instant must be timezone-aware")
    departure_utc = departure_utc.astimezone(timezone.utc)

    eph = ephemeris or default_ephemeris()
    steps = math.ceil(duration_minutes / interval_minutes)
    duration = timedelta(minutes=duration_minutes)
    samples: list[RouteSample] = []
    for i in range(steps + 1):
        fraction = i / steps
        position = great_circle_interpolate(origin, destination, fraction)
        instant = departure_utc + duration if i == steps else departure_utc + duration * fraction
        sun = eph.position(instant, position)
        samples.append(
            RouteSample(
                instant=instant,
                position=position,
                azimuth=sun.azimuth,
                altitude=sun.altitude,
            )
        )
    logger.debug(
        "Sampled %d points every %.1f min over %.1f min",
        len(samples),
        interval_minutes,
        duration_minutes,
    )
    return tuple(samples)


def sample_at(
    samples: Sequence[RouteSample],
    instant: datetime,
    tolerance: timedelta = timedelta(minutes=5),
) -> RouteSample:
    """Sample to show for a scrub position: the nearest one within ``tolerance``, else the first."""
    if not samples:
        raise InvalidInputError("No samples to look up")
    nearest = min(samples, key=lambda s: abs(s.instant - instant))
    if abs(nearest.instant - instant) <= tolerance:
        return nearest
    return samples[0]
