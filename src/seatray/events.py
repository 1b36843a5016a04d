"""Sunrise/sunset detection along a sampled route."""

import logging
from collections.abc import Sequence

from seatray.ephemeris import SolarEphemeris, default_ephemeris
from seatray.geodesy import initial_bearing
from seatray.models import EventKind, RouteSample, SunEvent, TravelSide

logger = logging.getLogger(__name__)


def relative_angle(azimuth: float, heading: float) -> float:
    """Sun azimuth measured clockwise from the direction of travel, [0, 360)."""
    return (azimuth - heading + 360.0) % 360.0


def classify_side(angle: float) -> TravelSide:
    """Quadrant of a relative angle. Each range includes its upper bound."""
    if 45 < angle <= 135:
        return "right"
    if 135 < angle <= 225:
        return "behind"
    if 225 < angle <= 315:
        return "left"
    return "ahead"


def _crossing(prev: RouteSample, nxt: RouteSample) -> EventKind | None:
    if prev.altitude < 0 <= nxt.altitude:
        return "sunrise"
    if prev.altitude >= 0 > nxt.altitude:
        return "sunset"
    return None


def detect_sun_events(
    samples: Sequence[RouteSample], ephemeris: SolarEphemeris | None = None
) -> tuple[SunEvent, ...]:
    """Find horizon crossings between adjacent samples.

    The event instant is the ephemeris's own sunrise/sunset at the later
    sample's position when it falls strictly between the two samples, else a
    linear interpolation of altitude through zero. A sample sitting exactly on
    the horizon is the crossing itself, so the event takes that sample's instant.

    Args:
        samples: Route samples in time order.
        ephemeris: Solar backend used for refinement; astral when None.

    Returns:
        Events in time order. Empty for an all-day or all-night flight.
    """
    eph = ephemeris or default_ephemeris()
    events: list[SunEvent] = []
    for prev, nxt in zip(samples, samples[1:]):
        kind = _crossing(prev, nxt)
        if kind is None:
            continue

        instant = eph.event_time(kind, nxt.position, prev.instant, nxt.instant)
        if instant is None or not prev.instant < instant < nxt.instant:
            frac = abs(prev.altitude) / abs(nxt.altitude - prev.altitude)
            instant = prev.instant + frac * (nxt.instant - prev.instant)
            logger.debug("%s at %s interpolated (frac=%.3f)", kind, instant, frac)

        heading = initial_bearing(prev.position, nxt.position)
        side = classify_side(relative_angle(nxt.azimuth, heading))
        events.append(
            SunEvent(
                kind=kind,
                instant=instant,
                position=nxt.position,
                azimuth=nxt.azimuth,
                side=side,
            )
        )
    logger.debug("Detected %d sun event(s)", len(events))
    return tuple(events)
