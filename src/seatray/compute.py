"""Orchestration layer. Validates a flight and runs every engine stage over it."""

import logging
import math
from datetime import datetime, timedelta
from typing import Any

from pytz import utc

from seatray.config import EngineConfig
from seatray.ephemeris import SolarEphemeris, load_ephemeris
from seatray.events import detect_sun_events
from seatray.models import (
    FlightAnalysis,
    FlightContext,
    FlightQuery,
    InvalidInputError,
    SkyState,
)
from seatray.overlay import subsolar_point, terminator_curve
from seatray.sampler import sample_at, sample_route
from seatray.seats import recommend_seat
from seatray.segments import build_flight_path
from seatray.timeutil import arrival_time, dst_warnings, localize, resolve_timezone

logger = logging.getLogger(__name__)


def resolve_flight(query: FlightQuery) -> FlightContext:
    """Validate a FlightQuery and convert its civil departure time to UTC.

    The origin timezone comes from the query or, failing that, from the origin
    coordinates. An unresolvable destination timezone only affects how the
    arrival time is displayed, so it falls back to UTC.

    Args:
        query: Raw user input.

    Returns:
        FlightContext with departure/arrival instants.

    Raises:
        InvalidInputError: Non-positive duration, unparseable departure time or
            unknown origin timezone.
    """
    try:
        duration_hours = float(query.duration_hours)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Invalid flight duration: {query.duration_hours!r}") from e
    if not (math.isfinite(duration_hours) and duration_hours > 0):
        raise InvalidInputError(f"Flight duration must be positive: {duration_hours}")

    origin_tz = resolve_timezone(query.origin, query.timezone)
    departure_local = localize(query.departure, origin_tz)

    try:
        dest_tz: str | None = resolve_timezone(
            query.destination, query.destination_timezone
        )
    except InvalidInputError:
        if query.destination_timezone:
            raise
        logger.debug("No timezone at %s, showing arrival in UTC", query.destination)
        dest_tz = None

    departure_utc = departure_local.astimezone(utc)
    return FlightContext(
        origin=query.origin,
        destination=query.destination,
        departure_utc=departure_utc,
        departure_local=departure_local,
        arrival_local=arrival_time(departure_utc, duration_hours, dest_tz),
        duration_hours=duration_hours,
    )


def analyze_flight(
    context: FlightContext,
    config: EngineConfig | None = None,
    ephemeris: SolarEphemeris | None = None,
    origin_label: str = "the departure city",
    destination_label: str = "the arrival city",
) -> FlightAnalysis:
    """Run path, sampling, event and seat stages for one validated flight.

    Args:
        context: Validated flight.
        config: Tuning constants; defaults when None.
        ephemeris: Solar backend; built from ``config`` when None.
        origin_label: Name used in DST warnings (e.g. the origin city).
        destination_label: Name used in DST warnings.

    Returns:
        FlightAnalysis with every derived fact for presentation collaborators.
    """
    config = config or EngineConfig()
    eph = ephemeris or load_ephemeris(config)

    segments = build_flight_path(context.origin, context.destination, config.path_steps)
    samples = sample_route(
        context.origin,
        context.destination,
        context.departure_utc,
        context.duration_hours * 60,
        config.interval_minutes,
        ephemeris=eph,
    )
    events = detect_sun_events(samples, ephemeris=eph)
    recommendation = recommend_seat(samples)
    logger.info(
        "Flight %s → %s: %d samples, %d events, seat=%s",
        context.origin.as_latlon(),
        context.destination.as_latlon(),
        len(samples),
        len(events),
        recommendation.side,
    )
    return FlightAnalysis(
        context=context,
        path_segments=segments,
        samples=samples,
        events=events,
        recommendation=recommendation,
        dst_warnings=dst_warnings(context, origin_label, destination_label),
    )


def run(query: FlightQuery, config: EngineConfig | None = None) -> FlightAnalysis:
    """Top-level entry point: takes a FlightQuery and returns a FlightAnalysis."""
    context = resolve_flight(query)
    return analyze_flight(context, config)


def sky_state_at(
    analysis: FlightAnalysis,
    instant: datetime,
    config: EngineConfig | None = None,
    ephemeris: SolarEphemeris | None = None,
) -> SkyState:
    """Plane/sun marker and planetary overlay for one scrub position.

    Pure lookup: callers driving an animated slider call this once per frame.
    The backend built from ``config`` is cached, so frames reuse one ephemeris.
    """
    config = config or EngineConfig()
    eph = ephemeris or load_ephemeris(config)
    sample = sample_at(
        analysis.samples,
        instant,
        tolerance=timedelta(minutes=config.scrub_tolerance_minutes),
    )
    return SkyState(
        instant=instant,
        sample=sample,
        subsolar=subsolar_point(instant),
        terminator=terminator_curve(
            instant, step_degrees=config.terminator_step_degrees, ephemeris=eph
        ),
    )


def analysis_facts(
    analysis: FlightAnalysis,
    origin_name: str | None = None,
    destination_name: str | None = None,
) -> dict[str, Any]:
    """JSON-serialisable facts handed to a text-generation collaborator.

    Times are ISO 8601 strings; departure in origin local time, events in UTC.
    """
    ctx = analysis.context
    rec = analysis.recommendation
    return {
        "source": origin_name or _coord_label(ctx.origin.as_latlon()),
        "destination": destination_name or _coord_label(ctx.destination.as_latlon()),
        "departure_time": ctx.departure_local.isoformat(),
        "arrival_time": ctx.arrival_local.isoformat(),
        "flight_hours": ctx.duration_hours,
        "recommendation": {
            "side": rec.side,
            "rationale": rec.rationale,
            "left_count": rec.left_count,
            "right_count": rec.right_count,
        },
        "sun_events": [
            {
                "type": e.kind,
                "time": e.instant.isoformat(),
                "lat": round(e.position.lat, 4),
                "lon": round(e.position.lon, 4),
                "azimuth": round(e.azimuth, 1),
                "position": e.side,
            }
            for e in analysis.events
        ],
        "dst_warnings": list(analysis.dst_warnings),
    }


def _coord_label(latlon: tuple[float, float]) -> str:
    return f"{latlon[0]:.4f}, {latlon[1]:.4f}"
