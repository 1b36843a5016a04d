"""Data model definitions. Explicit boundaries between input, compute, and output layers."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Literal

EventKind = Literal["sunrise", "sunset"]
TravelSide = Literal["ahead", "behind", "left", "right"]
SeatSide = Literal["left", "right", "none"]
Rationale = Literal["visible", "not-visible"]


class InvalidInputError(ValueError):
    """Malformed or out-of-range input. Raised before any computation starts."""


def normalize_longitude(lon: float) -> float:
    """Wrap a longitude in degrees into (-180, 180]. In-range values come back unchanged."""
    if -180.0 < lon <= 180.0:
        return lon
    wrapped = ((lon + 180.0) % 360.0) - 180.0
    # The western edge folds onto the eastern one
    return 180.0 if wrapped == -180.0 else wrapped


@dataclass(frozen=True)
class GeoPoint:
    """A position on the Earth's surface. Longitude is normalized on construction."""

    lat: float  # Latitude (decimal degrees, [-90, 90])
    lon: float  # Longitude (decimal degrees, (-180, 180])

    def __post_init__(self) -> None:
        lat = float(self.lat)
        lon = float(self.lon)
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise InvalidInputError(f"Non-finite coordinates: lat={lat}, lon={lon}")
        if not -90.0 <= lat <= 90.0:
            raise InvalidInputError(f"Latitude out of range [-90, 90]: {lat}")
        object.__setattr__(self, "lat", lat)
        object.__setattr__(self, "lon", normalize_longitude(lon))

    def as_latlon(self) -> tuple[float, float]:
        return (self.lat, self.lon)


@dataclass(frozen=True)
class Airport:
    """Airport record supplied by the lookup table. Only lat/lon/timezone reach the engine."""

    iata: str  # "SIN"
    name: str  # "Changi Airport"
    city: str
    country: str
    lat: float
    lon: float
    timezone: str  # IANA timezone ("Asia/Singapore")

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lon)


@dataclass(frozen=True)
class FlightQuery:
    """Raw flight input. Not yet validated."""

    origin: GeoPoint
    destination: GeoPoint
    departure: str  # Local civil time at the origin, "YYYY-MM-DDTHH:MM"
    duration_hours: float
    timezone: str | None = None  # IANA name; resolved from origin coordinates if None
    destination_timezone: str | None = None


@dataclass(frozen=True)
class FlightContext:
    """Validated flight. Input to every engine stage."""

    origin: GeoPoint
    destination: GeoPoint
    departure_utc: datetime  # tzinfo=utc
    departure_local: datetime  # In the origin's timezone
    arrival_local: datetime  # In the destination's timezone (UTC when unknown)
    duration_hours: float

    @property
    def duration(self) -> timedelta:
        return timedelta(hours=self.duration_hours)

    @property
    def arrival_utc(self) -> datetime:
        return self.departure_utc + self.duration


@dataclass(frozen=True)
class SolarPosition:
    """Sun geometry seen from one place at one instant."""

    azimuth: float  # Degrees, 0=N, clockwise, [0, 360)
    altitude: float  # Degrees above the horizon, negative below
    declination: float  # Degrees


@dataclass(frozen=True)
class RouteSample:
    """Plane position and sun geometry at one sampled instant of the flight."""

    instant: datetime  # UTC
    position: GeoPoint
    azimuth: float
    altitude: float


@dataclass(frozen=True)
class PathSegment:
    """A polyline that never jumps across the antimeridian."""

    points: tuple[GeoPoint, ...]

    def as_latlon(self) -> list[tuple[float, float]]:
        return [p.as_latlon() for p in self.points]


@dataclass(frozen=True)
class SunEvent:
    """A sunrise or sunset seen from the plane."""

    kind: EventKind
    instant: datetime  # UTC
    position: GeoPoint
    azimuth: float
    side: TravelSide  # Where the sun sits relative to the direction of travel


@dataclass(frozen=True)
class SeatRecommendation:
    side: SeatSide
    rationale: Rationale
    left_count: int = 0  # Visible samples with the sun on the left
    right_count: int = 0


@dataclass(frozen=True)
class FlightAnalysis:
    """The sole output handed to presentation collaborators. Fully computed state."""

    context: FlightContext
    path_segments: tuple[PathSegment, ...]
    samples: tuple[RouteSample, ...]
    events: tuple[SunEvent, ...]
    recommendation: SeatRecommendation
    dst_warnings: tuple[str, ...] = field(default=())


@dataclass(frozen=True)
class SkyState:
    """Plane, sun and overlay state at one scrub position of a flight."""

    instant: datetime  # The requested instant, not snapped to a sample
    sample: RouteSample  # Sample shown for the plane/sun marker
    subsolar: GeoPoint
    terminator: tuple[GeoPoint, ...]
