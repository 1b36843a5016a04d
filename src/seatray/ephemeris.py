"""Solar ephemeris backends: astral (low precision, default) and skyfield (JPL kernel)."""

import functools
import logging
import math
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from astral import Observer
from astral import sun as astral_sun
from astral.julian import julianday, julianday_to_juliancentury

from seatray.models import EventKind, GeoPoint, InvalidInputError, SolarPosition

if TYPE_CHECKING:
    from seatray.config import EngineConfig

logger = logging.getLogger(__name__)


class EphemerisUnavailableError(RuntimeError):
    """The solar ephemeris could not be loaded or returned non-finite values."""


class SolarEphemeris(Protocol):
    def position(self, instant: datetime, point: GeoPoint) -> SolarPosition: ...

    def event_time(
        self, kind: EventKind, point: GeoPoint, start: datetime, end: datetime
    ) -> datetime | None: ...


def _require_aware(instant: datetime) -> datetime:
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise InvalidInputError(f"Instant must be timezone-aware: {instant.isoformat()}")
    return instant.astimezone(timezone.utc)


def _julian(utc_dt: datetime) -> float:
    # julianday() of a date is its 0h UTC; add the elapsed fraction of the day
    elapsed = utc_dt - datetime.combine(utc_dt.date(), datetime.min.time(), timezone.utc)
    return julianday(utc_dt.date()) + elapsed.total_seconds() / 86400.0


def _checked(azimuth: float, altitude: float, declination: float) -> SolarPosition:
    if not all(math.isfinite(v) for v in (azimuth, altitude, declination)):
        raise EphemerisUnavailableError(
            f"Ephemeris returned non-finite values: az={azimuth}, alt={altitude}, dec={declination}"
        )
    return SolarPosition(
        azimuth=azimuth % 360.0, altitude=altitude, declination=declination
    )


class AstralEphemeris:
    """NOAA low-precision solar position via astral. Pure computation, no data files."""

    def __init__(self, with_refraction: bool = False) -> None:
        self.with_refraction = with_refraction

    def position(self, instant: datetime, point: GeoPoint) -> SolarPosition:
        utc_dt = _require_aware(instant)
        observer = Observer(latitude=point.lat, longitude=point.lon)
        try:
            az = astral_sun.azimuth(observer, utc_dt)
            alt = astral_sun.elevation(
                observer, utc_dt, with_refraction=self.with_refraction
            )
            dec = astral_sun.sun_declination(julianday_to_juliancentury(_julian(utc_dt)))
        except (ValueError, ZeroDivisionError, OverflowError) as e:
            raise EphemerisUnavailableError(f"astral failed at {point}: {e}") from e
        return _checked(az, alt, dec)

    def event_time(
        self, kind: EventKind, point: GeoPoint, start: datetime, end: datetime
    ) -> datetime | None:
        """Astral's own sunrise/sunset at ``point`` falling within [start, end], or None."""
        start, end = _require_aware(start), _require_aware(end)
        observer = Observer(latitude=point.lat, longitude=point.lon)
        calc = astral_sun.sunrise if kind == "sunrise" else astral_sun.sunset
        day: date = start.date() - timedelta(days=1)
        while day <= end.date() + timedelta(days=1):
            try:
                t = calc(observer, day, tzinfo=timezone.utc)
            except ValueError:
                # Polar day or night: the sun never crosses the horizon on this date
                t = None
            if t is not None and start <= t <= end:
                return t
            day += timedelta(days=1)
        return None


class SkyfieldEphemeris:
    """High-precision solar position from a local JPL kernel via skyfield.

    The kernel is read from ``directory`` and never downloaded; a missing file
    raises EphemerisUnavailableError at construction.
    """

    def __init__(
        self,
        directory: str | Path,
        kernel: str = "de421.bsp",
        with_refraction: bool = False,
    ) -> None:
        from skyfield.api import Loader

        path = Path(directory) / kernel
        if not path.is_file():
            raise EphemerisUnavailableError(f"Ephemeris kernel not found: {path}")
        loader = Loader(str(directory), verbose=False)
        try:
            self._eph = loader(kernel)
        except (OSError, ValueError) as e:
            raise EphemerisUnavailableError(f"Failed to load {path}: {e}") from e
        self._ts = loader.timescale()
        self._earth = self._eph["earth"]
        self._sun = self._eph["sun"]
        self.with_refraction = with_refraction

    def position(self, instant: datetime, point: GeoPoint) -> SolarPosition:
        from skyfield.api import wgs84

        t = self._ts.from_datetime(_require_aware(instant))
        ground = self._earth + wgs84.latlon(
            latitude_degrees=point.lat, longitude_degrees=point.lon
        )
        apparent = ground.at(t).observe(self._sun).apparent()
        alt, az, _ = apparent.altaz("standard") if self.with_refraction else apparent.altaz()
        _, dec, _ = apparent.radec(epoch="date")
        return _checked(float(az.degrees), float(alt.degrees), float(dec.degrees))

    def event_time(
        self, kind: EventKind, point: GeoPoint, start: datetime, end: datetime
    ) -> datetime | None:
        from skyfield import almanac
        from skyfield.api import wgs84

        t0 = self._ts.from_datetime(_require_aware(start))
        t1 = self._ts.from_datetime(_require_aware(end))
        f = almanac.sunrise_sunset(
            self._eph, wgs84.latlon(latitude_degrees=point.lat, longitude_degrees=point.lon)
        )
        times, is_up = almanac.find_discrete(t0, t1, f)
        for t, up in zip(times, is_up):
            if bool(up) == (kind == "sunrise"):
                return t.utc_datetime()
        return None


@functools.lru_cache(maxsize=8)
def load_ephemeris(config: "EngineConfig") -> SolarEphemeris:
    """Build the ephemeris backend named by ``config.ephemeris``.

    Cached per config, so a skyfield kernel is read once per process.
    """
    if config.ephemeris == "astral":
        return AstralEphemeris(with_refraction=config.with_refraction)
    if config.ephemeris == "skyfield":
        logger.debug(
            "Loading skyfield kernel %s from %s", config.ephemeris_kernel, config.ephemeris_dir
        )
        return SkyfieldEphemeris(
            config.ephemeris_dir,
            kernel=config.ephemeris_kernel,
            with_refraction=config.with_refraction,
        )
    raise InvalidInputError(f"Unknown ephemeris backend: {config.ephemeris}")


_default = AstralEphemeris()


def default_ephemeris() -> SolarEphemeris:
    """Shared stateless astral backend used when callers pass no ephemeris."""
    return _default
