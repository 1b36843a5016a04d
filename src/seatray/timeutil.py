"""Civil time ↔ UTC conversion and DST-changeover detection (pytz + timezonefinder)."""

from datetime import date, datetime, time, timedelta
from functools import lru_cache

import pytz
from pytz import utc
from timezonefinder import TimezoneFinder

from seatray.models import FlightContext, GeoPoint, InvalidInputError


@lru_cache(maxsize=1)
def _finder() -> TimezoneFinder:
    return TimezoneFinder()


def resolve_timezone(point: GeoPoint, timezone: str | None = None) -> str:
    """Return ``timezone`` if it is a known IANA name, else the zone containing ``point``.

    Raises:
        InvalidInputError: Unknown timezone name, or no zone found at the coordinates.
    """
    if timezone:
        if timezone not in pytz.all_timezones_set:
            raise InvalidInputError(f"Unknown timezone: {timezone}")
        return timezone
    tz_str = _finder().timezone_at(lat=point.lat, lng=point.lon)
    if tz_str is None:
        raise InvalidInputError(f"Timezone not found: lat={point.lat}, lng={point.lon}")
    return tz_str


def parse_local(when: str) -> datetime:
    """Parse a civil date-time string ("YYYY-MM-DDTHH:MM", space separator and seconds allowed)."""
    try:
        return datetime.fromisoformat(when.strip())
    except (AttributeError, ValueError) as e:
        raise InvalidInputError(f"Invalid departure time: {when!r}") from e


def localize(when: str, timezone: str) -> datetime:
    """Attach ``timezone`` to a civil time string.

    Wall-clock times skipped or repeated by a DST change are rejected rather
    than guessed.
    """
    dt = parse_local(when)
    if dt.tzinfo is not None:
        return dt.astimezone(pytz.timezone(timezone))
    local_tz = pytz.timezone(timezone)
    try:
        return local_tz.localize(dt, is_dst=None)
    except pytz.exceptions.NonExistentTimeError as e:
        raise InvalidInputError(f"{when} does not exist in {timezone} (DST gap)") from e
    except pytz.exceptions.AmbiguousTimeError as e:
        raise InvalidInputError(f"{when} is ambiguous in {timezone} (DST overlap)") from e


def to_utc(when: str, timezone: str) -> datetime:
    """Civil time string in ``timezone`` → UTC datetime (tzinfo=utc)."""
    return localize(when, timezone).astimezone(utc)


def arrival_time(
    departure_utc: datetime, duration_hours: float, timezone: str | None = None
) -> datetime:
    """Arrival instant, expressed in ``timezone`` (UTC when None)."""
    arrival = departure_utc + timedelta(hours=duration_hours)
    tz = pytz.timezone(timezone) if timezone else utc
    return arrival.astimezone(tz)


def is_dst_change(local_dt: datetime) -> bool:
    """True when the UTC offset at the start of ``local_dt``'s day differs from the end."""
    zone = getattr(local_dt.tzinfo, "zone", None)
    if zone is None:
        return False
    return _offsets_differ(local_dt.date(), pytz.timezone(zone))


def _offsets_differ(day: date, tz: pytz.BaseTzInfo) -> bool:
    start = tz.localize(datetime.combine(day, time.min), is_dst=False)
    end = tz.localize(datetime.combine(day, time.max), is_dst=False)
    return start.utcoffset() != end.utcoffset()


def dst_warnings(
    context: FlightContext,
    origin_label: str = "the departure city",
    destination_label: str = "the arrival city",
) -> tuple[str, ...]:
    """Warnings for departure/arrival days that contain a DST changeover."""
    warnings: list[str] = []
    if is_dst_change(context.departure_local):
        warnings.append(f"Departure day is a DST changeover in {origin_label}.")
    if is_dst_change(context.arrival_local):
        warnings.append(f"Arrival day is a DST changeover in {destination_label}.")
    return tuple(warnings)
