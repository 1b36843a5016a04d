from datetime import datetime, timedelta, timezone

import pytest

from seatray.models import GeoPoint, RouteSample, SolarPosition

UTC = timezone.utc
T0 = datetime(2024, 6, 1, 0, 0, tzinfo=UTC)


class FakeEphemeris:
    """Scripted ephemeris: fixed declination, optional event time, optional failing longitudes."""

    def __init__(self, event=None, declination=10.0, fail_lons=()):
        self.event = event
        self.declination = declination
        self.fail_lons = set(fail_lons)
        self.event_calls = []

    def position(self, instant, point):
        from seatray.ephemeris import EphemerisUnavailableError

        if point.lon in self.fail_lons:
            raise EphemerisUnavailableError(f"no data at {point.lon}")
        return SolarPosition(azimuth=90.0, altitude=10.0, declination=self.declination)

    def event_time(self, kind, point, start, end):
        self.event_calls.append((kind, point, start, end))
        return self.event


def make_samples(altitudes, azimuth=90.0, step_minutes=10, lon=0.0):
    """Samples flying due north along a meridian, heading 0°."""
    return tuple(
        RouteSample(
            instant=T0 + timedelta(minutes=step_minutes * i),
            position=GeoPoint(10.0 + i * 0.5, lon),
            azimuth=azimuth[i] if isinstance(azimuth, (list, tuple)) else azimuth,
            altitude=alt,
        )
        for i, alt in enumerate(altitudes)
    )


@pytest.fixture
def fake_ephemeris():
    return FakeEphemeris()
