from datetime import datetime, timezone

import pytest
from conftest import FakeEphemeris

from seatray.models import InvalidInputError
from seatray.overlay import day_of_year, subsolar_point, terminator_curve

UTC = timezone.utc


@pytest.mark.parametrize(
    "when, expected",
    [
        (datetime(2024, 1, 1, tzinfo=UTC), 1),
        (datetime(2024, 3, 1, tzinfo=UTC), 61),
        (datetime(2023, 3, 1, tzinfo=UTC), 60),
        (datetime(2023, 12, 31, 23, 59, tzinfo=UTC), 365),
        (datetime(2024, 12, 31, tzinfo=UTC), 366),
    ],
)
def test_day_of_year(when, expected):
    assert day_of_year(when) == expected


def test_day_of_year_uses_utc_date():
    from datetime import timedelta

    tokyo = timezone(timedelta(hours=9))
    assert day_of_year(datetime(2024, 1, 2, 5, 0, tzinfo=tokyo)) == 1


def test_subsolar_point_june_solstice_noon():
    p = subsolar_point(datetime(2024, 6, 21, 12, 0, tzinfo=UTC))
    assert p.lat == pytest.approx(23.44, abs=0.05)
    assert p.lon == pytest.approx(0.0)


def test_subsolar_point_midnight_is_on_the_antimeridian():
    p = subsolar_point(datetime(2024, 3, 21, 0, 0, tzinfo=UTC))
    assert p.lon == 180.0
    assert abs(p.lat) < 1.0


def test_subsolar_longitude_moves_west():
    p = subsolar_point(datetime(2024, 3, 21, 18, 0, tzinfo=UTC))
    assert p.lon == pytest.approx(-90.0)


def test_subsolar_point_requires_aware_instant():
    with pytest.raises(InvalidInputError):
        subsolar_point(datetime(2024, 3, 21))


def test_terminator_spans_all_longitudes():
    points = terminator_curve(datetime(2024, 6, 21, 12, tzinfo=UTC), ephemeris=FakeEphemeris(declination=23.4))
    assert len(points) == 180
    assert points[0].lon == pytest.approx(-178.0)
    assert points[-1].lon == 180.0
    assert [p.lon for p in points] == sorted(p.lon for p in points)
    assert all(p.lat == pytest.approx(23.4) for p in points)


def test_terminator_skips_failed_points():
    eph = FakeEphemeris(fail_lons={0.0, 90.0})
    points = terminator_curve(datetime(2024, 6, 21, 12, tzinfo=UTC), ephemeris=eph)
    lons = {p.lon for p in points}
    assert 0.0 not in lons and 90.0 not in lons
    assert len(points) == 178


def test_terminator_with_astral():
    points = terminator_curve(datetime(2024, 6, 21, 12, tzinfo=UTC), step_degrees=10)
    assert len(points) == 36
    assert all(23.0 < p.lat < 23.5 for p in points)


def test_terminator_rejects_bad_step():
    with pytest.raises(InvalidInputError):
        terminator_curve(datetime(2024, 6, 21, tzinfo=UTC), step_degrees=0)
