import json
from datetime import timedelta

import pytest

from seatray.compute import analysis_facts, analyze_flight, resolve_flight, run, sky_state_at
from seatray.config import EngineConfig
from seatray.models import FlightQuery, GeoPoint, InvalidInputError

SIN = GeoPoint(1.3644, 103.9915)
LHR = GeoPoint(51.4700, -0.4543)
JFK = GeoPoint(40.6413, -73.7781)
HND = GeoPoint(35.5494, 139.7798)
LAX = GeoPoint(33.9416, -118.4085)
KUL = GeoPoint(2.7456, 101.7099)


def _assert_events_bracketed(analysis):
    for event in analysis.events:
        assert any(a.instant < event.instant < b.instant for a, b in zip(analysis.samples, analysis.samples[1:]))


def test_singapore_to_london():
    analysis = run(
        FlightQuery(SIN, LHR, "2024-06-01T08:00", 13, timezone="Asia/Singapore", destination_timezone="Europe/London")
    )
    ctx = analysis.context
    assert ctx.departure_utc.isoformat() == "2024-06-01T00:00:00+00:00"
    assert ctx.arrival_local.isoformat() == "2024-06-01T14:00:00+01:00"
    assert len(analysis.path_segments) == 1
    assert len(analysis.samples) == 79
    assert analysis.samples[-1].instant == ctx.arrival_utc
    assert analysis.recommendation.rationale == "visible"
    _assert_events_bracketed(analysis)


def test_evening_eastbound_flight_sees_sunset_then_sunrise():
    analysis = run(
        FlightQuery(JFK, LHR, "2024-06-01T18:00", 7, timezone="America/New_York", destination_timezone="Europe/London")
    )
    assert [e.kind for e in analysis.events] == ["sunset", "sunrise"]
    _assert_events_bracketed(analysis)


def test_tokyo_to_los_angeles_is_split():
    analysis = run(FlightQuery(HND, LAX, "2024-06-01T17:00", 10, timezone="Asia/Tokyo"))
    assert len(analysis.path_segments) >= 2
    for segment in analysis.path_segments:
        lons = [p.lon for p in segment.points]
        assert all(abs(b - a) <= 180 for a, b in zip(lons, lons[1:]))


def test_short_night_flight():
    analysis = run(FlightQuery(SIN, KUL, "2024-06-01T00:30", 1, timezone="Asia/Singapore"))
    assert all(s.altitude < 0 for s in analysis.samples)
    assert analysis.events == ()
    assert (analysis.recommendation.side, analysis.recommendation.rationale) == ("none", "not-visible")


def test_timezone_resolved_from_origin():
    ctx = resolve_flight(FlightQuery(SIN, LHR, "2024-06-01T08:00", 13))
    assert ctx.departure_local.tzinfo.zone == "Asia/Singapore"
    assert ctx.duration == timedelta(hours=13)


def test_identical_origin_and_destination():
    analysis = run(FlightQuery(SIN, SIN, "2024-06-01T12:00", 1, timezone="Asia/Singapore"))
    assert all(s.position == SIN for s in analysis.samples)
    assert len(analysis.path_segments) == 1


@pytest.mark.parametrize("hours", [0, -2, "abc", float("inf")])
def test_invalid_duration(hours):
    with pytest.raises(InvalidInputError):
        resolve_flight(FlightQuery(SIN, LHR, "2024-06-01T08:00", hours, timezone="Asia/Singapore"))


def test_invalid_departure():
    with pytest.raises(InvalidInputError):
        resolve_flight(FlightQuery(SIN, LHR, "June first", 13, timezone="Asia/Singapore"))


def test_config_interval_controls_sample_count():
    ctx = resolve_flight(FlightQuery(SIN, LHR, "2024-06-01T08:00", 13, timezone="Asia/Singapore"))
    analysis = analyze_flight(ctx, EngineConfig(interval_minutes=30, path_steps=5))
    assert len(analysis.samples) == 27
    assert len(analysis.path_segments[0].points) == 6


def test_analysis_facts_are_serialisable():
    analysis = run(
        FlightQuery(JFK, LHR, "2024-06-01T18:00", 7, timezone="America/New_York", destination_timezone="Europe/London")
    )
    facts = analysis_facts(analysis, "New York (JFK)", "London (LHR)")
    decoded = json.loads(json.dumps(facts))
    assert decoded["source"] == "New York (JFK)"
    assert decoded["flight_hours"] == 7
    assert decoded["recommendation"]["side"] == analysis.recommendation.side
    assert [e["type"] for e in decoded["sun_events"]] == ["sunset", "sunrise"]
    assert {e["position"] for e in decoded["sun_events"]} <= {"ahead", "behind", "left", "right"}


def test_analysis_facts_default_labels():
    analysis = run(FlightQuery(SIN, KUL, "2024-06-01T00:30", 1, timezone="Asia/Singapore"))
    facts = analysis_facts(analysis)
    assert facts["source"] == "1.3644, 103.9915"
    assert facts["sun_events"] == []


def test_sky_state_at_scrub_position():
    analysis = run(FlightQuery(SIN, LHR, "2024-06-01T08:00", 13, timezone="Asia/Singapore"))
    instant = analysis.context.departure_utc + timedelta(hours=6, minutes=3)
    state = sky_state_at(analysis, instant, EngineConfig(terminator_step_degrees=10))
    assert state.sample.instant == analysis.context.departure_utc + timedelta(hours=6)
    assert state.subsolar.lon == pytest.approx(180 - (6 * 60 + 3) / 4)
    assert len(state.terminator) == 36


def test_sky_state_outside_flight_shows_first_sample():
    analysis = run(FlightQuery(SIN, KUL, "2024-06-01T00:30", 1, timezone="Asia/Singapore"))
    state = sky_state_at(analysis, analysis.context.departure_utc + timedelta(days=1))
    assert state.sample is analysis.samples[0]
    assert len(state.terminator) == 180
