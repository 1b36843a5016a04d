"""CLI entry point for seat recommendations.

    seatray --from SIN --to LHR --departure 2024-06-01T08:00 --hours 13
    seatray --origin 35.5494,139.7798 --destination 33.9416,-118.4085 \
        --departure "2024-06-01 17:00" --timezone Asia/Tokyo --hours 10 --json
"""

import argparse
import json
import logging
import sys
from dataclasses import replace

from dotenv import load_dotenv

from seatray.airports import find_airport
from seatray.compute import analysis_facts, analyze_flight, resolve_flight
from seatray.config import EngineConfig
from seatray.ephemeris import EphemerisUnavailableError
from seatray.models import FlightQuery, GeoPoint, InvalidInputError


def _parse_point(value: str) -> GeoPoint:
    try:
        lat, lon = (float(v) for v in value.split(","))
    except ValueError as e:
        raise InvalidInputError(f"Expected LAT,LON: {value!r}") from e
    return GeoPoint(lat, lon)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="seatray",
        description="Which window seat sees the sunrise or sunset on a flight.",
    )
    origin = parser.add_mutually_exclusive_group(required=True)
    origin.add_argument("--from", dest="source", help="Origin IATA code")
    origin.add_argument("--origin", help="Origin as LAT,LON")
    dest = parser.add_mutually_exclusive_group(required=True)
    dest.add_argument("--to", dest="target", help="Destination IATA code")
    dest.add_argument("--destination", help="Destination as LAT,LON")
    parser.add_argument(
        "--departure", required=True, help='Local departure time "YYYY-MM-DDTHH:MM"'
    )
    parser.add_argument("--timezone", help="Origin IANA timezone (default: from airport/coordinates)")
    parser.add_argument("--hours", type=float, required=True, help="Flight duration in hours")
    parser.add_argument("--interval", type=float, help="Sampling interval in minutes")
    parser.add_argument("--json", action="store_true", help="Print facts as JSON")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def _query(args: argparse.Namespace) -> tuple[FlightQuery, str | None, str | None]:
    origin_name = dest_name = None
    origin_tz = args.timezone
    dest_tz = None
    if args.source:
        airport = find_airport(args.source)
        origin, origin_name = airport.point, f"{airport.city} ({airport.iata})"
        origin_tz = origin_tz or airport.timezone
    else:
        origin = _parse_point(args.origin)
    if args.target:
        airport = find_airport(args.target)
        destination, dest_name = airport.point, f"{airport.city} ({airport.iata})"
        dest_tz = airport.timezone
    else:
        destination = _parse_point(args.destination)
    query = FlightQuery(
        origin=origin,
        destination=destination,
        departure=args.departure,
        duration_hours=args.hours,
        timezone=origin_tz,
        destination_timezone=dest_tz,
    )
    return query, origin_name, dest_name


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = EngineConfig.from_env()
        if args.interval is not None:
            config = replace(config, interval_minutes=args.interval)
        query, origin_name, dest_name = _query(args)
        context = resolve_flight(query)
        analysis = analyze_flight(
            context,
            config,
            origin_label=origin_name or "the departure city",
            destination_label=dest_name or "the arrival city",
        )
    except (InvalidInputError, EphemerisUnavailableError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    facts = analysis_facts(analysis, origin_name, dest_name)
    if args.json:
        print(json.dumps(facts, indent=2, ensure_ascii=False))
        return 0

    rec = analysis.recommendation
    if rec.side == "none":
        reason = (
            "sun below the horizon for the entire flight"
            if rec.rationale == "not-visible"
            else "sun stays ahead of or behind the plane"
        )
        print(f"Best seat: neither ({reason})")
    else:
        print(f"Best seat: {rec.side} (sun on left {rec.left_count}, right {rec.right_count} samples)")
    for event in facts["sun_events"]:
        print(f"  {event['type']:<7} {event['time']}  {event['position']} side")
    for warning in analysis.dst_warnings:
        print(f"Warning: {warning}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
