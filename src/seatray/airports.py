"""Default airport table. Callers may pass their own sequence of Airport records."""

from collections.abc import Iterable

from seatray.models import Airport, InvalidInputError

DEFAULT_AIRPORTS: tuple[Airport, ...] = (
    Airport("SIN", "Changi Airport", "Singapore", "Singapore", 1.3644, 103.9915, "Asia/Singapore"),
    Airport("LHR", "Heathrow Airport", "London", "United Kingdom", 51.4700, -0.4543, "Europe/London"),
    Airport("JFK", "John F. Kennedy International Airport", "New York", "USA", 40.6413, -73.7781, "America/New_York"),
    Airport("LAX", "Los Angeles International Airport", "Los Angeles", "USA", 33.9416, -118.4085, "America/Los_Angeles"),
    Airport("CDG", "Charles de Gaulle Airport", "Paris", "France", 49.0097, 2.5479, "Europe/Paris"),
    Airport("DXB", "Dubai International Airport", "Dubai", "UAE", 25.2532, 55.3657, "Asia/Dubai"),
    Airport("HND", "Haneda Airport", "Tokyo", "Japan", 35.5494, 139.7798, "Asia/Tokyo"),
    Airport("SYD", "Sydney Kingsford Smith Airport", "Sydney", "Australia", -33.9399, 151.1753, "Australia/Sydney"),
    Airport("FRA", "Frankfurt Airport", "Frankfurt", "Germany", 50.0379, 8.5622, "Europe/Berlin"),
    Airport("SFO", "San Francisco International Airport", "San Francisco", "USA", 37.6213, -122.3790, "America/Los_Angeles"),
)


def find_airport(iata: str, airports: Iterable[Airport] = DEFAULT_AIRPORTS) -> Airport:
    """Look up an airport by IATA code, case-insensitively.

    Raises:
        InvalidInputError: If no airport has that code.
    """
    code = iata.strip().upper()
    for airport in airports:
        if airport.iata == code:
            return airport
    raise InvalidInputError(f"Invalid IATA code: {iata!r}")
