"""Deep links into the booking partner's site for a trip."""

from typing import Dict
from urllib.parse import quote, urlencode

from config.settings import settings
from models.trip_request import TripRequest


def destination_slug(destination: str) -> str:
    return quote(destination.strip().lower())


def activities_url(destination: str) -> str:
    return f"{settings.BOOKING_BASE_URL}/activities/{destination_slug(destination)}"


def experiences_url(destination: str) -> str:
    return f"{settings.BOOKING_BASE_URL}/experiences/{destination_slug(destination)}"


def hotels_url(destination: str) -> str:
    return f"{settings.BOOKING_BASE_URL}/hotels/{destination_slug(destination)}"


def flights_url(origin: str, destination: str) -> str:
    query = urlencode({"from": origin, "to": destination}, quote_via=quote)
    return f"{settings.BOOKING_BASE_URL}/flights.html?{query}"


def build_booking_links(trip: TripRequest) -> Dict[str, str]:
    """Links surfaced next to every itinerary."""
    return {
        "flights": flights_url(trip.origin, trip.destination),
        "hotels": hotels_url(trip.destination),
        "activities": activities_url(trip.destination),
        "home": f"{settings.BOOKING_BASE_URL}/",
    }
