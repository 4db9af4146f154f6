"""Booking partner deep links."""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dataclasses import replace

from services.booking_links import build_booking_links, flights_url, hotels_url


def test_links_for_trip(paris_trip):
    links = build_booking_links(paris_trip)

    assert links == {
        "flights": "https://www.easemytrip.com/flights.html?from=NYC&to=Paris",
        "hotels": "https://www.easemytrip.com/hotels/paris",
        "activities": "https://www.easemytrip.com/activities/paris",
        "home": "https://www.easemytrip.com/",
    }


def test_destination_with_spaces_is_escaped():
    assert hotels_url(" New York ") == "https://www.easemytrip.com/hotels/new%20york"


def test_flight_query_is_encoded():
    assert flights_url("San Francisco", "Rio & Co") == (
        "https://www.easemytrip.com/flights.html?from=San%20Francisco&to=Rio%20%26%20Co"
    )


def test_links_follow_destination(paris_trip):
    links = build_booking_links(replace(paris_trip, destination="Rome"))
    assert links["activities"].endswith("/activities/rome")
