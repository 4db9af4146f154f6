"""
Templated itinerary generator used whenever the AI path is unavailable.

Costs are derived deterministically from the trip budget; only the map
coordinates (supplied by a ``Geocoder``) may vary between runs.  This
generator must never raise for a validated ``TripRequest``.

Usage:
    from services.mock_generator import MockItineraryGenerator

    payload = MockItineraryGenerator().generate(trip, "balanced")
"""

import logging
import math
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from config.settings import settings
from models.generation import GenerationMetadata, SOURCE_MOCK
from models.itinerary import (
    Accommodation,
    Activity,
    BookingInfo,
    Itinerary,
    ItineraryDay,
    Location,
    Meal,
    Money,
    Transportation,
)
from models.trip_request import TripRequest
from services import booking_links
from services.geocoding import Geocoder, JitterGeocoder
from utils.id_generator import generate_itinerary_id, generate_request_id

logger = logging.getLogger(__name__)

FALLBACK_TYPE = "balanced"
DEFAULT_THEME = "cultural"

# Share of each day's budget spent on meals + local transport
_MEALS_AND_TRANSPORT_SHARE = 0.20
_MEAL_SHARES = (("breakfast", 0.04), ("lunch", 0.06), ("dinner", 0.05))
_TRANSPORT_SHARE = 0.05

# Per-type narrative and service level
_TEMPLATES: Dict[str, Dict[str, Any]] = {
    "budget": {
        "title": "Budget-Friendly {destination} Explorer",
        "description": "Maximum value with smart savings and local gems in {destination}",
        "highlights": [
            "Affordable local transportation options",
            "Budget-friendly accommodations with great reviews",
            "Free walking tours and public attractions",
            "Local street food and markets",
        ],
        "best_for": ["Budget travelers", "Backpackers", "Students"],
        "accommodation_share": 0.30,
        "accommodation": ("Budget Inn {destination}", "hostel"),
        "transport": "bus",
        "dinner": "Local Eatery",
    },
    "balanced": {
        "title": "Balanced {destination} Adventure",
        "description": "A perfect mix of must-see attractions and local experiences in {destination}",
        "highlights": [
            "Explore the iconic landmarks of {destination}",
            "Experience authentic local cuisine",
            "Visit hidden gems recommended by locals",
            "Perfect balance of culture and relaxation",
        ],
        "best_for": ["First-time visitors", "Culture enthusiasts", "Balanced travelers"],
        "accommodation_share": 0.35,
        "accommodation": ("Comfort Hotel {destination}", "hotel"),
        "transport": "train",
        "dinner": "Local Eatery",
    },
    "premium": {
        "title": "Premium {destination} Experience",
        "description": "Luxury experiences and exclusive access in {destination}",
        "highlights": [
            "Luxury accommodations with premium amenities",
            "Private guided tours and exclusive access",
            "Fine dining at renowned restaurants",
            "Premium transportation and comfort",
        ],
        "best_for": ["Luxury travelers", "Special occasions", "Comfort seekers"],
        "accommodation_share": 0.40,
        "accommodation": ("Luxury Hotel {destination}", "resort"),
        "transport": "taxi",
        "dinner": "Fine Dining Restaurant",
    },
}


class MockItineraryGenerator:
    """Builds budget / balanced / premium itineraries from fixed templates."""

    def __init__(self, geocoder: Optional[Geocoder] = None):
        self.geocoder = geocoder or JitterGeocoder()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate(
        self,
        trip: TripRequest,
        itinerary_type: Optional[str] = None,
        fallback_reason: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Return ``{"itineraries": [...], "metadata": {...}}`` for *trip*."""
        started = time.monotonic()
        logger.info(
            "Generating mock itinerary",
            extra={
                "destination": trip.destination,
                "itinerary_type": itinerary_type or "all_types",
                "reason": fallback_reason,
            },
        )

        itineraries = [self.build_itinerary(trip, t) for t in self.select_types(itinerary_type)]

        metadata = GenerationMetadata(
            generated_at=datetime.now(timezone.utc).isoformat(),
            request_id=generate_request_id(),
            model_version=settings.MOCK_MODEL_VERSION,
            confidence_score=settings.MOCK_CONFIDENCE_SCORE,
            processing_time_ms=int((time.monotonic() - started) * 1000),
            api_source=SOURCE_MOCK,
            itinerary_type=itinerary_type or "all_types",
            fallback_reason=fallback_reason,
        )
        return {
            "itineraries": [i.to_dict() for i in itineraries],
            "metadata": metadata.to_dict(),
        }

    @staticmethod
    def select_types(itinerary_type: Optional[str]) -> List[str]:
        """All types when unfiltered; unknown filters fall back to balanced."""
        if not itinerary_type:
            return list(settings.ITINERARY_TYPES)
        wanted = itinerary_type.lower()
        if wanted in settings.ITINERARY_TYPES:
            return [wanted]
        logger.warning("Unknown itinerary type %r, using %s", itinerary_type, FALLBACK_TYPE)
        return [FALLBACK_TYPE]

    def build_itinerary(self, trip: TripRequest, itinerary_type: str) -> Itinerary:
        template = _TEMPLATES[itinerary_type]
        multiplier = settings.COST_MULTIPLIERS[itinerary_type]
        dest = trip.destination

        daily_budget = math.floor(trip.budget_total / trip.duration_days)
        return Itinerary(
            id=generate_itinerary_id(itinerary_type),
            type=itinerary_type,
            title=template["title"].format(destination=dest),
            description=template["description"].format(destination=dest),
            total_cost=Money(
                amount=math.floor(trip.budget_total * multiplier),
                currency=trip.currency,
            ),
            days=self._build_days(trip, daily_budget * multiplier, template),
            highlights=[h.format(destination=dest) for h in template["highlights"]],
            best_for=list(template["best_for"]),
        )

    # ------------------------------------------------------------------
    # Day construction
    # ------------------------------------------------------------------

    def _build_days(
        self,
        trip: TripRequest,
        day_budget: float,
        template: Dict[str, Any],
    ) -> List[ItineraryDay]:
        dest = trip.destination
        currency = trip.currency
        theme = trip.primary_theme or DEFAULT_THEME

        def money(amount: float) -> Money:
            return Money(amount=math.floor(amount), currency=currency)

        def booking(url: str) -> BookingInfo:
            return BookingInfo(bookable=True, provider=settings.BOOKING_PROVIDER, booking_url=url)

        accommodation_cost = day_budget * template["accommodation_share"]
        activity_cost = day_budget - accommodation_cost - day_budget * _MEALS_AND_TRANSPORT_SHARE
        hotel_name, hotel_type = template["accommodation"]

        days: List[ItineraryDay] = []
        for i in range(trip.duration_days):
            current = trip.start_date + timedelta(days=i)

            activities = [
                Activity(
                    name=f"Explore {dest} City Center",
                    type="sightseeing",
                    time="09:00",
                    duration="3 hours",
                    description=f"Walk the landmarks and main squares of central {dest}",
                    cost=money(activity_cost * 0.6),
                    location=Location(
                        name=f"{dest} City Center",
                        coordinates=self.geocoder.locate(f"{dest} City Center", dest, spread=0.1),
                    ),
                    booking_info=booking(booking_links.activities_url(dest)),
                ),
                Activity(
                    name=f"Local {theme} Experience",
                    type=theme,
                    time="14:00",
                    duration="2 hours",
                    description=f"A hosted {theme} experience in {dest}",
                    cost=money(activity_cost * 0.4),
                    location=Location(
                        name=f"{dest} Cultural District",
                        coordinates=self.geocoder.locate(f"{dest} Cultural District", dest, spread=0.1),
                    ),
                    booking_info=booking(booking_links.experiences_url(dest)),
                ),
            ]

            accommodation = Accommodation(
                name=hotel_name.format(destination=dest),
                type=hotel_type,
                cost=money(accommodation_cost),
                location=Location(
                    name=f"{dest} Downtown",
                    coordinates=self.geocoder.locate(f"{dest} Downtown", dest, spread=0.05),
                ),
                booking_info=booking(booking_links.hotels_url(dest)),
            )

            meal_names = {
                "breakfast": "Local Breakfast Spot",
                "lunch": "Traditional Restaurant",
                "dinner": template["dinner"],
            }
            meals = [
                Meal(type=meal, name=meal_names[meal], cost=money(day_budget * share))
                for meal, share in _MEAL_SHARES
            ]

            days.append(
                ItineraryDay(
                    day=i + 1,
                    date=current.isoformat(),
                    activities=activities,
                    accommodation=accommodation,
                    meals=meals,
                    transportation=Transportation(
                        type=template["transport"],
                        cost=money(day_budget * _TRANSPORT_SHARE),
                    ),
                    daily_cost=money(day_budget),
                )
            )

        return days
