"""
Itinerary data models — structured output of the itinerary generator.

Defines Money, Location, BookingInfo, Activity, Accommodation, Meal,
Transportation, ItineraryDay, and Itinerary dataclasses matching the
JSON shape the generation prompt asks the model for.

Usage:
    itinerary = Itinerary(id="balanced_...", type="balanced", ...)
    json_data = itinerary.to_dict()
"""

from dataclasses import dataclass, field, asdict
from typing import List, Optional, Dict, Any


@dataclass
class Money:
    amount: float = 0
    currency: str = "USD"


@dataclass
class Coordinates:
    lat: float = 0.0
    lng: float = 0.0


@dataclass
class Location:
    name: str = ""
    coordinates: Optional[Coordinates] = None


@dataclass
class BookingInfo:
    """Where a traveller can book an item."""

    bookable: bool = True
    provider: str = ""
    booking_url: Optional[str] = None


@dataclass
class Activity:
    """Single activity in a day."""

    name: str = ""
    type: str = ""                      # sightseeing|cultural|food|<theme>
    time: Optional[str] = None          # HH:MM
    duration: Optional[str] = None      # e.g. "3 hours"
    description: Optional[str] = None
    cost: Money = field(default_factory=Money)
    location: Optional[Location] = None
    booking_info: Optional[BookingInfo] = None


@dataclass
class Accommodation:
    name: str = ""
    type: str = ""                      # hostel|hotel|resort
    cost: Money = field(default_factory=Money)
    location: Optional[Location] = None
    booking_info: Optional[BookingInfo] = None


@dataclass
class Meal:
    """Meal entry for a day."""

    type: str = ""                      # breakfast|lunch|dinner
    name: str = ""
    cost: Money = field(default_factory=Money)


@dataclass
class Transportation:
    type: str = ""                      # bus|train|taxi
    cost: Money = field(default_factory=Money)


@dataclass
class ItineraryDay:
    """Single day in the itinerary."""

    day: int = 0
    date: str = ""                      # YYYY-MM-DD
    activities: List[Activity] = field(default_factory=list)
    accommodation: Optional[Accommodation] = None
    meals: List[Meal] = field(default_factory=list)
    transportation: Optional[Transportation] = None
    daily_cost: Money = field(default_factory=Money)

    @property
    def components_cost(self) -> float:
        """Sum of every priced component booked for the day."""
        total = sum(a.cost.amount for a in self.activities)
        total += sum(m.cost.amount for m in self.meals)
        if self.accommodation:
            total += self.accommodation.cost.amount
        if self.transportation:
            total += self.transportation.cost.amount
        return total


@dataclass
class Itinerary:
    """One packaged itinerary (budget, balanced or premium)."""

    id: str = ""
    type: str = ""                      # budget|balanced|premium
    title: str = ""
    description: str = ""
    total_cost: Money = field(default_factory=Money)
    days: List[ItineraryDay] = field(default_factory=list)
    highlights: List[str] = field(default_factory=list)
    best_for: List[str] = field(default_factory=list)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serialisable dictionary."""
        return asdict(self)
