"""
Geocoding providers used to place mock itinerary items on a map.

``JitterGeocoder`` is a placeholder: it scatters points around a fixed base
coordinate rather than resolving real places.  Swap in a real provider by
implementing ``Geocoder.locate``.
"""

import random
from abc import ABC, abstractmethod
from typing import Optional

from config.settings import settings
from models.itinerary import Coordinates


class Geocoder(ABC):
    """Resolves a place name within a destination to coordinates."""

    @abstractmethod
    def locate(self, place: str, destination: str, spread: float = 0.1) -> Coordinates:
        ...


class JitterGeocoder(Geocoder):
    """Random points within ``±spread/2`` degrees of a base coordinate."""

    def __init__(
        self,
        base_lat: Optional[float] = None,
        base_lng: Optional[float] = None,
        seed: Optional[str] = None,
    ):
        self.base_lat = base_lat if base_lat is not None else settings.MOCK_BASE_LAT
        self.base_lng = base_lng if base_lng is not None else settings.MOCK_BASE_LNG
        seed = seed if seed is not None else (settings.MOCK_SEED or None)
        self._rng = random.Random(seed)

    def locate(self, place: str, destination: str, spread: float = 0.1) -> Coordinates:
        return Coordinates(
            lat=self.base_lat + (self._rng.random() - 0.5) * spread,
            lng=self.base_lng + (self._rng.random() - 0.5) * spread,
        )
