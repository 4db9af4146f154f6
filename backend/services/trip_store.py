"""
Storage for created trips and their generated itineraries.

The HTTP layer receives a ``TripStore`` instance at startup (see the
lifespan hook in ``app.py``) instead of reaching for module globals, so
tests and multi-instance deployments can substitute their own backend.
"""

import copy
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class TripStore(ABC):
    """Key-value store interface for trip and itinerary records."""

    @abstractmethod
    def save_trip(self, trip_id: str, record: Record) -> None:
        ...

    @abstractmethod
    def get_trip(self, trip_id: str) -> Optional[Record]:
        ...

    @abstractmethod
    def save_itinerary(self, key: str, record: Record) -> None:
        ...

    @abstractmethod
    def get_itinerary(self, key: str) -> Optional[Record]:
        ...

    @abstractmethod
    def delete_itinerary(self, key: str) -> bool:
        ...

    def close(self) -> None:
        """Release resources; called on application shutdown."""


class InMemoryTripStore(TripStore):
    """Process-local store; contents are lost on restart."""

    def __init__(self):
        self._trips: Dict[str, Record] = {}
        self._itineraries: Dict[str, Record] = {}

    def save_trip(self, trip_id: str, record: Record) -> None:
        self._trips[trip_id] = copy.deepcopy(record)
        logger.debug("Stored trip %s (total %d)", trip_id, len(self._trips))

    def get_trip(self, trip_id: str) -> Optional[Record]:
        record = self._trips.get(trip_id)
        return copy.deepcopy(record) if record is not None else None

    def save_itinerary(self, key: str, record: Record) -> None:
        self._itineraries[key] = copy.deepcopy(record)
        logger.debug("Stored itinerary %s", key)

    def get_itinerary(self, key: str) -> Optional[Record]:
        record = self._itineraries.get(key)
        return copy.deepcopy(record) if record is not None else None

    def delete_itinerary(self, key: str) -> bool:
        return self._itineraries.pop(key, None) is not None

    def close(self) -> None:
        self._trips.clear()
        self._itineraries.clear()
