"""In-memory trip / itinerary store."""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from services.trip_store import InMemoryTripStore, TripStore


def test_round_trip_trip_record():
    store = InMemoryTripStore()
    store.save_trip("trip_1", {"id": "trip_1", "status": "created"})

    assert store.get_trip("trip_1") == {"id": "trip_1", "status": "created"}
    assert store.get_trip("missing") is None


def test_records_are_copied():
    store = InMemoryTripStore()
    record = {"id": "trip_1", "tripRequest": {"destination": "Paris"}}
    store.save_trip("trip_1", record)

    record["tripRequest"]["destination"] = "Rome"
    fetched = store.get_trip("trip_1")
    fetched["status"] = "mutated"

    assert store.get_trip("trip_1") == {"id": "trip_1", "tripRequest": {"destination": "Paris"}}


def test_delete_itinerary():
    store = InMemoryTripStore()
    store.save_itinerary("trip_1_budget", {"type": "budget"})

    assert store.delete_itinerary("trip_1_budget") is True
    assert store.delete_itinerary("trip_1_budget") is False
    assert store.get_itinerary("trip_1_budget") is None


def test_close_clears_everything():
    store = InMemoryTripStore()
    store.save_trip("trip_1", {"id": "trip_1"})
    store.save_itinerary("trip_1_premium", {"type": "premium"})

    store.close()

    assert store.get_trip("trip_1") is None
    assert store.get_itinerary("trip_1_premium") is None


def test_incomplete_store_cannot_be_instantiated():
    class TripsOnly(TripStore):
        def save_trip(self, trip_id, record):
            pass

        def get_trip(self, trip_id):
            return None

    with pytest.raises(TypeError):
        TripsOnly()
