"""
HTTP API tests using FastAPI's TestClient.

Generation runs through an orchestrator without a Gemini key, so every
itinerary comes from the mock generator and no network calls are made.
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient

from app import app, get_orchestrator, get_store
from config.settings import settings
from services.itinerary_orchestrator import ItineraryOrchestrator
from services.trip_store import InMemoryTripStore

TRIP = {
    "origin": "NYC",
    "destination": "Paris",
    "start_date": "2024-06-01",
    "end_date": "2024-06-05",
    "budget_total": 2000,
    "currency": "usd",
    "num_travelers": 2,
    "preferred_themes": ["heritage"],
}


@pytest.fixture
def store():
    return InMemoryTripStore()


@pytest.fixture
def client(store):
    orchestrator = ItineraryOrchestrator(api_key="")
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _create_trip(client, **overrides):
    response = client.post("/api/v1/trips", json={**TRIP, **overrides})
    assert response.status_code == 200, response.text
    return response.json()["id"]


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------

def test_health_reports_mock_mode(client):
    body = client.get("/api/health").json()

    assert body["status"] == "healthy"
    assert body["ai_enabled"] is False
    assert body["model"] == "mock-generator-v1"


def test_gemini_probe_without_key_is_server_error(client, monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "")

    response = client.get("/api/test-gemini")

    assert response.status_code == 500
    assert response.json()["error"] == "GEMINI_API_KEY not configured"


# ---------------------------------------------------------------------------
# Trips
# ---------------------------------------------------------------------------

def test_create_and_fetch_trip(client):
    response = client.post("/api/v1/trips", json=TRIP)
    body = response.json()

    assert response.status_code == 200
    assert body["status"] == "success"
    assert body["message"] == "Trip created successfully"
    assert body["id"].startswith("trip_")

    trip = client.get(f"/api/v1/trips/{body['id']}").json()
    assert trip["status"] == "created"
    assert trip["tripRequest"]["currency"] == "USD"
    assert trip["tripRequest"]["start_date"] == "2024-06-01"


def test_unknown_trip_is_404(client):
    response = client.get("/api/v1/trips/trip_nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Trip not found"}


def test_invalid_trip_lists_every_field(client):
    payload = {**TRIP, "budget_total": -5, "currency": "dollars"}
    del payload["destination"]

    response = client.post("/api/v1/trips", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid request data"
    fields = {d["field"] for d in body["details"]}
    assert fields == {"destination", "budget_total", "currency"}


def test_end_before_start_is_rejected(client):
    response = client.post("/api/v1/trips", json={**TRIP, "end_date": "2024-05-30"})

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "end_date"


def test_malformed_json_is_rejected(client):
    response = client.post(
        "/api/v1/trips",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "body"


# ---------------------------------------------------------------------------
# Itineraries
# ---------------------------------------------------------------------------

def test_generate_endpoint_returns_all_types(client):
    response = client.post("/api/v1/itineraries/generate", json=TRIP)
    body = response.json()

    assert response.status_code == 200
    assert body["success"] is True
    totals = {i["type"]: i["total_cost"]["amount"] for i in body["data"]["itineraries"]}
    assert totals == {"budget": 1400, "balanced": 1800, "premium": 2400}
    assert body["data"]["metadata"]["api_source"] == "mock"


def test_generate_endpoint_scoped_to_type(client):
    body = client.post(
        "/api/v1/itineraries/generate", json={**TRIP, "itinerary_type": "Budget"},
    ).json()

    assert [i["type"] for i in body["data"]["itineraries"]] == ["budget"]


def test_generate_endpoint_rejects_unknown_type(client):
    response = client.post(
        "/api/v1/itineraries/generate", json={**TRIP, "itinerary_type": "luxury"},
    )
    assert response.status_code == 400


def test_itinerary_for_trip_is_generated_then_cached(client, store):
    trip_id = _create_trip(client)

    first = client.get(f"/api/v1/itineraries/{trip_id}/premium")
    assert first.status_code == 200
    record = first.json()
    assert record["id"] == f"{trip_id}_premium"
    assert record["tripId"] == trip_id
    assert record["type"] == "premium"
    assert [i["type"] for i in record["itineraries"]] == ["premium"]
    assert record["bookingLinks"]["hotels"].endswith("/hotels/paris")
    assert record["tripRequest"]["destination"] == "Paris"

    second = client.get(f"/api/v1/itineraries/{trip_id}/premium").json()
    assert second["createdAt"] == record["createdAt"]
    assert second["itineraries"][0]["id"] == record["itineraries"][0]["id"]
    assert store.get_itinerary(f"{trip_id}_premium") is not None


def test_post_regenerates_itinerary(client):
    trip_id = _create_trip(client)
    original = client.get(f"/api/v1/itineraries/{trip_id}/budget").json()

    regenerated = client.post(f"/api/v1/itineraries/{trip_id}/budget").json()

    assert regenerated["itineraries"][0]["id"] != original["itineraries"][0]["id"]
    assert client.get(f"/api/v1/itineraries/{trip_id}/budget").json() == regenerated


def test_itinerary_type_is_validated(client):
    trip_id = _create_trip(client)
    response = client.get(f"/api/v1/itineraries/{trip_id}/luxury")

    assert response.status_code == 400
    assert "budget, balanced, premium" in response.json()["error"]


def test_itinerary_for_unknown_trip_is_404(client):
    response = client.get("/api/v1/itineraries/trip_missing/balanced")
    assert response.status_code == 404


@pytest.mark.parametrize("budget", ["inf", 1.7e308])
def test_generate_rejects_unbounded_budget(client, budget):
    response = client.post("/api/v1/itineraries/generate", json={**TRIP, "budget_total": budget})

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "budget_total"


def test_regenerate_for_unknown_trip_keeps_cache(client, store):
    store.save_itinerary("trip_gone_budget", {"id": "trip_gone_budget"})

    response = client.post("/api/v1/itineraries/trip_gone/budget")

    assert response.status_code == 404
    assert store.get_itinerary("trip_gone_budget") == {"id": "trip_gone_budget"}
