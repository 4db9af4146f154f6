"""Shared fixtures: a sample trip and well-formed model output."""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from models.trip_request import TripRequest


@pytest.fixture
def paris_trip():
    return TripRequest(
        origin="NYC",
        destination="Paris",
        start_date=date(2024, 6, 1),
        end_date=date(2024, 6, 5),
        budget_total=2000,
        currency="USD",
        num_travelers=2,
        preferred_themes=("heritage",),
    )


def make_itinerary(itinerary_type="balanced", days=1):
    return {
        "id": f"{itinerary_type}_1",
        "type": itinerary_type,
        "title": f"{itinerary_type.title()} Paris",
        "description": "Test itinerary",
        "total_cost": {"amount": 1800, "currency": "USD"},
        "days": [
            {
                "day": n + 1,
                "date": f"2024-06-0{n + 1}",
                "activities": [{"name": "Louvre", "type": "cultural"}],
            }
            for n in range(days)
        ],
    }


@pytest.fixture
def ai_payload():
    """Schema-valid model output covering all three types."""
    return {
        "itineraries": [make_itinerary(t) for t in ("budget", "balanced", "premium")],
        "metadata": {"confidence_score": 0.92},
    }


@pytest.fixture
def stub_client():
    """Build a GeminiClient stand-in returning the given responses in order.

    Strings are returned as model text, dicts are JSON-encoded, exceptions
    are raised.
    """

    def _build(*responses):
        side_effect = [
            json.dumps(r) if isinstance(r, dict) else r for r in responses
        ]
        client = MagicMock()
        client.generate_content = AsyncMock(side_effect=side_effect)
        return client

    return _build
