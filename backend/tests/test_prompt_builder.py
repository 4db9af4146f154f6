"""Prompt construction is deterministic and describes the JSON shape."""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from services.prompt_builder import (
    FIXUP_INSTRUCTION,
    build_canonical_prompt,
    build_fixup_prompt,
)


def test_same_input_same_prompt(paris_trip):
    assert build_canonical_prompt(paris_trip) == build_canonical_prompt(paris_trip)
    assert build_canonical_prompt(paris_trip, "budget") == build_canonical_prompt(paris_trip, "budget")


def test_prompt_carries_trip_details(paris_trip):
    prompt = build_canonical_prompt(paris_trip)

    assert "from NYC to Paris" in prompt
    assert "2024-06-01 to 2024-06-05 (4 days)" in prompt
    assert "Travellers: 2" in prompt
    assert "2000.00 USD" in prompt
    assert "heritage" in prompt


def test_unfiltered_prompt_asks_for_all_types(paris_trip):
    prompt = build_canonical_prompt(paris_trip)

    assert "exactly THREE itineraries" in prompt
    for itinerary_type in ("budget", "balanced", "premium"):
        assert f"- {itinerary_type}:" in prompt
    assert "1400.00 USD" in prompt
    assert "2400.00 USD" in prompt


def test_filtered_prompt_is_scoped(paris_trip):
    prompt = build_canonical_prompt(paris_trip, "premium")

    assert 'exactly ONE itinerary of type "premium"' in prompt
    assert "- premium:" in prompt
    assert "- budget:" not in prompt


def test_prompt_describes_schema(paris_trip):
    prompt = build_canonical_prompt(paris_trip)
    for key in ('"itineraries"', '"total_cost"', '"days"', '"activities"', '"confidence_score"'):
        assert key in prompt
    assert "Return ONLY a valid JSON object" in prompt


def test_additional_info_included_when_present(paris_trip):
    from dataclasses import replace

    trip = replace(paris_trip, additional_info="Wheelchair accessible please")
    assert "Wheelchair accessible please" in build_canonical_prompt(trip)
    assert "Additional notes" not in build_canonical_prompt(paris_trip)


def test_fixup_prompt_extends_original(paris_trip):
    prompt = build_canonical_prompt(paris_trip)
    fixup = build_fixup_prompt(prompt)

    assert fixup.startswith(prompt)
    assert fixup.endswith(FIXUP_INSTRUCTION)
