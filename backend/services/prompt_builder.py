"""
Prompt construction for itinerary generation.

The prompt is a pure function of the trip request and the optional
itinerary-type filter: no clock reads, no randomness.
"""

from typing import List, Optional

from config.settings import settings
from models.trip_request import TripRequest

_TYPE_BRIEFS = {
    "budget": "maximum value: hostels or budget inns, public transport, free attractions and street food",
    "balanced": "a mix of must-see attractions and local experiences in comfortable mid-range hotels",
    "premium": "luxury stays, private guided tours, fine dining and premium transport",
}

ITINERARY_JSON_SCHEMA = """\
{
  "itineraries": [
    {
      "id": "<string, unique per itinerary>",
      "type": "budget" | "balanced" | "premium",
      "title": "<string>",
      "description": "<string>",
      "total_cost": {"amount": <number>, "currency": "<ISO code>"},
      "highlights": ["<string>", ...],
      "best_for": ["<string>", ...],
      "days": [
        {
          "day": <int, 1-based>,
          "date": "YYYY-MM-DD",
          "activities": [
            {
              "name": "<string>",
              "type": "<sightseeing|cultural|food|adventure|nature|shopping|nightlife|...>",
              "time": "HH:MM",
              "duration": "<e.g. 2 hours>",
              "description": "<string>",
              "cost": {"amount": <number>, "currency": "<ISO code>"},
              "location": {
                "name": "<string>",
                "coordinates": {"lat": <number>, "lng": <number>}
              }
            }
          ],
          "accommodation": {
            "name": "<string>",
            "type": "<hostel|hotel|resort|...>",
            "cost": {"amount": <number>, "currency": "<ISO code>"}
          },
          "meals": [
            {"type": "breakfast|lunch|dinner", "name": "<string>",
             "cost": {"amount": <number>, "currency": "<ISO code>"}}
          ],
          "transportation": {"type": "<string>", "cost": {"amount": <number>, "currency": "<ISO code>"}},
          "daily_cost": {"amount": <number>, "currency": "<ISO code>"}
        }
      ]
    }
  ],
  "metadata": {"confidence_score": <number between 0 and 1>}
}"""

FIXUP_INSTRUCTION = (
    "IMPORTANT: The previous response had schema validation errors. Please ensure "
    "your JSON response strictly follows the provided schema format. Double-check "
    "all required fields and data types. Return ONLY valid JSON without any "
    "markdown formatting."
)


def _requested_types(itinerary_type: Optional[str]) -> List[str]:
    if itinerary_type:
        return [itinerary_type]
    return list(settings.ITINERARY_TYPES)


def build_canonical_prompt(trip: TripRequest, itinerary_type: Optional[str] = None) -> str:
    """Render *trip* into the generation prompt, optionally scoped to one type."""
    types = _requested_types(itinerary_type)
    themes = ", ".join(trip.preferred_themes) or "general sightseeing"
    duration = trip.duration_days

    type_lines = []
    for t in types:
        multiplier = settings.COST_MULTIPLIERS.get(t, 1.0)
        target = trip.budget_total * multiplier
        type_lines.append(
            f"- {t}: {_TYPE_BRIEFS.get(t, 'a well-rounded trip')}; "
            f"target total cost about {target:.2f} {trip.currency} "
            f"({multiplier:g} x budget)"
        )

    if len(types) == 1:
        scope = f'Generate exactly ONE itinerary of type "{types[0]}".'
    else:
        scope = (
            "Generate exactly THREE itineraries, one of each type, "
            f"in this order: {', '.join(types)}."
        )

    notes = f"- Additional notes from the traveller: {trip.additional_info}\n" if trip.additional_info else ""

    return (
        f"You are an expert travel planner. Plan a trip from {trip.origin} "
        f"to {trip.destination}.\n\n"
        f"**Trip Details:**\n"
        f"- Dates: {trip.start_date.isoformat()} to {trip.end_date.isoformat()} "
        f"({duration} day{'s' if duration != 1 else ''})\n"
        f"- Travellers: {trip.num_travelers}\n"
        f"- Total budget: {trip.budget_total:.2f} {trip.currency} "
        f"({trip.budget_total / duration:.2f} {trip.currency}/day)\n"
        f"- Preferred themes (most important first): {themes}\n"
        f"{notes}\n"
        f"**Itineraries:**\n"
        f"{scope}\n"
        + "\n".join(type_lines)
        + "\n\n"
        f"**Rules:**\n"
        f"1. Each itinerary has exactly {duration} day entries, numbered from 1, "
        f"dated consecutively from {trip.start_date.isoformat()}.\n"
        f"2. Every day has at least one activity, plus accommodation, meals and transportation.\n"
        f"3. All amounts are numbers in {trip.currency}; each day's component costs add up to its daily_cost, "
        f"and the daily costs add up to the itinerary's total_cost.\n"
        f"4. Feature the preferred themes prominently.\n\n"
        f"**Output Format:**\n"
        f"Return ONLY a valid JSON object (no markdown fences, no prose) matching this schema:\n"
        f"{ITINERARY_JSON_SCHEMA}\n"
    )


def build_fixup_prompt(prompt: str) -> str:
    """Original prompt plus the corrective instruction used on retry."""
    return f"{prompt}\n\n{FIXUP_INSTRUCTION}"
