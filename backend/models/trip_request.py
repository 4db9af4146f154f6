"""
Trip request model — the validated, immutable input to itinerary generation.

Instances are produced by ``services.trip_validator.validate_trip_request``
from untrusted payloads and are never mutated afterwards.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class TripRequest:
    """Validated trip parameters submitted by a traveller."""

    origin: str
    destination: str
    start_date: date
    end_date: date
    budget_total: float
    currency: str                       # ISO 4217, upper-case
    num_travelers: int
    preferred_themes: Tuple[str, ...] = field(default_factory=tuple)
    additional_info: Optional[str] = None

    @property
    def duration_days(self) -> int:
        """Whole days between start and end, never less than one."""
        return max(1, (self.end_date - self.start_date).days)

    @property
    def primary_theme(self) -> Optional[str]:
        return self.preferred_themes[0] if self.preferred_themes else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serialisable dictionary."""
        return {
            "origin": self.origin,
            "destination": self.destination,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "budget_total": self.budget_total,
            "currency": self.currency,
            "preferred_themes": list(self.preferred_themes),
            "num_travelers": self.num_travelers,
            "additional_info": self.additional_info,
        }
