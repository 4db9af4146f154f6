"""
Structural validation of model output against the itinerary shape.

Pure function over an already-parsed JSON value.  Only the fields the
rest of the pipeline relies on are required; anything extra the model
adds is allowed through untouched.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class _Loose(BaseModel):
    model_config = ConfigDict(extra="allow")


class _Cost(_Loose):
    amount: float
    currency: str


class _Activity(_Loose):
    name: str
    type: str


class _Day(_Loose):
    day: int = Field(..., ge=1)
    activities: List[_Activity]


class _Itinerary(_Loose):
    id: str
    type: Literal["budget", "balanced", "premium"]
    title: str
    description: str
    total_cost: _Cost
    days: List[_Day]


class _ItinerarySet(_Loose):
    itineraries: List[_Itinerary] = Field(..., min_length=1)


@dataclass
class SchemaError:
    path: str           # dotted path, e.g. "itineraries.0.days"
    expected: str


@dataclass
class SchemaValidationResult:
    success: bool
    errors: List[SchemaError] = field(default_factory=list)

    def errors_as_dicts(self) -> List[Dict[str, str]]:
        return [asdict(e) for e in self.errors]


def _describe(err: Dict[str, Any]) -> str:
    kind = err.get("type", "")
    if kind == "missing":
        return "required field"
    return err.get("msg", "valid value")


def validate_itinerary_schema(
    value: Any,
    allowed_types: Optional[Sequence[str]] = None,
) -> SchemaValidationResult:
    """
    Check *value* against the itinerary-set shape.

    When *allowed_types* is given, every itinerary's ``type`` must be one
    of them (used when generation was scoped to a single type).
    """
    if not isinstance(value, dict):
        return SchemaValidationResult(
            success=False,
            errors=[SchemaError(path="$", expected="JSON object with an 'itineraries' list")],
        )

    try:
        parsed = _ItinerarySet.model_validate(value)
    except ValidationError as exc:
        errors = [
            SchemaError(
                path=".".join(str(p) for p in err["loc"]) or "$",
                expected=_describe(err),
            )
            for err in exc.errors()
        ]
        return SchemaValidationResult(success=False, errors=errors)

    if allowed_types:
        errors = [
            SchemaError(
                path=f"itineraries.{idx}.type",
                expected=f"one of {', '.join(allowed_types)}",
            )
            for idx, itinerary in enumerate(parsed.itineraries)
            if itinerary.type not in allowed_types
        ]
        if errors:
            return SchemaValidationResult(success=False, errors=errors)

    return SchemaValidationResult(success=True)
