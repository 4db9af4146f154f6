"""
Trip request validation.

Turns an untrusted request payload into an immutable ``TripRequest`` or a
list of field-level errors.  Side-effect free.

Usage:
    from services.trip_validator import validate_trip_request

    result = validate_trip_request(body)
    if not result.success:
        print(result.errors)
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from models.trip_request import TripRequest
from schemas.api_models import TripRequestPayload

logger = logging.getLogger(__name__)


@dataclass
class FieldError:
    field: str
    reason: str


@dataclass
class TripValidationResult:
    success: bool
    data: Optional[TripRequest] = None
    errors: List[FieldError] = field(default_factory=list)

    def errors_as_dicts(self) -> List[Dict[str, str]]:
        return [asdict(e) for e in self.errors]


class TripValidationError(Exception):
    """Raised when a trip payload is rejected before generation runs."""

    def __init__(self, errors: List[FieldError]):
        self.errors = errors
        super().__init__(
            "Invalid trip request: "
            + ", ".join(f"{e.field} ({e.reason})" for e in errors)
        )


def _field_errors(exc: ValidationError) -> List[FieldError]:
    errors = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "body"
        reason = err.get("msg", "invalid value")
        # pydantic prefixes messages raised from custom validators
        if reason.startswith("Value error, "):
            reason = reason[len("Value error, "):]
        errors.append(FieldError(field=loc, reason=reason))
    return errors


def validate_trip_request(payload: Any) -> TripValidationResult:
    """Validate *payload* and build a ``TripRequest`` from it."""
    if not isinstance(payload, Mapping):
        return TripValidationResult(
            success=False,
            errors=[FieldError(field="body", reason="request body must be a JSON object")],
        )

    try:
        parsed = TripRequestPayload.model_validate(dict(payload))
    except ValidationError as exc:
        errors = _field_errors(exc)
        logger.info(
            "Trip request rejected",
            extra={"fields": [e.field for e in errors]},
        )
        return TripValidationResult(success=False, errors=errors)

    trip = TripRequest(
        origin=parsed.origin,
        destination=parsed.destination,
        start_date=parsed.start_date,
        end_date=parsed.end_date,
        budget_total=parsed.budget_total,
        currency=parsed.currency.upper(),
        num_travelers=parsed.num_travelers,
        preferred_themes=tuple(parsed.preferred_themes),
        additional_info=parsed.additional_info or None,
    )
    return TripValidationResult(success=True, data=trip)


def require_valid_trip(payload: Any) -> TripRequest:
    """Like ``validate_trip_request`` but raises ``TripValidationError``."""
    result = validate_trip_request(payload)
    if not result.success:
        raise TripValidationError(result.errors)
    return result.data
