"""
Pydantic models for FastAPI request/response validation.

These are API-boundary schemas only.  Internal business logic continues
to use the dataclasses in models/trip_request.py and models/itinerary.py.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from config.settings import settings


# ── Request Models ─────────────────────────────────────────────


class TripRequestPayload(BaseModel):
    """Untrusted trip parameters as submitted by the client.

    Parsed by ``services.trip_validator`` rather than bound directly to a
    route, so that failures come back as field-level 400 errors.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    origin: str = Field(..., min_length=1, json_schema_extra={"examples": ["NYC"]})
    destination: str = Field(..., min_length=1, json_schema_extra={"examples": ["Paris"]})
    start_date: date
    end_date: date
    budget_total: float = Field(
        ...,
        gt=0,
        lt=settings.MAX_BUDGET_TOTAL,
        allow_inf_nan=False,
        description="Total trip budget",
    )
    currency: str = Field(..., pattern=r"^[A-Za-z]{3}$", description="ISO 4217 code")
    num_travelers: int = Field(..., gt=0)
    preferred_themes: List[str] = Field(
        default_factory=list,
        description="Ordered theme tags, most important first",
        json_schema_extra={"examples": [["heritage", "food"]]},
    )
    additional_info: Optional[str] = None

    @field_validator("preferred_themes", mode="before")
    @classmethod
    def _themes_default(cls, value: Any) -> Any:
        if value is None:
            return []
        return value

    @field_validator("preferred_themes")
    @classmethod
    def _drop_blank_themes(cls, value: List[str]) -> List[str]:
        return [theme.strip() for theme in value if theme and theme.strip()]

    @field_validator("end_date")
    @classmethod
    def _end_not_before_start(cls, value: date, info: ValidationInfo) -> date:
        start = info.data.get("start_date")
        if start is not None and value < start:
            raise ValueError("end_date must be on or after start_date")
        if start is not None and (value - start).days > settings.MAX_TRIP_DAYS:
            raise ValueError(f"trip cannot be longer than {settings.MAX_TRIP_DAYS} days")
        return value


class GeminiTestRequest(BaseModel):
    """POST /api/test-gemini — send a custom prompt to Gemini."""

    prompt: str = Field(..., min_length=1)
    model: Optional[str] = Field(None, description="Defaults to GEMINI_TEST_MODEL")


# ── Response Models ────────────────────────────────────────────


class HealthResponse(BaseModel):
    """GET /api/health response."""

    status: str
    service: str
    model: str
    ai_enabled: bool


class CreateTripResponse(BaseModel):
    """POST /api/v1/trips response."""

    id: str
    status: str
    message: str


class TripRecord(BaseModel):
    """GET /api/v1/trips/{trip_id} response."""

    id: str
    tripRequest: Dict[str, Any]
    createdAt: str
    status: str


class BookingLinks(BaseModel):
    flights: str
    hotels: str
    activities: str
    home: str


class ItineraryRecord(BaseModel):
    """GET/POST /api/v1/itineraries/{trip_id}/{itinerary_type} response."""

    model_config = ConfigDict(extra="allow")

    id: str
    tripId: str
    type: str
    itineraries: List[Dict[str, Any]]
    metadata: Dict[str, Any]
    tripRequest: Dict[str, Any]
    bookingLinks: BookingLinks
    createdAt: str


class GenerateItinerariesResponse(BaseModel):
    """POST /api/v1/itineraries/generate response."""

    success: bool
    data: Dict[str, Any]


class GeminiTestData(BaseModel):
    responseTime: str
    promptTokens: int
    responseTokens: int
    modelUsed: str
    response: str
    timestamp: str


class GeminiTestResponse(BaseModel):
    success: bool
    message: str
    data: GeminiTestData


class ErrorResponse(BaseModel):
    """Generic error envelope returned on failure."""

    error: str
    details: Optional[Any] = None
