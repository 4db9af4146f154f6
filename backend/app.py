"""
TripCraft Trip Planner — FastAPI application.

Creates trips from validated requests and serves budget / balanced /
premium itineraries generated by Gemini (with a templated fallback).
Exposes a REST API under ``/api/*``.

Run:
    python backend/app.py          # starts uvicorn with reload
    uvicorn app:app --reload       # (from the backend/ directory)

Auto-generated API docs:
    http://localhost:8000/docs      (Swagger UI)
    http://localhost:8000/redoc     (ReDoc)
"""

from __future__ import annotations

import json
import logging
import os
import sys
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# ---------------------------------------------------------------------------
# Path setup — allow short imports like ``from config.settings import …``
# ---------------------------------------------------------------------------
sys.path.insert(0, os.path.dirname(__file__))

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from clients.gemini_client import GeminiClient, ExternalAPIError
from config.settings import settings, is_valid_gemini_key
from schemas.api_models import (
    CreateTripResponse,
    ErrorResponse,
    GeminiTestRequest,
    GeminiTestResponse,
    GenerateItinerariesResponse,
    HealthResponse,
    ItineraryRecord,
    TripRecord,
)
from services.booking_links import build_booking_links
from services.itinerary_orchestrator import ItineraryOrchestrator
from services.trip_store import InMemoryTripStore, TripStore
from services.trip_validator import (
    FieldError,
    TripValidationError,
    require_valid_trip,
)
from utils.id_generator import generate_trip_id, stored_itinerary_key
from utils.logging_config import configure_logging

logger = logging.getLogger(__name__)

GEMINI_TEST_PROMPT = (
    "Hello! This is a connectivity test. Please respond with "
    "'Gemini API is working correctly' and today's date."
)


# ---------------------------------------------------------------------------
# Lifespan — initialise / tear down services
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialise services on startup; clean up on shutdown."""
    configure_logging()

    app.state.store = InMemoryTripStore()
    app.state.orchestrator = ItineraryOrchestrator()
    if app.state.orchestrator.ai_enabled:
        logger.info("Itinerary generation via %s", settings.GEMINI_MODEL)
    else:
        logger.warning("GEMINI_API_KEY missing or invalid — serving mock itineraries only")

    yield  # ── application runs here ──

    app.state.store.close()
    logger.info("Shutting down TripCraft")


# ---------------------------------------------------------------------------
# App creation
# ---------------------------------------------------------------------------
app = FastAPI(
    title="TripCraft Trip Planner",
    version="0.1.0",
    description="AI-generated budget, balanced and premium itineraries.",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------
def get_store(request: Request) -> TripStore:
    return request.app.state.store


def get_orchestrator(request: Request) -> ItineraryOrchestrator:
    return request.app.state.orchestrator


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise TripValidationError(
            [FieldError(field="body", reason=f"malformed JSON: {exc}")]
        ) from exc


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error(status_code: int, error: str, details: Optional[Any] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, details=details).model_dump(exclude_none=True),
    )


# ---------------------------------------------------------------------------
# Global exception handlers
# ---------------------------------------------------------------------------
@app.exception_handler(TripValidationError)
async def _trip_validation_error(request: Request, exc: TripValidationError):
    logger.info("Validation failed: %s", exc)
    return _error(
        400,
        "Invalid request data",
        [{"field": e.field, "reason": e.reason} for e in exc.errors],
    )


@app.exception_handler(Exception)
async def _unhandled_error(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error(500, "Internal server error")


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

# ── Health check ────────────────────────────────────────────────

@app.get("/api/health", response_model=HealthResponse, tags=["system"])
async def health_check(orchestrator: ItineraryOrchestrator = Depends(get_orchestrator)):
    """Return service health and whether AI generation is enabled."""
    return HealthResponse(
        status="healthy",
        service="TripCraft Trip Planner",
        model=orchestrator.model_name if orchestrator.ai_enabled else settings.MOCK_MODEL_VERSION,
        ai_enabled=orchestrator.ai_enabled,
    )


# ── Trips ──────────────────────────────────────────────────────

@app.post(
    "/api/v1/trips",
    response_model=CreateTripResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["trips"],
)
async def create_trip(request: Request, store: TripStore = Depends(get_store)):
    """
    Validate a trip request and store it.

    Itineraries are not generated here; fetch them per type from
    ``/api/v1/itineraries/{trip_id}/{itinerary_type}``.
    """
    trip = require_valid_trip(await _read_json(request))

    trip_id = generate_trip_id()
    store.save_trip(
        trip_id,
        {
            "id": trip_id,
            "tripRequest": trip.to_dict(),
            "createdAt": _now(),
            "status": "created",
        },
    )
    logger.info("Created trip %s", trip_id, extra={"destination": trip.destination})

    return CreateTripResponse(id=trip_id, status="success", message="Trip created successfully")


@app.get(
    "/api/v1/trips/{trip_id}",
    response_model=TripRecord,
    responses={404: {"model": ErrorResponse}},
    tags=["trips"],
)
async def get_trip(trip_id: str, store: TripStore = Depends(get_store)):
    """Return a stored trip."""
    trip = store.get_trip(trip_id)
    if trip is None:
        logger.info("Trip not found: %s", trip_id)
        return _error(404, "Trip not found")
    return trip


# ── Itineraries ────────────────────────────────────────────────

@app.post(
    "/api/v1/itineraries/generate",
    response_model=GenerateItinerariesResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["itineraries"],
)
async def generate_itineraries(
    request: Request,
    orchestrator: ItineraryOrchestrator = Depends(get_orchestrator),
):
    """
    Generate itineraries for a trip request without storing anything.

    Accepts the trip fields plus an optional ``itinerary_type`` to scope
    generation to a single type.
    """
    payload = await _read_json(request)
    trip = require_valid_trip(payload)

    itinerary_type = payload.get("itinerary_type")
    if itinerary_type is not None and str(itinerary_type).lower() not in settings.ITINERARY_TYPES:
        return _error(
            400,
            f"Invalid itinerary type. Must be one of: {', '.join(settings.ITINERARY_TYPES)}",
        )

    result = await orchestrator.generate(trip, itinerary_type and str(itinerary_type).lower())
    return GenerateItinerariesResponse(success=result.success, data=result.data)


async def _itinerary_for_trip(
    trip_id: str,
    itinerary_type: str,
    store: TripStore,
    orchestrator: ItineraryOrchestrator,
    force: bool = False,
):
    itinerary_type = itinerary_type.lower()
    if itinerary_type not in settings.ITINERARY_TYPES:
        return _error(
            400,
            f"Invalid itinerary type. Must be one of: {', '.join(settings.ITINERARY_TYPES)}",
        )

    trip_record = store.get_trip(trip_id)
    if trip_record is None:
        logger.info("Trip not found: %s", trip_id)
        return _error(404, "Trip not found")

    key = stored_itinerary_key(trip_id, itinerary_type)
    if force and store.delete_itinerary(key):
        logger.info("Forced regeneration for %s", key)

    existing = store.get_itinerary(key)
    if existing is not None:
        logger.info("Returning existing itinerary %s", key)
        return existing

    trip = require_valid_trip(trip_record["tripRequest"])
    started = time.monotonic()
    result = await orchestrator.generate(trip, itinerary_type)

    record: Dict[str, Any] = {
        "id": key,
        "tripId": trip_id,
        "type": itinerary_type,
        **result.data,
        "tripRequest": trip_record["tripRequest"],
        "bookingLinks": build_booking_links(trip),
        "createdAt": _now(),
    }
    store.save_itinerary(key, record)
    logger.info(
        "Generated and stored %s itinerary %s in %.0fms",
        itinerary_type,
        key,
        (time.monotonic() - started) * 1000,
        extra={"api_source": result.data["metadata"].get("api_source")},
    )
    return record


@app.get(
    "/api/v1/itineraries/{trip_id}/{itinerary_type}",
    response_model=ItineraryRecord,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    tags=["itineraries"],
)
async def get_itinerary(
    trip_id: str,
    itinerary_type: str,
    store: TripStore = Depends(get_store),
    orchestrator: ItineraryOrchestrator = Depends(get_orchestrator),
):
    """Return the cached itinerary of one type, generating it on first request."""
    return await _itinerary_for_trip(trip_id, itinerary_type, store, orchestrator)


@app.post(
    "/api/v1/itineraries/{trip_id}/{itinerary_type}",
    response_model=ItineraryRecord,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    tags=["itineraries"],
)
async def regenerate_itinerary(
    trip_id: str,
    itinerary_type: str,
    store: TripStore = Depends(get_store),
    orchestrator: ItineraryOrchestrator = Depends(get_orchestrator),
):
    """Discard any cached itinerary of this type and generate a fresh one."""
    return await _itinerary_for_trip(trip_id, itinerary_type, store, orchestrator, force=True)


# ── Gemini connectivity check ──────────────────────────────────

def _classify_gemini_error(message: str):
    """Map a Gemini failure message to (status_code, human-readable detail)."""
    lowered = message.lower()
    if "api key not valid" in lowered:
        return 401, "Invalid API key - please check your GEMINI_API_KEY"
    if "quota" in lowered:
        return 429, "API quota exceeded - please check your Google AI quota"
    if "name or service not known" in lowered or "getaddrinfo" in lowered:
        return 503, "DNS resolution failed - cannot reach Google AI servers"
    if "network" in lowered or "connect" in lowered:
        return 503, "Network error - please check your internet connection"
    return 500, "Unknown error occurred"


async def _probe_gemini(prompt: str, model_name: str, success_message: str):
    if not settings.GEMINI_API_KEY:
        logger.error("GEMINI_API_KEY not found in environment variables")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "GEMINI_API_KEY not configured",
                "details": "Environment variable GEMINI_API_KEY is missing",
            },
        )
    if not is_valid_gemini_key(settings.GEMINI_API_KEY):
        logger.warning("GEMINI_API_KEY does not look like a Google API key")

    started = time.monotonic()
    try:
        client = GeminiClient(model_name=model_name, max_retries=1)
        text = await client.generate_content(
            prompt=prompt,
            response_mime_type=None,
            model_name=model_name,
        )
    except ExternalAPIError as exc:
        status_code, details = _classify_gemini_error(exc.error)
        logger.error("Gemini connectivity test failed: %s", exc.error)
        return JSONResponse(
            status_code=status_code,
            content={
                "success": False,
                "error": "Gemini API test failed",
                "details": details,
                "originalError": {"name": type(exc).__name__, "message": exc.error},
            },
        )

    duration_ms = int((time.monotonic() - started) * 1000)
    logger.info("Gemini responded in %dms (%d chars)", duration_ms, len(text))
    return GeminiTestResponse(
        success=True,
        message=success_message,
        data={
            "responseTime": f"{duration_ms}ms",
            "promptTokens": len(prompt),
            "responseTokens": len(text),
            "modelUsed": model_name,
            "response": text,
            "timestamp": _now(),
        },
    )


@app.get("/api/test-gemini", response_model=GeminiTestResponse, tags=["system"])
async def test_gemini():
    """Send a fixed prompt to Gemini to check key and connectivity."""
    return await _probe_gemini(
        GEMINI_TEST_PROMPT,
        settings.GEMINI_TEST_MODEL,
        "Gemini API is functioning correctly",
    )


@app.post("/api/test-gemini", response_model=GeminiTestResponse, tags=["system"])
async def test_gemini_custom(body: GeminiTestRequest):
    """Send a caller-supplied prompt to Gemini."""
    return await _probe_gemini(
        body.prompt,
        body.model or settings.GEMINI_TEST_MODEL,
        "Custom prompt processed successfully",
    )


# ---------------------------------------------------------------------------
# Startup
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    import uvicorn

    errors = settings.validate()
    if errors:
        for err in errors:
            print(f"❌ Configuration error: {err}")
        sys.exit(1)

    if not is_valid_gemini_key(settings.GEMINI_API_KEY):
        print("⚠️  GEMINI_API_KEY not set — itineraries will come from the mock generator")
        print("   Add your Gemini API key from https://aistudio.google.com/apikey to backend/.env")

    print(f"✅ Settings validated")
    print(f"🌐 Starting server on http://{settings.HOST}:{settings.PORT}")
    print(f"📖 API docs at http://{settings.HOST}:{settings.PORT}/docs")

    uvicorn.run(
        "app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
