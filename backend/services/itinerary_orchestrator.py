"""
Itinerary Orchestrator — sequences prompt construction, Gemini generation
with one corrective retry, and the templated fallback.

Flow:
    1. No usable credential      → mock itinerary
    2. Attempt at temperature 0.7
    3. Schema failure            → fix-up prompt, retry once at 0.3
    4. Any remaining failure     → mock itinerary
    5. Success                   → attach metadata and return

Every path returns ``success=True``; callers always receive a usable
itinerary set.  Which path produced it is recorded in
``metadata.api_source`` (and ``metadata.fallback_reason`` for mocks).
Cancellation of the calling task is not absorbed.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from numbers import Real
from typing import Any, Dict, Optional

from clients.gemini_client import GeminiClient
from config.settings import settings, is_valid_gemini_key, redact_api_key
from models.generation import (
    GenerationMetadata,
    GenerationResult,
    CREDENTIAL_MISSING,
    SCHEMA_VALIDATION_FAILED,
    SOURCE_AI,
    UNEXPECTED_ERROR,
)
from models.trip_request import TripRequest
from services.generation_attempt import attempt_generation
from services.mock_generator import MockItineraryGenerator
from services.prompt_builder import build_canonical_prompt, build_fixup_prompt
from utils.id_generator import generate_request_id

logger = logging.getLogger(__name__)


class ItineraryOrchestrator:
    """Generates itinerary sets via Gemini, degrading to mock data on failure."""

    def __init__(
        self,
        gemini_client: Optional[GeminiClient] = None,
        mock_generator: Optional[MockItineraryGenerator] = None,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
    ):
        """
        Args:
            gemini_client: Injected client (useful for testing).
                           Created lazily on first AI call if omitted.
            mock_generator: Fallback generator.
            api_key: Overrides settings.GEMINI_API_KEY.
            model_name: Overrides settings.GEMINI_MODEL.
        """
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model_name = model_name or settings.GEMINI_MODEL
        self.mock_generator = mock_generator or MockItineraryGenerator()
        self._client = gemini_client

        logger.info(
            "ItineraryOrchestrator ready",
            extra={
                "ai_enabled": self.ai_enabled,
                "model": self.model_name,
                "api_key": redact_api_key(self.api_key),
            },
        )

    @property
    def ai_enabled(self) -> bool:
        return is_valid_gemini_key(self.api_key)

    def _get_client(self) -> GeminiClient:
        if self._client is None:
            self._client = GeminiClient(api_key=self.api_key, model_name=self.model_name)
        return self._client

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def generate(
        self,
        trip: TripRequest,
        itinerary_type: Optional[str] = None,
    ) -> GenerationResult:
        """
        Produce an itinerary set for *trip*, optionally scoped to one type.

        Returns:
            GenerationResult with ``success=True`` and
            ``data = {"itineraries": [...], "metadata": {...}}``.
        """
        started = time.monotonic()
        request_id = generate_request_id()
        itinerary_type = self._normalise_type(itinerary_type)

        logger.info(
            "Starting itinerary generation",
            extra={
                "request_id": request_id,
                "destination": trip.destination,
                "dates": f"{trip.start_date} → {trip.end_date}",
                "budget": f"{trip.budget_total} {trip.currency}",
                "itinerary_type": itinerary_type or "all_types",
            },
        )

        try:
            if not self.ai_enabled:
                reason = "API key not found" if not self.api_key else "Invalid API key format"
                logger.warning("%s, using mock response", reason, extra={"request_id": request_id})
                return self._fallback(trip, itinerary_type, CREDENTIAL_MISSING, started)

            client = self._get_client()
            allowed = [itinerary_type] if itinerary_type else None
            prompt = build_canonical_prompt(trip, itinerary_type)

            result = await attempt_generation(
                client, prompt, settings.PRIMARY_TEMPERATURE, request_id, allowed,
            )
            attempts = 1

            if not result.success and result.error == SCHEMA_VALIDATION_FAILED:
                logger.info(
                    "First attempt failed validation, retrying with lower temperature",
                    extra={"request_id": request_id, "errors": result.details[:10]},
                )
                result = await attempt_generation(
                    client,
                    build_fixup_prompt(prompt),
                    settings.RETRY_TEMPERATURE,
                    request_id,
                    allowed,
                )
                attempts = 2

            if not result.success:
                logger.warning(
                    "AI generation failed, falling back to mock response",
                    extra={"request_id": request_id, "error": result.error, "attempts": attempts},
                )
                return self._fallback(trip, itinerary_type, result.error, started)

            data = self._attach_metadata(result.data, request_id, itinerary_type, started)
            logger.info(
                "Itinerary generation complete",
                extra={
                    "request_id": request_id,
                    "itineraries": len(data["itineraries"]),
                    "attempts": attempts,
                    "processing_time_ms": data["metadata"]["processing_time_ms"],
                },
            )
            return GenerationResult.ok(data)

        except Exception:
            logger.error(
                "Unexpected error in itinerary orchestrator, falling back to mock response",
                extra={"request_id": request_id, "destination": trip.destination},
                exc_info=True,
            )
            return self._fallback(trip, itinerary_type, UNEXPECTED_ERROR, started)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _normalise_type(itinerary_type: Optional[str]) -> Optional[str]:
        if not itinerary_type:
            return None
        return MockItineraryGenerator.select_types(itinerary_type)[0]

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int((time.monotonic() - started) * 1000)

    def _fallback(
        self,
        trip: TripRequest,
        itinerary_type: Optional[str],
        reason: Optional[str],
        started: float,
    ) -> GenerationResult:
        data = self.mock_generator.generate(trip, itinerary_type, fallback_reason=reason)
        data["metadata"]["processing_time_ms"] = self._elapsed_ms(started)
        return GenerationResult.ok(data)

    def _attach_metadata(
        self,
        data: Dict[str, Any],
        request_id: str,
        itinerary_type: Optional[str],
        started: float,
    ) -> Dict[str, Any]:
        supplied = data.get("metadata") if isinstance(data.get("metadata"), dict) else {}
        confidence = supplied.get("confidence_score")
        if isinstance(confidence, bool) or not isinstance(confidence, Real) or not 0 <= confidence <= 1:
            confidence = settings.DEFAULT_CONFIDENCE_SCORE

        metadata = GenerationMetadata(
            generated_at=datetime.now(timezone.utc).isoformat(),
            request_id=request_id,
            model_version=self.model_name,
            confidence_score=float(confidence),
            processing_time_ms=self._elapsed_ms(started),
            api_source=SOURCE_AI,
            itinerary_type=itinerary_type or "all_types",
        )
        return {**data, "metadata": {**supplied, **metadata.to_dict()}}
