"""
A single model call: prompt in, validated itinerary JSON (or an error kind) out.

Retries are the orchestrator's job; nothing here calls the model twice.
"""

import json
import logging
import re
import time
from typing import Any, Optional, Sequence

from clients.gemini_client import GeminiClient, ExternalAPIError
from config.settings import settings
from models.generation import (
    GenerationResult,
    GENERATION_FAILED,
    JSON_PARSE_FAILED,
    NO_JSON_FOUND,
    SCHEMA_VALIDATION_FAILED,
)
from services.schema_validator import validate_itinerary_schema

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```json\n([\s\S]*?)\n```")
_GREEDY_OBJECT = re.compile(r"\{[\s\S]*\}")


class JSONExtractionError(Exception):
    """Raised when no JSON object can be recovered from model text."""

    def __init__(self, kind: str, detail: str = ""):
        self.kind = kind
        self.detail = detail
        super().__init__(f"{kind}: {detail}" if detail else kind)


def extract_json_payload(text: str) -> Any:
    """
    Parse *text* as JSON, falling back to a fenced ```json block and then
    to the widest ``{...}`` span.

    Raises:
        JSONExtractionError: kind ``no_json_found`` when nothing looks like
            JSON, ``json_parse_failed`` when the extracted span won't parse.
    """
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        pass

    match = _FENCED_JSON.search(text or "")
    candidate: Optional[str] = match.group(1) if match else None
    if candidate is None:
        match = _GREEDY_OBJECT.search(text or "")
        candidate = match.group(0) if match else None

    if candidate is None:
        raise JSONExtractionError(NO_JSON_FOUND)

    try:
        return json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise JSONExtractionError(JSON_PARSE_FAILED, str(exc)) from exc


async def attempt_generation(
    client: GeminiClient,
    prompt: str,
    temperature: float,
    request_id: Optional[str] = None,
    allowed_types: Optional[Sequence[str]] = None,
) -> GenerationResult:
    """Call the model once at *temperature* and validate what comes back."""
    started = time.monotonic()
    logger.info(
        "Starting generation attempt (temperature %.2f)",
        temperature,
        extra={"request_id": request_id, "prompt_length": len(prompt)},
    )

    try:
        text = await client.generate_content(
            prompt=prompt,
            temperature=temperature,
            top_k=settings.GEMINI_TOP_K,
            top_p=settings.GEMINI_TOP_P,
            max_tokens=settings.GEMINI_MAX_OUTPUT_TOKENS,
            response_mime_type="application/json",
            request_id=request_id,
        )
    except ExternalAPIError as exc:
        logger.warning(
            "Generation attempt failed at the API",
            extra={"request_id": request_id, "error": exc.error},
        )
        return GenerationResult.failed(GENERATION_FAILED, [{"error": exc.error}])
    except Exception as exc:
        logger.warning(
            "Generation attempt raised %s",
            type(exc).__name__,
            extra={"request_id": request_id, "error": str(exc)},
            exc_info=True,
        )
        return GenerationResult.failed(GENERATION_FAILED, [{"error": str(exc)}])

    try:
        payload = extract_json_payload(text)
    except JSONExtractionError as exc:
        logger.error(
            "No usable JSON in model response",
            extra={
                "request_id": request_id,
                "kind": exc.kind,
                "preview": (text or "")[:500],
            },
        )
        return GenerationResult.failed(exc.kind, [{"error": exc.detail}] if exc.detail else [])

    validation = validate_itinerary_schema(payload, allowed_types)
    if not validation.success:
        logger.error(
            "Schema validation failed",
            extra={
                "request_id": request_id,
                "errors": validation.errors_as_dicts()[:10],
                "temperature": temperature,
            },
        )
        return GenerationResult.failed(SCHEMA_VALIDATION_FAILED, validation.errors_as_dicts())

    logger.info(
        "Generation attempt succeeded in %dms",
        int((time.monotonic() - started) * 1000),
        extra={"request_id": request_id},
    )
    return GenerationResult.ok(payload)
