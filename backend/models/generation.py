"""
Generation pipeline result types.

``GenerationResult`` is passed between the generation attempt and the
orchestrator; ``GenerationMetadata`` is attached to every payload the
orchestrator hands back to its caller.
"""
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional


# Error kinds produced inside the pipeline
NO_JSON_FOUND = "no_json_found"
JSON_PARSE_FAILED = "json_parse_failed"
SCHEMA_VALIDATION_FAILED = "schema_validation_failed"
GENERATION_FAILED = "generation_failed"
CREDENTIAL_MISSING = "credential_missing"
UNEXPECTED_ERROR = "unexpected_error"

# Values of ``metadata.api_source``
SOURCE_AI = "gemini-api"
SOURCE_MOCK = "mock"


@dataclass
class GenerationResult:
    """Outcome of one generation step.

    ``data`` is set iff ``success``; ``error`` (and optionally ``details``)
    iff not.
    """

    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    details: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def ok(cls, data: Dict[str, Any]) -> "GenerationResult":
        return cls(success=True, data=data)

    @classmethod
    def failed(cls, error: str, details: Optional[List[Dict[str, Any]]] = None) -> "GenerationResult":
        return cls(success=False, error=error, details=details or [])


@dataclass
class GenerationMetadata:
    generated_at: str
    request_id: str
    model_version: str
    confidence_score: float
    processing_time_ms: int
    api_source: str
    itinerary_type: str = "all_types"
    fallback_reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if data["fallback_reason"] is None:
            del data["fallback_reason"]
        return data
