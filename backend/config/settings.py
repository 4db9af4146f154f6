"""
Centralized configuration management for the TripCraft backend.

Loads environment variables from .env file and provides typed settings
to all backend modules. Includes validation for required configuration.

Usage:
    from config.settings import settings
    api_key = settings.GEMINI_API_KEY
"""

import os
import logging
from typing import Dict, List
from pathlib import Path

from dotenv import load_dotenv

# Load .env from backend directory
_backend_dir = Path(__file__).resolve().parent.parent
load_dotenv(_backend_dir / ".env")

logger = logging.getLogger(__name__)


class Settings:
    """Centralized configuration singleton for all backend services."""

    # ===== FastAPI Configuration =====
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "True").lower() == "true"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # ===== Gemini API Configuration =====
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_KEY_PREFIX: str = "AIza"
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-1.5-pro")
    GEMINI_TEST_MODEL: str = os.getenv("GEMINI_TEST_MODEL", "gemini-1.5-flash")
    PRIMARY_TEMPERATURE: float = float(os.getenv("PRIMARY_TEMPERATURE", "0.7"))
    RETRY_TEMPERATURE: float = float(os.getenv("RETRY_TEMPERATURE", "0.3"))
    GEMINI_TOP_K: int = int(os.getenv("GEMINI_TOP_K", "40"))
    GEMINI_TOP_P: float = float(os.getenv("GEMINI_TOP_P", "0.95"))
    GEMINI_MAX_OUTPUT_TOKENS: int = int(os.getenv("GEMINI_MAX_OUTPUT_TOKENS", "8192"))
    GEMINI_TIMEOUT: int = int(os.getenv("GEMINI_TIMEOUT", "60"))
    # Transport-level attempts per call; schema retries live in the orchestrator
    GEMINI_MAX_RETRIES: int = int(os.getenv("GEMINI_MAX_RETRIES", "1"))

    # ===== Itinerary Constants =====
    ITINERARY_TYPES: List[str] = ["budget", "balanced", "premium"]
    COST_MULTIPLIERS: Dict[str, float] = {
        "budget": 0.7,
        "balanced": 0.9,
        "premium": 1.2,
    }
    # Upper bounds on accepted trip requests
    MAX_TRIP_DAYS: int = int(os.getenv("MAX_TRIP_DAYS", "60"))
    MAX_BUDGET_TOTAL: float = float(os.getenv("MAX_BUDGET_TOTAL", "1e15"))
    DEFAULT_CONFIDENCE_SCORE: float = 0.85
    MOCK_CONFIDENCE_SCORE: float = 0.75
    MOCK_MODEL_VERSION: str = "mock-generator-v1"

    # ===== Mock Geocoding (placeholder until a real provider is wired) =====
    MOCK_BASE_LAT: float = float(os.getenv("MOCK_BASE_LAT", "40.7128"))
    MOCK_BASE_LNG: float = float(os.getenv("MOCK_BASE_LNG", "-74.006"))
    MOCK_SEED: str = os.getenv("MOCK_SEED", "")

    # ===== Booking Partner =====
    BOOKING_PROVIDER: str = "EaseMyTrip"
    BOOKING_BASE_URL: str = os.getenv("BOOKING_BASE_URL", "https://www.easemytrip.com")

    # ===== Logging =====
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s",
    )

    @classmethod
    def validate(cls) -> List[str]:
        """Validate configuration. Returns list of errors (empty = valid)."""
        errors = []

        for name in ("PRIMARY_TEMPERATURE", "RETRY_TEMPERATURE"):
            value = getattr(cls, name)
            if not 0 <= value <= 1:
                errors.append(f"{name} must be 0-1, got {value}")

        if not 0 < cls.GEMINI_TOP_P <= 1:
            errors.append(f"GEMINI_TOP_P must be in (0, 1], got {cls.GEMINI_TOP_P}")

        if cls.GEMINI_TIMEOUT <= 0:
            errors.append(f"GEMINI_TIMEOUT must be positive, got {cls.GEMINI_TIMEOUT}")

        if cls.GEMINI_MAX_RETRIES < 1:
            errors.append(f"GEMINI_MAX_RETRIES must be >= 1, got {cls.GEMINI_MAX_RETRIES}")

        if cls.MAX_TRIP_DAYS < 1:
            errors.append(f"MAX_TRIP_DAYS must be >= 1, got {cls.MAX_TRIP_DAYS}")

        if not 0 < cls.MAX_BUDGET_TOTAL <= 1e300:
            errors.append(f"MAX_BUDGET_TOTAL must be in (0, 1e300], got {cls.MAX_BUDGET_TOTAL}")

        if not 1 <= cls.PORT <= 65535:
            errors.append(f"PORT must be 1-65535, got {cls.PORT}")

        return errors


def is_valid_gemini_key(key: str) -> bool:
    """True when *key* is set and has the Google API key shape."""
    return bool(key) and key.startswith(Settings.GEMINI_KEY_PREFIX)


def redact_api_key(key: str) -> str:
    """Redact API key to show only last 4 characters."""
    if not key or len(key) < 8:
        return "***INVALID***"
    return f"***...{key[-4:]}"


# Singleton instance — import this everywhere
settings = Settings()
