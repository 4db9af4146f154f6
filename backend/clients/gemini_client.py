"""
Google Gemini API client wrapper with timeout handling and structured logging.

Uses the google-genai SDK (``from google import genai``).

Usage:
    from clients.gemini_client import GeminiClient

    client = GeminiClient()
    text = await client.generate_content(
        prompt="Generate three Paris itineraries...",
        temperature=0.7,
        request_id="req-123",
    )
"""

import asyncio
import logging
from typing import Optional

from google import genai
from google.genai import types

logger = logging.getLogger(__name__)


class ExternalAPIError(Exception):
    """Raised when an external API call fails after retries."""

    def __init__(self, service: str, error: str, retry_count: int = 0):
        self.service = service
        self.error = error
        self.retry_count = retry_count
        super().__init__(f"{service} API failed: {error} (retries: {retry_count})")


class GeminiClient:
    """Async wrapper for Google Gemini API with timeout and logging."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
        max_retries: Optional[int] = None,
        timeout: Optional[int] = None,
    ):
        """
        Initialise Gemini client.

        Args:
            api_key: Gemini API key (defaults to settings.GEMINI_API_KEY).
            model_name: Model identifier (defaults to settings.GEMINI_MODEL).
            max_retries: Transport attempts per call before giving up.
            timeout: Request timeout in seconds.
        """
        # Lazy import to avoid circular dependency at module level
        from config.settings import settings

        self.api_key = api_key or settings.GEMINI_API_KEY
        self.model_name = model_name or settings.GEMINI_MODEL
        self.max_retries = max_retries if max_retries is not None else settings.GEMINI_MAX_RETRIES
        self.timeout = timeout if timeout is not None else settings.GEMINI_TIMEOUT

        if not self.api_key:
            raise ValueError("Gemini API key required — set GEMINI_API_KEY in .env")

        self.client = genai.Client(api_key=self.api_key)

    async def generate_content(
        self,
        prompt: str,
        temperature: Optional[float] = None,
        top_k: Optional[int] = None,
        top_p: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_mime_type: Optional[str] = "application/json",
        model_name: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> str:
        """
        Generate text content via Gemini API.

        Args:
            prompt: The user prompt text.
            temperature: Sampling temperature (0-1).
            top_k: Sampling breadth limit.
            top_p: Nucleus sampling limit.
            max_tokens: Maximum output tokens.
            response_mime_type: Response format hint; ``None`` for free text.
            model_name: Overrides the client's default model for this call.
            request_id: UUID for log correlation.

        Returns:
            Generated text string.

        Raises:
            ExternalAPIError: If the API call fails after all attempts.
        """
        from config.settings import settings

        model = model_name or self.model_name
        temp = temperature if temperature is not None else settings.PRIMARY_TEMPERATURE

        generation_config = types.GenerateContentConfig(
            temperature=temp,
            top_k=top_k if top_k is not None else settings.GEMINI_TOP_K,
            top_p=top_p if top_p is not None else settings.GEMINI_TOP_P,
            max_output_tokens=max_tokens or settings.GEMINI_MAX_OUTPUT_TOKENS,
        )
        if response_mime_type:
            generation_config.response_mime_type = response_mime_type

        logger.debug(
            "Calling Gemini API",
            extra={
                "request_id": request_id,
                "model": model,
                "prompt_length": len(prompt),
                "temperature": temp,
                "timeout": self.timeout,
            },
        )

        last_error: Optional[Exception] = None
        for attempt in range(self.max_retries):
            try:
                loop = asyncio.get_running_loop()
                response = await asyncio.wait_for(
                    loop.run_in_executor(
                        None,
                        lambda: self.client.models.generate_content(
                            model=model,
                            contents=prompt,
                            config=generation_config,
                        ),
                    ),
                    timeout=self.timeout,
                )

                result_text = response.text or ""
                logger.info(
                    "Gemini API success",
                    extra={
                        "request_id": request_id,
                        "response_length": len(result_text),
                        "model": model,
                    },
                )
                return result_text

            except asyncio.TimeoutError:
                last_error = asyncio.TimeoutError(f"Gemini API timeout after {self.timeout}s")
                logger.warning(
                    "Gemini API timeout (attempt %d/%d)",
                    attempt + 1,
                    self.max_retries,
                    extra={"request_id": request_id, "timeout": self.timeout},
                )
            except Exception as exc:
                last_error = exc
                logger.warning(
                    "Gemini API error (attempt %d/%d)",
                    attempt + 1,
                    self.max_retries,
                    extra={
                        "request_id": request_id,
                        "error": str(exc),
                        "error_type": type(exc).__name__,
                    },
                )

            if attempt < self.max_retries - 1:
                await asyncio.sleep(1)

        logger.error(
            "Gemini API failed after retries",
            extra={"request_id": request_id, "max_retries": self.max_retries},
        )
        raise ExternalAPIError(
            service="Gemini",
            error=str(last_error),
            retry_count=self.max_retries,
        )
