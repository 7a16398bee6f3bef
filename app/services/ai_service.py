"""
app/services/ai_service.py

Purpose: Gemini language model client

- Single async entry point for text and JSON completions
- Sampling configuration from settings
- Provider failures surface as ExternalServiceError
"""

from typing import Optional

from google import genai
from google.genai import types

from app.core.config import settings
from app.core.exceptions import ExternalServiceError
from app.core.logging import get_logger

logger = get_logger(__name__)

JSON_MIME_TYPE = "application/json"
TEXT_MIME_TYPE = "text/plain"


class GeminiService:
    """Thin async wrapper over the google-genai client."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key or settings.GEMINI_API_KEY
        if not self.api_key:
            raise ValueError("Gemini API key not configured")
        self.model = model or settings.GEMINI_MODEL
        self.client = genai.Client(api_key=self.api_key)

    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        response_mime_type: str = TEXT_MIME_TYPE,
    ) -> str:
        """
        Runs one completion and returns the response text.

        Raises:
            ExternalServiceError: If the call fails or returns no text
        """
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=settings.GEMINI_TEMPERATURE,
            top_p=settings.GEMINI_TOP_P,
            top_k=settings.GEMINI_TOP_K,
            max_output_tokens=settings.GEMINI_MAX_OUTPUT_TOKENS,
            response_mime_type=response_mime_type,
        )

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            logger.error(f"Gemini API error: {e}", exc_info=True)
            raise ExternalServiceError(
                "Language model request failed",
                details={"error_type": type(e).__name__},
            ) from e

        text = response.text
        if not text:
            logger.warning("Gemini returned an empty response")
            raise ExternalServiceError("Language model returned an empty response")

        logger.debug(f"Gemini response: {text[:200]}")
        return text
