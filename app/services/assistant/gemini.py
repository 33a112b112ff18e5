"""
Gemini Chat Assistant

Production implementation using the Gemini ``generateContent`` REST API.
Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - GEMINI_API_KEY must be set in environment

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
import time
from typing import Optional

import httpx

from app.core.config import Settings
from app.services.assistant.base import (
    SYSTEM_PROMPT,
    AssistantResult,
    BaseAssistant,
)

logger = logging.getLogger(__name__)


class GeminiAssistant(BaseAssistant):
    """
    Menu assistant backed by Google Gemini.

    The menu context is sent as the system instruction; the user message is
    the only content part.
    """

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        """
        Raises:
            ValueError: If GEMINI_API_KEY is not configured
        """
        if not settings.gemini_api_key:
            raise ValueError(
                "GEMINI_API_KEY is required for production mode. "
                "Set it in your .env file or environment variables."
            )

        self._api_key = settings.gemini_api_key
        self._url = f"{settings.gemini_base_url}/models/{settings.gemini_model}:generateContent"
        self._client = client or httpx.AsyncClient(timeout=settings.ai_timeout_seconds)
        logger.info(f"GeminiAssistant initialized (model={settings.gemini_model})")

    @property
    def provider_name(self) -> str:
        return "gemini"

    async def reply(self, message: str, menu_context: str) -> AssistantResult:
        payload = {
            "contents": [{"parts": [{"text": message}]}],
            "systemInstruction": {
                "parts": [{"text": SYSTEM_PROMPT.format(menu_context=menu_context)}]
            },
        }

        start = time.perf_counter()
        try:
            response = await self._client.post(
                self._url,
                params={"key": self._api_key},
                json=payload,
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Gemini API error {e.response.status_code}: {e.response.text[:500]}")
            return AssistantResult(success=False, error_message="Failed to get a response from the AI service.")
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Gemini request failed: {e}")
            return AssistantResult(success=False, error_message="Failed to get a response from the AI service.")

        elapsed_ms = (time.perf_counter() - start) * 1000

        try:
            text = body["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            text = None

        if not text:
            logger.warning("Gemini returned no usable reply")
            return AssistantResult(
                success=False,
                error_message="The AI didn't provide a valid response.",
                response_time_ms=elapsed_ms,
            )

        return AssistantResult(success=True, reply=text, response_time_ms=elapsed_ms)

    async def health_check(self) -> bool:
        try:
            response = await self._client.get(
                self._url.rsplit(":", 1)[0],
                params={"key": self._api_key},
            )
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    async def aclose(self) -> None:
        await self._client.aclose()
