"""
Chat Assistant Factory

Builds the assistant the application lifespan keeps on ``app.state``.
Automatically selects Mock or Gemini based on ENV_MODE configuration.

Environment Switching:
    - ENV_MODE=development -> MockAssistant (no API calls)
    - ENV_MODE=staging     -> GeminiAssistant
    - ENV_MODE=production  -> GeminiAssistant

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging

from fastapi import Request

from app.core.config import Settings
from app.services.assistant.base import (
    AssistantResult,
    BaseAssistant,
    MenuEntry,
    build_menu_context,
)
from app.services.assistant.gemini import GeminiAssistant
from app.services.assistant.mock import MockAssistant

logger = logging.getLogger(__name__)


def build_assistant(settings: Settings) -> BaseAssistant:
    """
    Create the configured assistant.

    Raises:
        ValueError: If staging/production but GEMINI_API_KEY is missing
    """
    if settings.is_development:
        logger.info("Assistant: Using MockAssistant (development mode)")
        return MockAssistant()

    logger.info(f"Assistant: Using GeminiAssistant ({settings.env_mode.value} mode)")
    return GeminiAssistant(settings)


def get_assistant(request: Request) -> BaseAssistant:
    """Dependency returning the assistant built at startup."""
    return request.app.state.assistant


__all__ = [
    "build_assistant",
    "get_assistant",
    "build_menu_context",
    "AssistantResult",
    "BaseAssistant",
    "MenuEntry",
    "MockAssistant",
    "GeminiAssistant",
]
