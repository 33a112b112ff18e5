"""
Mock Chat Assistant

Answers from the menu context without any network call.
Used in development mode (ENV_MODE=development) and in tests.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
import re

from app.services.assistant.base import AssistantResult, BaseAssistant

logger = logging.getLogger(__name__)

_DISH_LINE = re.compile(r"^- (?P<name>.+?) \(\$(?P<price>[\d.]+)\):")


class MockAssistant(BaseAssistant):
    """
    Deterministic assistant for local use.

    Suggests menu dishes whose name shares a word with the question, or the
    first dishes on the menu otherwise.
    """

    def __init__(self, max_suggestions: int = 3):
        self.max_suggestions = max_suggestions
        logger.info("MockAssistant initialized")

    @property
    def provider_name(self) -> str:
        return "mock"

    async def reply(self, message: str, menu_context: str) -> AssistantResult:
        dishes = [
            (match.group("name"), match.group("price"))
            for match in map(_DISH_LINE.match, menu_context.splitlines())
            if match
        ]
        if not dishes:
            return AssistantResult(
                success=True,
                reply="The menu is empty right now. Please check back later!",
            )

        words = {w for w in re.findall(r"[a-z]+", message.lower()) if len(w) > 2}
        matches = [d for d in dishes if words & set(re.findall(r"[a-z]+", d[0].lower()))]
        picks = (matches or dishes)[: self.max_suggestions]

        suggestions = ", ".join(f"{name} (${price})" for name, price in picks)
        lead = "Here is what matches your question" if matches else "You might enjoy"
        return AssistantResult(success=True, reply=f"{lead}: {suggestions}.")

    async def health_check(self) -> bool:
        """Mock always returns healthy."""
        return True
