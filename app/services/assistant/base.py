"""
Chat Assistant Abstract Base Class

Defines the interface contract for the menu chat assistant.
Both MockAssistant and GeminiAssistant implement these methods, so the
chat route behaves the same regardless of which one is active.

Author: Khalil Bannouri
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional


SYSTEM_PROMPT = """You are a friendly and helpful AI assistant for the Smart Cafeteria System.
Your goal is to answer questions about the menu, help users decide what to eat, and provide information about our services.
Base your answers STRICTLY on the menu data provided below. If a question is unrelated to the cafeteria or the menu, politely decline to answer.
Keep your answers concise, friendly, and relevant.

{menu_context}"""


@dataclass
class MenuEntry:
    """Menu line as shown to the assistant."""
    name: str
    description: str
    price: float
    category: str


@dataclass
class AssistantResult:
    """
    Standardized result from one assistant call.

    Attributes:
        success: Whether a usable reply was produced
        reply: Reply text
        error_message: Error description if the call failed
        response_time_ms: Time taken by the provider
    """
    success: bool
    reply: Optional[str] = None
    error_message: Optional[str] = None
    response_time_ms: float = 0.0


def build_menu_context(entries: Iterable[MenuEntry]) -> str:
    """
    Format available dishes grouped by category.

    Example:
        Here is the current menu:

        Category: Salads
        - Caesar Salad ($9.00): Romaine, parmesan, croutons
    """
    grouped: dict[str, list[str]] = {}
    for entry in entries:
        grouped.setdefault(entry.category, []).append(
            f"- {entry.name} (${entry.price:.2f}): {entry.description}"
        )

    context = "Here is the current menu:\n"
    for category, lines in grouped.items():
        context += f"\nCategory: {category}\n"
        context += "\n".join(lines)
    return context


class BaseAssistant(ABC):
    """Abstract base class for chat assistants."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name (e.g. "mock", "gemini")."""
        pass

    @abstractmethod
    async def reply(self, message: str, menu_context: str) -> AssistantResult:
        """
        Answer a user message using only the given menu context.

        Args:
            message: The user's question
            menu_context: Output of build_menu_context()
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check provider connectivity."""
        pass

    async def aclose(self) -> None:
        """Release provider resources."""
        return None
