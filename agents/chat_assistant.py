# =============================================================================
# agents/chat_assistant.py - Dealership Chat Assistant
# =============================================================================
# Answers customer questions from the chat widget. The widget sends the
# whole visible history with every message; it's replayed to OpenAI as-is.
# =============================================================================

import logging

from app.config import settings
from agents.client import AssistantError, complete
from agents.prompts import CHAT_SYSTEM_PROMPT
from core.models.content import ChatMessage

logger = logging.getLogger(__name__)


def build_chat_messages(message: str, history: list[ChatMessage] | None = None) -> list[dict[str, str]]:
    """System prompt, then the history in order, then the new message."""
    messages = [{"role": "system", "content": CHAT_SYSTEM_PROMPT}]
    for item in history or []:
        messages.append({"role": item.role, "content": item.text})
    messages.append({"role": "user", "content": message})
    return messages


def reply(message: str, history: list[ChatMessage] | None = None) -> str:
    """
    Generate the assistant's reply.

    Args:
        message: The customer's new message
        history: Earlier messages from the widget

    Returns:
        Reply text

    Raises:
        AssistantError: If OpenAI fails or returns nothing
    """
    messages = build_chat_messages(message, history)
    logger.info(f"Chat request with {len(messages) - 2} history messages")

    text = complete(
        messages,
        model=settings.OPENAI_CHAT_MODEL,
        temperature=settings.CHAT_TEMPERATURE,
        max_tokens=settings.CHAT_MAX_TOKENS,
    )
    if not text:
        raise AssistantError(message="No response from OpenAI", code="EMPTY_COMPLETION")
    return text
