# =============================================================================
# agents/client.py - Shared OpenAI Client
# =============================================================================
# Lazily creates one OpenAI client for every assistant in this package and
# wraps the chat-completion call so failures surface as AssistantError.
# =============================================================================

import logging
from typing import Any

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

# Lazy-loaded OpenAI client
_client = None


class AssistantError(ApplicationError):
    """Error while talking to OpenAI."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("code", "OPENAI_ERROR")
        super().__init__(message, **kwargs)


def get_openai_client():
    """Get or create OpenAI client (lazy initialization)."""
    global _client
    if _client is None:
        if not settings.openai_configured:
            raise AssistantError(
                message="OpenAI is not configured",
                code="OPENAI_NOT_CONFIGURED",
                suggestion="Set OPENAI_API_KEY in your .env file"
            )
        from openai import OpenAI
        _client = OpenAI(api_key=settings.OPENAI_API_KEY)
    return _client


def complete(messages: list[dict[str, Any]], model: str, **options: Any) -> str:
    """
    Run a chat completion and return the first choice's text.

    Args:
        messages: OpenAI chat messages
        model: Model ID
        **options: Extra create() arguments (temperature, max_tokens, ...)

    Returns:
        The completion text, possibly empty

    Raises:
        AssistantError: If the API call fails
    """
    try:
        client = get_openai_client()
        response = client.chat.completions.create(model=model, messages=messages, **options)
    except AssistantError:
        raise
    except Exception as e:
        logger.error(f"OpenAI API error ({model}): {e}")
        raise AssistantError(
            message=f"OpenAI API call failed: {e}",
            suggestion="Check your OPENAI_API_KEY and network connection",
            details={"model": model}
        )

    content = response.choices[0].message.content if response.choices else None
    return content or ""
