# =============================================================================
# agents/ - AI Assistants
# =============================================================================
# This package contains the OpenAI-backed assistants:
# - chat_assistant.py: Customer chat widget replies
# - content_writer.py: Listing copy, SEO text and social posts
# - image_assistant.py: Photo enhancement suggestions, generated backgrounds
# - client.py: Shared lazy OpenAI client and AssistantError
#
# Prompts:
# - prompts/: System and user prompt builders
# =============================================================================

from agents.client import AssistantError, get_openai_client
from agents.chat_assistant import reply
from agents.content_writer import (
    generate_listing_copy,
    generate_social_post,
    generate_vehicle_content,
)
from agents.image_assistant import generate_background, suggest_enhancements

__all__ = [
    # Client
    "AssistantError",
    "get_openai_client",
    # Chat
    "reply",
    # Copy
    "generate_vehicle_content",
    "generate_social_post",
    "generate_listing_copy",
    # Images
    "suggest_enhancements",
    "generate_background",
]
