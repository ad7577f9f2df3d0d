# =============================================================================
# agents/prompts/ - System Prompts for AI Assistants
# =============================================================================
# This package contains the prompts each assistant sends:
# - assistant.py: Chat widget and image tool prompts
# - copywriter.py: Listing content, social posts and listing copy
# =============================================================================

from agents.prompts.assistant import (
    CHAT_SYSTEM_PROMPT,
    ENHANCE_SUGGESTIONS_PROMPT,
    build_background_prompt,
)
from agents.prompts.copywriter import (
    LISTING_COPY_SYSTEM_PROMPT,
    PLATFORM_GUIDES,
    build_listing_copy_prompt,
    build_social_prompts,
    build_vehicle_content_prompts,
    describe_vehicle,
)

__all__ = [
    "CHAT_SYSTEM_PROMPT",
    "ENHANCE_SUGGESTIONS_PROMPT",
    "build_background_prompt",
    "LISTING_COPY_SYSTEM_PROMPT",
    "PLATFORM_GUIDES",
    "build_listing_copy_prompt",
    "build_social_prompts",
    "build_vehicle_content_prompts",
    "describe_vehicle",
]
