# =============================================================================
# agents/image_assistant.py - Image Suggestions & Generated Backgrounds
# =============================================================================
# OpenAI calls behind the image tools:
# - suggest_enhancements: vision model reviews a photo
# - generate_background: image model paints a backdrop for compositing
# =============================================================================

import logging

from app.config import settings
from agents.client import AssistantError, complete, get_openai_client
from agents.prompts import ENHANCE_SUGGESTIONS_PROMPT, build_background_prompt

logger = logging.getLogger(__name__)

NO_SUGGESTIONS = "No suggestions available"
SUGGESTION_MAX_TOKENS = 500

BACKGROUND_SIZE = "1792x1024"


def suggest_enhancements(image_url: str) -> str:
    """
    Ask the vision model how to improve a photo.

    Returns:
        Free-text suggestions, or a placeholder when the model says nothing

    Raises:
        AssistantError: If the call fails
    """
    messages = [{
        "role": "user",
        "content": [
            {"type": "text", "text": ENHANCE_SUGGESTIONS_PROMPT},
            {"type": "image_url", "image_url": {"url": image_url}},
        ],
    }]
    text = complete(messages, model=settings.OPENAI_VISION_MODEL, max_tokens=SUGGESTION_MAX_TOKENS)
    return text or NO_SUGGESTIONS


def generate_background(scene: str) -> str:
    """
    Generate a background image for the described scene.

    Args:
        scene: The user's description, e.g. "modern showroom at night"

    Returns:
        Temporary URL of the generated image

    Raises:
        AssistantError: If generation fails or returns no image
    """
    logger.info(f"Generating background: '{scene[:50]}'")
    try:
        client = get_openai_client()
        response = client.images.generate(
            model=settings.OPENAI_IMAGE_MODEL,
            prompt=build_background_prompt(scene),
            n=1,
            size=BACKGROUND_SIZE,
            quality="hd",
            style="natural",
        )
    except AssistantError:
        raise
    except Exception as e:
        logger.error(f"Image generation failed: {e}")
        raise AssistantError(
            message=f"Image generation failed: {e}",
            details={"model": settings.OPENAI_IMAGE_MODEL}
        )

    url = response.data[0].url if response.data else None
    if not url:
        raise AssistantError(message="No image generated", code="EMPTY_IMAGE")
    return url
