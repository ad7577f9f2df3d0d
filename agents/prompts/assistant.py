# =============================================================================
# agents/prompts/assistant.py - Chat & Image Prompts
# =============================================================================
# Prompts for the customer chat widget and the image tools (vision
# suggestions, generated backgrounds).
# =============================================================================

CHAT_SYSTEM_PROMPT = (
    "You are a helpful car dealership AI assistant. You help customers with "
    "questions about vehicles, financing, and general dealership information."
)

ENHANCE_SUGGESTIONS_PROMPT = (
    "Analyze this image and suggest specific enhancements to improve its quality. "
    "Focus on aspects like lighting, color balance, contrast, and composition. "
    "Provide suggestions in a structured format with specific Cloudinary "
    "transformation parameters."
)


def build_background_prompt(scene: str) -> str:
    """Wrap the user's scene description for the image model."""
    return (
        f"Create a high-quality background image for a car dealership photo: {scene}. "
        "The image should be suitable for compositing a car in the foreground."
    )
