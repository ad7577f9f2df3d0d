# =============================================================================
# core/models/content.py - AI Content Schemas
# =============================================================================
# These models define the contract for OpenAI-backed features:
# - ChatMessage: One turn of chat widget history
# - VehicleInfo: Vehicle facts fed into copywriting prompts
# - GenerationOptions: Style knobs for listing copy
# - GeneratedContent: The JSON document the copywriter returns
# - SocialPlatformName: Platforms social posts can target
# =============================================================================

from enum import Enum

from pydantic import ConfigDict, Field

from .base import CamelModel


class ChatMessage(CamelModel):
    """
    One message from the chat widget history.

    sender == "user" is the customer; anything else is the assistant.
    """
    text: str = Field(default="", description="Message text")
    sender: str = Field(default="user", description="'user' or 'assistant'")

    @property
    def role(self) -> str:
        return "user" if self.sender == "user" else "assistant"


class VehicleInfo(CamelModel):
    """Vehicle facts used for copywriting. make, model and year are required by the routes."""

    model_config = ConfigDict(extra="allow")

    make: str | None = None
    model: str | None = None
    year: int | None = None
    trim: str | None = None
    mileage: int | None = None
    exterior_color: str | None = None
    interior_color: str | None = None
    fuel_type: str | None = None
    transmission: str | None = None
    engine: str | None = None
    drivetrain: str | None = None
    features: list[str] = Field(default_factory=list)
    condition: str | None = None
    price: float | None = None
    vin: str | None = None
    stock_number: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.make and self.model and self.year)


class ContentStyle(str, Enum):
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    LUXURY = "luxury"
    SPORTY = "sporty"


class ContentLength(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class GenerationOptions(CamelModel):
    """Copywriting options. Defaults produce a medium, professional description."""
    style: ContentStyle = ContentStyle.PROFESSIONAL
    length: ContentLength = ContentLength.MEDIUM
    highlight_count: int = Field(default=5, ge=1, le=10)
    target_audience: str | None = None
    include_call_to_action: bool = True
    emphasize_features: list[str] = Field(default_factory=list)
    dealership_name: str | None = None


class GeneratedContent(CamelModel):
    description: str = ""
    highlights: list[str] = Field(default_factory=list)
    seo_title: str = ""
    seo_description: str = ""
    social_media_post: str = ""


class SocialPlatformName(str, Enum):
    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    TWITTER = "twitter"
