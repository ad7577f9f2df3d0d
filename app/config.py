# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Provider keys (OpenAI, Cloudinary, Stripe) are optional. When a provider is
# not configured, the routes that depend on it either return mock responses
# (Cloudinary uploads, listing content) or fail with a clear error.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key (used for the auth code exchange)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret for verifying Supabase access tokens"
    )

    # -------------------------------------------------------------------------
    # OpenAI Configuration
    # -------------------------------------------------------------------------

    OPENAI_API_KEY: str = Field(
        default="",
        description="OpenAI API key for chat and content generation"
    )

    OPENAI_CHAT_MODEL: str = Field(
        default="gpt-4",
        description="Model for the dealership chat assistant"
    )

    OPENAI_CONTENT_MODEL: str = Field(
        default="gpt-4-turbo",
        description="Model for listing copy (must support JSON mode)"
    )

    OPENAI_VISION_MODEL: str = Field(
        default="gpt-4o",
        description="Vision-capable model for image suggestions"
    )

    OPENAI_IMAGE_MODEL: str = Field(
        default="dall-e-3",
        description="Image model for generated backgrounds"
    )

    CHAT_TEMPERATURE: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Temperature for the chat assistant"
    )

    CHAT_MAX_TOKENS: int = Field(
        default=500,
        ge=1,
        le=4096,
        description="Max tokens for a chat assistant reply"
    )

    # -------------------------------------------------------------------------
    # Cloudinary Configuration
    # -------------------------------------------------------------------------

    CLOUDINARY_CLOUD_NAME: str = Field(default="", description="Cloudinary cloud name")
    CLOUDINARY_API_KEY: str = Field(default="", description="Cloudinary API key")
    CLOUDINARY_API_SECRET: str = Field(default="", description="Cloudinary API secret")
    CLOUDINARY_UPLOAD_PRESET: str = Field(default="", description="Optional upload preset")

    CLOUDINARY_RETRY_ATTEMPTS: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Extra attempts for retried Cloudinary calls"
    )

    CLOUDINARY_RETRY_DELAY_SECONDS: float = Field(
        default=1.0,
        ge=0.0,
        le=30.0,
        description="Fixed delay between retried Cloudinary calls"
    )

    # -------------------------------------------------------------------------
    # Stripe Configuration
    # -------------------------------------------------------------------------

    STRIPE_SECRET_KEY: str = Field(default="", description="Stripe secret API key")
    STRIPE_WEBHOOK_SECRET: str = Field(default="", description="Stripe webhook signing secret")
    STRIPE_API_VERSION: str = Field(default="2023-10-16", description="Pinned Stripe API version")

    STRIPE_PRICE_PRO: str = Field(default="price_pro", description="Stripe price ID for the Pro tier")
    STRIPE_PRICE_GROWTH: str = Field(default="price_growth", description="Stripe price ID for the Growth tier")
    STRIPE_PRICE_ENTERPRISE: str = Field(default="price_enterprise", description="Stripe price ID for the Enterprise tier")

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    API_HOST: str = Field(default="0.0.0.0", description="Host to bind the API server to")

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    APP_URL: str = Field(
        default="http://localhost:3000",
        description="Public URL of the dashboard (used for Stripe redirects)"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Image Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum image upload size in MB"
    )

    ALLOWED_IMAGE_FORMATS: str = Field(
        default="jpg,jpeg,png,webp",
        description="Allowed image formats (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def allowed_image_formats_list(self) -> list[str]:
        """
        Parse ALLOWED_IMAGE_FORMATS string into a list.

        Example: "jpg, PNG" -> ["jpg", "png"]
        """
        return [fmt.strip().lower().lstrip(".") for fmt in self.ALLOWED_IMAGE_FORMATS.split(",")]

    @property
    def max_upload_size_bytes(self) -> int:
        """Convert MB to bytes for file size validation."""
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def openai_configured(self) -> bool:
        return bool(self.OPENAI_API_KEY)

    @property
    def cloudinary_configured(self) -> bool:
        """Uploads need the cloud name and key; signed calls also need the secret."""
        return bool(self.CLOUDINARY_CLOUD_NAME and self.CLOUDINARY_API_KEY)

    @property
    def stripe_configured(self) -> bool:
        return bool(self.STRIPE_SECRET_KEY)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
