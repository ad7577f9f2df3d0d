# =============================================================================
# core/services/content_service.py - AI Content Logic
# =============================================================================
# Glue between the content routes and the assistants in agents/:
# dealership lookup before generation, saving generated copy against the
# vehicles table, and mapping AssistantError onto API errors.
# =============================================================================

import logging
from typing import Any

from agents import (
    AssistantError,
    generate_background,
    generate_listing_copy,
    generate_social_post,
    generate_vehicle_content,
    suggest_enhancements,
)
from app.exceptions import MissingFieldError, ProviderError
from core.models.content import GeneratedContent, GenerationOptions, VehicleInfo
from core.services.enhancement_service import EnhancementService
from core.services.listing_service import ListingService
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

BACKGROUND_FOLDER = "generated-backgrounds"


def require_complete_vehicle(vehicle: VehicleInfo | None) -> VehicleInfo:
    if vehicle is None or not vehicle.is_complete:
        raise MissingFieldError("Missing required vehicle information", ["make", "model", "year"])
    return vehicle


class ContentService:
    """Service for AI-generated listing content and image helpers."""

    @staticmethod
    def _dealership_name(user_id: str) -> str | None:
        try:
            user = SupabaseClient.fetch_user_with_dealership(user_id)
        except SupabaseClientError as e:
            logger.warning(f"Could not load dealership for user {user_id}: {e.message}")
            return None
        dealership = (user or {}).get("dealerships") or {}
        return dealership.get("name")

    @staticmethod
    def generate_for_user(
        user_id: str,
        vehicle: VehicleInfo | None,
        options: GenerationOptions | None = None,
    ) -> GeneratedContent:
        """
        Generate listing content on behalf of a signed-in user.

        The user's dealership name is added to the options. When the vehicle
        has a stock number matching a vehicles row, the content is saved.

        Raises:
            MissingFieldError: make, model or year missing
            ProviderError: OpenAI failed
        """
        vehicle = require_complete_vehicle(vehicle)
        options = (options or GenerationOptions()).model_copy(
            update={"dealership_name": ContentService._dealership_name(user_id)}
        )

        try:
            content = generate_vehicle_content(vehicle, options)
        except AssistantError as e:
            raise ProviderError("Failed to generate content", error=e.message)

        if vehicle.stock_number:
            ContentService._save(vehicle.stock_number, content)
        return content

    @staticmethod
    def _save(stock_number: str, content: GeneratedContent) -> None:
        try:
            row = SupabaseClient.fetch_vehicle_by_stock_number(stock_number)
            if row:
                SupabaseClient.upsert_vehicle_content(row["id"], content.to_wire(), row.get("dealership_id"))
        except SupabaseClientError as e:
            raise ProviderError("Failed to save generated content", error=e.message)

    @staticmethod
    def social_post(
        vehicle: VehicleInfo | None,
        platform: str,
        include_image: bool = True,
        dealership_info: dict[str, Any] | None = None,
    ) -> str:
        vehicle = require_complete_vehicle(vehicle)
        try:
            return generate_social_post(vehicle, platform, include_image, dealership_info)
        except AssistantError as e:
            raise ProviderError(f"Failed to generate {platform} content", error=e.message)

    @staticmethod
    def listing_copy(
        listing_id: str,
        generate_description: bool,
        generate_features: bool,
        tone: str = "professional",
    ) -> dict[str, Any]:
        """
        Description and/or highlighted features for a stored listing.

        Raises:
            MissingFieldError: Neither flag set
            ListingNotFoundError: Unknown listing
            ProviderError: OpenAI failed
        """
        if not generate_description and not generate_features:
            raise MissingFieldError(
                "At least one of generateDescription or generateFeatures must be true",
                ["generateDescription", "generateFeatures"],
            )
        listing = ListingService.get_listing(listing_id)
        try:
            return generate_listing_copy(listing, generate_description, generate_features, tone)
        except AssistantError as e:
            raise ProviderError("Failed to generate listing content", error=e.message)

    @staticmethod
    def enhancement_suggestions(image_url: str | None) -> dict[str, Any]:
        """
        Returns:
            {"suggestions": str, "previewUrls": [{name, url}, ...]}
        """
        if not image_url:
            raise MissingFieldError("Image URL is required", ["imageUrl"])
        try:
            suggestions = suggest_enhancements(image_url)
        except AssistantError as e:
            raise ProviderError("Failed to generate enhancement suggestions", error=e.message)
        return {
            "suggestions": suggestions,
            "previewUrls": EnhancementService.suggestion_previews(image_url),
        }

    @staticmethod
    def background(prompt: str | None) -> dict[str, Any]:
        """Generate a background and store it in Cloudinary; returns {url, publicId, width, height}."""
        if not prompt:
            raise MissingFieldError("Prompt is required", ["prompt"])
        try:
            generated_url = generate_background(prompt)
        except AssistantError as e:
            raise ProviderError("Failed to generate background", error=e.message)
        return EnhancementService.upload_remote(generated_url, BACKGROUND_FOLDER)
